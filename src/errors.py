"""Error types raised by the Kundli engine and the birth-detail flow."""


class KundliError(Exception):
    """Base class for all Kundli errors."""


class PlaceNotFound(KundliError):
    """The geocoding provider has no result for the requested place."""

    def __init__(self, place: str):
        super().__init__(f"Place not found: {place!r}")
        self.place = place


class OracleFailure(KundliError):
    """The ephemeris or house-system oracle could not produce a value."""

    def __init__(self, operation: str, detail: str):
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail


class ComputationFailure(KundliError):
    """Chart generation failed; the acquisition session cannot continue."""
