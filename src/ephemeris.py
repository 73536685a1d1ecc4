"""Adapter around the astronomical oracle (Swiss Ephemeris).

Everything that knows about the oracle's calling conventions and result
shapes lives here; the rest of the engine sees only ``BodyPosition``,
``HouseCusps`` and plain floats, or an ``OracleFailure``.
"""

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import swisseph as swe

from errors import OracleFailure
from models import Body, BodyPosition

logger = logging.getLogger("ephemeris")

PLACIDUS = "P"

SWISS_BODY_IDS = {
    Body.SUN: swe.SUN,
    Body.MOON: swe.MOON,
    Body.MARS: swe.MARS,
    Body.MERCURY: swe.MERCURY,
    Body.JUPITER: swe.JUPITER,
    Body.VENUS: swe.VENUS,
    Body.SATURN: swe.SATURN,
    Body.RAHU: swe.MEAN_NODE,
}


@dataclass(frozen=True)
class HouseCusps:
    """Tropical house cusps; ``cusps[0]`` is the first house."""

    cusps: tuple[float, ...]
    ascendant: float


class Ephemeris(Protocol):
    def position(self, julian_day: float, body: Body) -> BodyPosition:
        """Sidereal longitude and speed of ``body`` at ``julian_day`` (UT)."""
        ...

    def houses(
        self,
        julian_day: float,
        latitude: float,
        longitude: float,
        system: str = PLACIDUS,
    ) -> HouseCusps:
        """Tropical house cusps for the given moment and place."""
        ...

    def ayanamsa(self, julian_day: float) -> float:
        ...


def _first(value: Any) -> float | None:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return float(value[0]) if len(value) > 0 else None
    return None


def normalize_house_result(raw: Any) -> HouseCusps:
    """Turn whatever a house-system call returned into ``HouseCusps``.

    Accepts the ``(cusps, ascmc)`` pair returned by pyswisseph as well as
    mapping shapes used by other bindings (``{"data": {"points": [...]}}``,
    ``{"data": {"houses": [...]}}``, ``{"ascendant": ...}``).

    Raises:
        OracleFailure: If no ascendant can be found in ``raw``.
    """
    if (
        isinstance(raw, Sequence)
        and not isinstance(raw, (str, bytes))
        and len(raw) == 2
        and all(isinstance(part, Sequence) for part in raw)
    ):
        cusps, ascmc = raw
        ascendant = _first(ascmc)
        if ascendant is None:
            ascendant = _first(cusps)
        if ascendant is not None:
            return HouseCusps(tuple(float(c) for c in cusps), ascendant)

    if isinstance(raw, Mapping):
        data = raw.get("data") if isinstance(raw.get("data"), Mapping) else {}
        cusps = data.get("houses") or raw.get("houses") or ()
        for candidate in (
            _first(data.get("points")),
            _first(data.get("houses")),
            raw.get("ascendant"),
            _first(raw.get("points")),
            _first(raw.get("houses")),
        ):
            if candidate is not None:
                return HouseCusps(tuple(float(c) for c in cusps), float(candidate))

    raise OracleFailure("houses", f"no ascendant in result of type {type(raw).__name__}")


class SwissEphemeris:
    """``Ephemeris`` backed by pyswisseph with the Lahiri ayanamsa."""

    def __init__(self, ephe_path: str | None = None):
        path = ephe_path or os.getenv("SWISSEPH_PATH")
        if path:
            swe.set_ephe_path(path)
        swe.set_sid_mode(swe.SIDM_LAHIRI, 0, 0)
        self._flags = swe.FLG_SWIEPH | swe.FLG_SIDEREAL | swe.FLG_SPEED

    def position(self, julian_day: float, body: Body) -> BodyPosition:
        try:
            body_id = SWISS_BODY_IDS[body]
        except KeyError:
            raise ValueError(f"{body.value} is not an ephemeris body") from None

        try:
            xx, ret_flag = swe.calc_ut(julian_day, body_id, self._flags)
        except swe.Error as e:
            logger.error(f"Ephemeris error for {body.value} at JD {julian_day}: {e}")
            raise OracleFailure("position", f"{body.value}: {e}") from e

        if ret_flag < 0:
            logger.error(f"Ephemeris returned status {ret_flag} for {body.value}")
            raise OracleFailure("position", f"{body.value}: status {ret_flag}")

        return BodyPosition(longitude=float(xx[0]), speed=float(xx[3]))

    def houses(
        self,
        julian_day: float,
        latitude: float,
        longitude: float,
        system: str = PLACIDUS,
    ) -> HouseCusps:
        try:
            raw = swe.houses(julian_day, latitude, longitude, system.encode("ascii"))
        except swe.Error as e:
            logger.error(f"House computation failed at {latitude},{longitude}: {e}")
            raise OracleFailure("houses", str(e)) from e
        return normalize_house_result(raw)

    def ayanamsa(self, julian_day: float) -> float:
        return float(swe.get_ayanamsa_ut(julian_day))
