from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum


class Language(str, Enum):
    HINDI = "hindi"
    ENGLISH = "english"
    HINGLISH = "hinglish"


class KundliStep(str, Enum):
    """Steps of the birth-detail acquisition flow."""

    IDLE = "IDLE"
    ASK_NAME = "ASK_NAME"
    ASK_DATE = "ASK_DATE"
    ASK_TIME = "ASK_TIME"
    ASK_PLACE = "ASK_PLACE"
    GENERATE = "GENERATE"


class IntentType(str, Enum):
    CREATE = "CREATE"
    MATCH = "MATCH"
    QUESTION = "QUESTION"
    NONE = "NONE"


class Body(str, Enum):
    """Bodies placed in a Vedic chart, in report order."""

    SUN = "sun"
    MOON = "moon"
    MARS = "mars"
    MERCURY = "mercury"
    JUPITER = "jupiter"
    VENUS = "venus"
    SATURN = "saturn"
    RAHU = "rahu"
    KETU = "ketu"


@dataclass(frozen=True)
class BirthDetails:
    """Civil birth moment and location consumed by the chart engine."""

    date: date
    time: time
    latitude: float
    longitude: float
    timezone_offset: float  # Hours east of UTC, e.g. 5.5 for IST


@dataclass(frozen=True)
class ParsedBirthDetails:
    """Fields recognized in a single free-form message."""

    date: str | None = None  # YYYY-MM-DD
    time: str | None = None  # HH:MM, 24-hour
    place: str | None = None
    missing_fields: frozenset[str] = frozenset()
    confidence: float = 0.0

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields


@dataclass(frozen=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class KundliIntent:
    is_kundli_request: bool
    type: IntentType
    language: Language


@dataclass(frozen=True)
class GeoResolution:
    latitude: float
    longitude: float
    timezone_offset: float
    label: str
    country: str
    approximate: bool = False


@dataclass(frozen=True)
class Rashi:
    index: int  # 0-11, Aries first
    english: str
    hindi: str
    hinglish: str
    lord: str


@dataclass(frozen=True)
class Nakshatra:
    index: int  # 0-26, Ashwini first
    english: str
    hindi: str
    lord: str
    deity: str


@dataclass(frozen=True)
class BodyPosition:
    """Raw oracle answer for one body: longitude in degrees and daily speed."""

    longitude: float
    speed: float = 0.0


@dataclass(frozen=True)
class ZodiacPosition:
    longitude: float  # Normalized into [0, 360)
    rashi: Rashi
    nakshatra: Nakshatra
    pada: int  # 1-4


@dataclass(frozen=True)
class PlanetPlacement:
    body: Body
    longitude: float
    rashi: Rashi
    nakshatra: Nakshatra
    pada: int
    house: int  # Whole-sign house counted from the Lagna, 1-12
    retrograde: bool


@dataclass(frozen=True)
class DashaPeriod:
    """One Mahadasha span, expressed in years of age since birth."""

    lord: str
    start_age: float
    end_age: float
    years: float  # Length of this span; the full period length after the first


@dataclass(frozen=True)
class MahadashaState:
    current_lord: str
    total_years: int
    years_before: float  # Age at which the current period started
    years_completed: float
    years_remaining: float
    approximate_end_date: date
    birth_balance_years: float


@dataclass(frozen=True)
class KundliResult:
    """Immutable snapshot of a computed birth chart."""

    birth: BirthDetails
    julian_day: float
    ayanamsa: float
    lagna_longitude: float
    lagna: Rashi
    moon_longitude: float
    moon_rashi: Rashi
    nakshatra: Nakshatra
    pada: int
    mahadasha: MahadashaState
    planets: dict[Body, PlanetPlacement]


@dataclass(frozen=True)
class KundliSession:
    """Per-user state of the birth-detail acquisition flow."""

    step: KundliStep
    language: Language
    started_at: float  # Unix timestamp
    name: str | None = None
    date: str | None = None
    time: str | None = None
    place: str | None = None


@dataclass(frozen=True)
class FlowResult:
    """What the conversation host needs to know about one processed message."""

    is_kundli_flow: bool
    skip_llm: bool = False
    direct_response: str | None = None
    session: KundliSession | None = None
    kundli: KundliResult | None = None
    kundli_data: dict | None = None


@dataclass(frozen=True)
class DailyHoroscope:
    sign: Rashi
    date: date
    day_ruler: str
    prediction: str
    lucky_number: int
    lucky_color: tuple[str, str]  # (name, hex)
    transit_houses: dict[Body, int]
