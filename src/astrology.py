"""Vedic birth chart (Kundli) computation."""

import json
import logging
import re
from datetime import date, datetime, time, timedelta

from dasha import calculate_mahadasha
from ephemeris import Ephemeris
from models import Body, BirthDetails, KundliResult, PlanetPlacement
from zodiac import classify, house_offset, normalize_longitude, rashi_for

logger = logging.getLogger("astrology")

J2000 = datetime(2000, 1, 1, 12, 0)
J2000_JULIAN_DAY = 2451545.0

QUERIED_BODIES = (
    Body.SUN,
    Body.MOON,
    Body.MARS,
    Body.MERCURY,
    Body.JUPITER,
    Body.VENUS,
    Body.SATURN,
    Body.RAHU,
)

KUNDLI_MARKER_RE = re.compile(r"\[\[KUNDLI_DATA:(.*)\]\]", re.DOTALL)


def julian_day(birth_date: date, birth_time: time, timezone_offset: float) -> float:
    """Julian Day (UT) of a local civil moment in the Gregorian calendar.

    The local time is shifted to UTC by subtracting ``timezone_offset`` hours;
    no timezone database is consulted.
    """
    local = datetime.combine(birth_date, birth_time.replace(tzinfo=None))
    utc = local - timedelta(hours=timezone_offset)
    return J2000_JULIAN_DAY + (utc - J2000).total_seconds() / 86400


def to_sidereal(tropical_longitude: float, ayanamsa: float) -> float:
    return normalize_longitude(tropical_longitude - ayanamsa)


def planetary_positions(
    ephemeris: Ephemeris, jd: float
) -> dict[Body, tuple[float, float]]:
    """Sidereal (longitude, speed) for every chart body at ``jd``.

    Ketu is not queried: it sits exactly opposite Rahu and moves with it.

    Raises:
        OracleFailure: If the ephemeris cannot place any of the bodies.
    """
    positions = {}
    for body in QUERIED_BODIES:
        result = ephemeris.position(jd, body)
        positions[body] = (normalize_longitude(result.longitude), result.speed)

    rahu_longitude, rahu_speed = positions[Body.RAHU]
    positions[Body.KETU] = (normalize_longitude(rahu_longitude + 180), rahu_speed)
    return positions


def calculate_lagna(
    ephemeris: Ephemeris, jd: float, latitude: float, longitude: float
) -> tuple[float, float]:
    """Return (sidereal ascendant, ayanamsa) for the given moment and place."""
    houses = ephemeris.houses(jd, latitude, longitude)
    ayanamsa = ephemeris.ayanamsa(jd)
    lagna = to_sidereal(houses.ascendant, ayanamsa)
    logger.debug(
        f"Tropical ascendant {houses.ascendant:.4f}, ayanamsa {ayanamsa:.4f}, "
        f"sidereal {lagna:.4f}"
    )
    return lagna, ayanamsa


def compute_kundli(
    birth: BirthDetails, ephemeris: Ephemeris, now: datetime | None = None
) -> KundliResult:
    """Compute the Kundli for ``birth``.

    Given the same birth details, the same oracle answers and the same
    ``now``, the result is identical.

    Args:
        birth: Birth date, time, coordinates and UTC offset.
        ephemeris: Oracle used for positions, houses and ayanamsa.
        now: Reference moment for the running Mahadasha (defaults to the
            current local time).

    Raises:
        OracleFailure: If any oracle call fails.
    """
    now = now or datetime.now()
    jd = julian_day(birth.date, birth.time, birth.timezone_offset)
    logger.info(
        f"Computing Kundli for {birth.date} {birth.time} at "
        f"{birth.latitude},{birth.longitude} (UTC{birth.timezone_offset:+g}), JD {jd:.5f}"
    )

    positions = planetary_positions(ephemeris, jd)
    lagna_longitude, ayanamsa = calculate_lagna(
        ephemeris, jd, birth.latitude, birth.longitude
    )
    lagna = rashi_for(lagna_longitude)

    planets = {}
    for body, (longitude, speed) in positions.items():
        placed = classify(longitude)
        planets[body] = PlanetPlacement(
            body=body,
            longitude=placed.longitude,
            rashi=placed.rashi,
            nakshatra=placed.nakshatra,
            pada=placed.pada,
            house=house_offset(lagna, placed.rashi),
            retrograde=speed < 0,
        )

    moon = planets[Body.MOON]
    mahadasha = calculate_mahadasha(
        datetime.combine(birth.date, birth.time.replace(tzinfo=None)),
        moon.nakshatra.lord,
        moon.longitude,
        now,
    )

    logger.info(
        f"Lagna {lagna.english}, Moon {moon.rashi.english}, "
        f"{moon.nakshatra.english} pada {moon.pada}, Mahadasha {mahadasha.current_lord}"
    )

    return KundliResult(
        birth=birth,
        julian_day=jd,
        ayanamsa=ayanamsa,
        lagna_longitude=lagna_longitude,
        lagna=lagna,
        moon_longitude=moon.longitude,
        moon_rashi=moon.rashi,
        nakshatra=moon.nakshatra,
        pada=moon.pada,
        mahadasha=mahadasha,
        planets=planets,
    )


def kundli_to_dict(result: KundliResult) -> dict:
    """JSON-ready view of a Kundli for clients."""
    mahadasha = result.mahadasha
    return {
        "birthDetails": {
            "date": result.birth.date.isoformat(),
            "time": result.birth.time.strftime("%H:%M"),
            "latitude": result.birth.latitude,
            "longitude": result.birth.longitude,
            "timezone": result.birth.timezone_offset,
        },
        "lagna": {
            "english": result.lagna.english,
            "hindi": result.lagna.hindi,
            "lord": result.lagna.lord,
            "longitude": round(result.lagna_longitude, 4),
        },
        "moonSign": {
            "english": result.moon_rashi.english,
            "hindi": result.moon_rashi.hindi,
            "lord": result.moon_rashi.lord,
        },
        "nakshatra": {
            "english": result.nakshatra.english,
            "hindi": result.nakshatra.hindi,
            "lord": result.nakshatra.lord,
            "deity": result.nakshatra.deity,
            "pada": result.pada,
        },
        "mahadasha": {
            "current": mahadasha.current_lord,
            "totalYears": mahadasha.total_years,
            "yearsCompleted": round(mahadasha.years_completed, 1),
            "yearsRemaining": round(mahadasha.years_remaining, 1),
            "approximateEndDate": mahadasha.approximate_end_date.isoformat(),
            "birthDashaBalance": round(mahadasha.birth_balance_years, 1),
        },
        "planets": {
            body.value: {
                "longitude": round(placement.longitude, 4),
                "rashi": placement.rashi.english,
                "nakshatra": placement.nakshatra.english,
                "pada": placement.pada,
                "house": placement.house,
                "retrograde": placement.retrograde,
            }
            for body, placement in result.planets.items()
        },
        "calculations": {
            "julianDay": round(result.julian_day, 6),
            "ayanamsa": round(result.ayanamsa, 4),
        },
    }


def kundli_marker(data: dict) -> str:
    return f"[[KUNDLI_DATA:{json.dumps(data, ensure_ascii=False)}]]"


def extract_kundli_marker(text: str) -> dict | None:
    """Return the Kundli data embedded in a reply, or None if there is none."""
    match = KUNDLI_MARKER_RE.search(text)
    if not match:
        return None
    try:
        return json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.warning(f"Malformed Kundli marker in reply: {e}")
        return None
