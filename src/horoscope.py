"""Daily transits and rule-based horoscope for a natal sign."""

import logging
from datetime import datetime, timezone

from astrology import julian_day, planetary_positions
from ephemeris import Ephemeris
from models import Body, DailyHoroscope, Rashi, ZodiacPosition
from zodiac import classify, find_rashi, house_offset

logger = logging.getLogger("horoscope")

# Sunday first, matching the traditional weekday lords
DAY_RULERS = ("Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn")

MOON_HOUSE_PREDICTIONS = {
    1: "Your emotions are heightened today. Focus on self-care and personal matters.",
    2: "Financial matters need attention. A good day for planning expenses.",
    3: "Communication flows easily. Reach out to siblings or neighbors.",
    4: "Home and family matters take priority. Spend time with loved ones.",
    5: "Creativity is strong. Romance and children bring joy.",
    6: "Focus on health and daily routines. Help others if you can.",
    7: "Relationships are in focus. Partnership matters need attention.",
    8: "A transformative day. Research and investigation favored.",
    9: "Learning and travel are highlighted. Seek higher knowledge.",
    10: "Career matters demand attention. Professional recognition possible.",
    11: "Social connections bring opportunities. Friends are supportive.",
    12: "Rest and reflection needed. Spiritual practices are beneficial.",
}

JUPITER_BENEFIC_HOUSES = frozenset({1, 2, 5, 7, 9, 11})
SATURN_CHALLENGING_HOUSES = frozenset({1, 4, 7, 8, 10, 12})
VENUS_PLEASANT_HOUSES = frozenset({1, 5, 7})

LUCKY_NUMBERS = {
    "Sun": (1, 4, 10),
    "Moon": (2, 7, 11),
    "Mars": (3, 9, 18),
    "Mercury": (5, 14, 23),
    "Jupiter": (3, 12, 21),
    "Venus": (6, 15, 24),
    "Saturn": (8, 17, 26),
}

LUCKY_COLORS = {
    "Sun": ("Gold", "#FFD700"),
    "Moon": ("White", "#FFFFFF"),
    "Mars": ("Red", "#E53935"),
    "Mercury": ("Green", "#43A047"),
    "Jupiter": ("Yellow", "#FFC107"),
    "Venus": ("Pink", "#EC407A"),
    "Saturn": ("Blue", "#1E88E5"),
}


def day_ruler(day: datetime) -> str:
    # datetime.weekday() is Monday=0
    return DAY_RULERS[(day.weekday() + 1) % 7]


def today_transits(
    ephemeris: Ephemeris, now: datetime | None = None
) -> dict[Body, ZodiacPosition]:
    """Sidereal placement of every chart body at ``now`` (UTC)."""
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    jd = julian_day(now.date(), now.time(), 0.0)
    return {
        body: classify(longitude)
        for body, (longitude, _speed) in planetary_positions(ephemeris, jd).items()
    }


def transit_houses(
    natal: Rashi, transits: dict[Body, ZodiacPosition]
) -> dict[Body, int]:
    return {body: house_offset(natal, pos.rashi) for body, pos in transits.items()}


def generate_prediction(natal: Rashi, houses: dict[Body, int], ruler: str) -> str:
    sentences = [
        MOON_HOUSE_PREDICTIONS.get(houses[Body.MOON], "A balanced day awaits you.")
    ]

    if houses[Body.JUPITER] in JUPITER_BENEFIC_HOUSES:
        sentences.append("Jupiter's blessings bring growth and opportunities.")

    if houses[Body.SATURN] in SATURN_CHALLENGING_HOUSES:
        sentences.append("Stay disciplined and patient. Hard work will pay off.")
    else:
        sentences.append("Saturn supports your steady efforts today.")

    if houses[Body.VENUS] in VENUS_PLEASANT_HOUSES:
        sentences.append("Love and beauty surround you. Enjoy life's pleasures.")

    if ruler == natal.lord:
        sentences.append(
            f"Today is especially favorable as {ruler} rules both the day and your sign!"
        )

    return " ".join(sentences)


def lucky_number(natal: Rashi, day: datetime) -> int:
    candidates = LUCKY_NUMBERS.get(natal.lord, (7, 14, 21))
    return candidates[(day.day + day.month) % len(candidates)]


def lucky_color(natal: Rashi, ruler: str, day: datetime) -> tuple[str, str]:
    lord = natal.lord if day.day % 2 == 0 else ruler
    return LUCKY_COLORS.get(lord, LUCKY_COLORS["Jupiter"])


def daily_horoscope(
    sign_name: str, ephemeris: Ephemeris, now: datetime | None = None
) -> DailyHoroscope:
    """Build today's horoscope for a natal sign.

    Args:
        sign_name: English, Hinglish or Hindi Rashi name, e.g. "Leo" or "Simha".
        ephemeris: Oracle used for today's positions.
        now: Reference moment in UTC (defaults to the current time).

    Raises:
        ValueError: If ``sign_name`` is not a known Rashi.
        OracleFailure: If today's positions cannot be computed.
    """
    natal = find_rashi(sign_name)
    if natal is None:
        raise ValueError(f"Invalid sign name: {sign_name!r}")

    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    houses = transit_houses(natal, today_transits(ephemeris, now))
    ruler = day_ruler(now)

    logger.info(f"Horoscope for {natal.english} on {now.date()}: day ruler {ruler}")

    return DailyHoroscope(
        sign=natal,
        date=now.date(),
        day_ruler=ruler,
        prediction=generate_prediction(natal, houses, ruler),
        lucky_number=lucky_number(natal, now),
        lucky_color=lucky_color(natal, ruler, now),
        transit_houses=houses,
    )
