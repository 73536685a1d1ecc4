"""Vimshottari Mahadasha calculation.

The Vimshottari system divides a 120-year cycle between nine lords in a
fixed order. The Moon's Nakshatra at birth picks the first lord, and how
far the Moon had already travelled through that Nakshatra decides how much
of the first period is left at birth (the birth balance).
"""

import logging
import math
from collections.abc import Iterator
from datetime import datetime

from dateutil.relativedelta import relativedelta

from models import DashaPeriod, MahadashaState
from zodiac import NAKSHATRA_SPAN

logger = logging.getLogger("dasha")

DASHA_SEQUENCE = (
    "Ketu",
    "Venus",
    "Sun",
    "Moon",
    "Mars",
    "Rahu",
    "Jupiter",
    "Saturn",
    "Mercury",
)

DASHA_YEARS = {
    "Ketu": 7,
    "Venus": 20,
    "Sun": 6,
    "Moon": 10,
    "Mars": 7,
    "Rahu": 18,
    "Jupiter": 16,
    "Saturn": 19,
    "Mercury": 17,
}

CYCLE_YEARS = sum(DASHA_YEARS.values())  # 120
SHORTEST_PERIOD_YEARS = min(DASHA_YEARS.values())

DAYS_PER_YEAR = 365.25


def birth_balance(birth_lord: str, moon_longitude: float) -> float:
    """Years of the birth lord's Mahadasha still to run at the moment of birth."""
    progress = (moon_longitude % NAKSHATRA_SPAN) / NAKSHATRA_SPAN
    return DASHA_YEARS[birth_lord] * (1 - progress)


def dasha_timeline(birth_lord: str, moon_longitude: float) -> Iterator[DashaPeriod]:
    """Yield successive Mahadashas from birth, without end.

    The first period is the birth balance of ``birth_lord``; every later
    period runs for its full length, so consecutive periods share their
    boundaries exactly.
    """
    if birth_lord not in DASHA_YEARS:
        raise ValueError(f"Unknown dasha lord: {birth_lord}")

    start_index = DASHA_SEQUENCE.index(birth_lord)
    start = 0.0
    end = birth_balance(birth_lord, moon_longitude)
    yield DashaPeriod(birth_lord, start, end, end)

    step = 1
    while True:
        lord = DASHA_SEQUENCE[(start_index + step) % len(DASHA_SEQUENCE)]
        start, end = end, end + DASHA_YEARS[lord]
        yield DashaPeriod(lord, start, end, DASHA_YEARS[lord])
        step += 1


def age_in_years(birth: datetime, now: datetime) -> float:
    return (now - birth).total_seconds() / (DAYS_PER_YEAR * 86400)


def current_period(
    birth_lord: str, moon_longitude: float, age_years: float
) -> DashaPeriod:
    """Return the Mahadasha running at ``age_years``.

    The walk is bounded: after the birth balance every period lasts at least
    ``SHORTEST_PERIOD_YEARS``, so ``2 + age // SHORTEST_PERIOD_YEARS`` periods
    always reach past any non-negative age.
    """
    age = max(age_years, 0.0)
    limit = 2 + int(age // SHORTEST_PERIOD_YEARS)
    timeline = dasha_timeline(birth_lord, moon_longitude)
    for _ in range(limit):
        period = next(timeline)
        if period.end_age > age:
            return period
    raise AssertionError(f"No Mahadasha found within {limit} periods for age {age}")


def calculate_mahadasha(
    birth: datetime,
    birth_lord: str,
    moon_longitude: float,
    now: datetime,
) -> MahadashaState:
    """Compute the Mahadasha running at ``now`` for a birth at ``birth``.

    Args:
        birth: Local birth date and time.
        birth_lord: Lord of the Moon's Nakshatra at birth.
        moon_longitude: Sidereal Moon longitude at birth, in degrees.
        now: Reference moment, in the same clock as ``birth``.

    Returns:
        The current lord, how long it has run and how long it has left, with
        an approximate calendar end date (whole years plus whole months).
    """
    age = age_in_years(birth, now)
    period = current_period(birth_lord, moon_longitude, age)

    total = DASHA_YEARS[period.lord]
    years_completed = max(age, 0.0) - period.start_age
    years_remaining = total - years_completed

    whole_years = math.floor(years_remaining)
    months = math.floor((years_remaining - whole_years) * 12)
    end = now + relativedelta(years=whole_years, months=months)

    logger.debug(
        f"Mahadasha {period.lord}: {years_completed:.2f}y done, "
        f"{years_remaining:.2f}y left (age {age:.2f})"
    )

    return MahadashaState(
        current_lord=period.lord,
        total_years=total,
        years_before=period.start_age,
        years_completed=years_completed,
        years_remaining=years_remaining,
        approximate_end_date=end.date(),
        birth_balance_years=birth_balance(birth_lord, moon_longitude),
    )
