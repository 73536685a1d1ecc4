"""Shared fixtures: a scripted ephemeris standing in for Swiss Ephemeris."""

from datetime import date, datetime, time

import pytest

from ephemeris import HouseCusps
from errors import OracleFailure
from models import Body, BirthDetails, BodyPosition

# Sidereal (longitude, speed) answered for every Julian Day
SAMPLE_POSITIONS = {
    Body.SUN: (287.0, 1.01),
    Body.MOON: (222.5, 13.2),  # Scorpio, Anuradha pada 3
    Body.MARS: (5.0, 0.7),
    Body.MERCURY: (300.0, -0.5),  # retrograde
    Body.JUPITER: (35.0, 0.02),
    Body.VENUS: (265.0, 1.2),
    Body.SATURN: (266.0, 0.1),
    Body.RAHU: (320.0, -0.05),
}
SAMPLE_TROPICAL_ASCENDANT = 100.0
SAMPLE_AYANAMSA = 23.7  # sidereal Lagna 76.3, Gemini

FEROZEPUR_BIRTH = BirthDetails(
    date=date(1989, 1, 31),
    time=time(16, 0),
    latitude=30.9165,
    longitude=74.6130,
    timezone_offset=5.5,
)
# Exactly 36 years of 365.25 days after the birth moment
REFERENCE_NOW = datetime(2025, 1, 31, 16, 0)


class FakeEphemeris:
    """Deterministic ``Ephemeris`` with per-body failure injection."""

    def __init__(self):
        self.positions = dict(SAMPLE_POSITIONS)
        self.ascendant = SAMPLE_TROPICAL_ASCENDANT
        self.ayanamsa_value = SAMPLE_AYANAMSA
        self.failing_bodies: set[Body] = set()
        self.fail_houses = False
        self.calls: list[tuple] = []

    def position(self, julian_day, body):
        self.calls.append(("position", julian_day, body))
        if body in self.failing_bodies:
            raise OracleFailure("position", f"{body.value}: status -1")
        longitude, speed = self.positions[body]
        return BodyPosition(longitude=longitude, speed=speed)

    def houses(self, julian_day, latitude, longitude, system="P"):
        self.calls.append(("houses", julian_day, latitude, longitude, system))
        if self.fail_houses:
            raise OracleFailure("houses", "no ascendant")
        cusps = tuple((self.ascendant + 30 * i) % 360 for i in range(12))
        return HouseCusps(cusps=cusps, ascendant=self.ascendant)

    def ayanamsa(self, julian_day):
        self.calls.append(("ayanamsa", julian_day))
        return self.ayanamsa_value


@pytest.fixture
def fake_ephemeris():
    return FakeEphemeris()


@pytest.fixture
def ferozepur_birth():
    return FEROZEPUR_BIRTH


@pytest.fixture
def reference_now():
    return REFERENCE_NOW
