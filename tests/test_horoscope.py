"""Unit tests for transits and the daily horoscope."""

from datetime import datetime

import pytest

from horoscope import (
    daily_horoscope,
    day_ruler,
    generate_prediction,
    lucky_color,
    lucky_number,
    today_transits,
    transit_houses,
)
from models import Body
from zodiac import find_rashi

# A Friday
FRIDAY = datetime(2025, 1, 31, 6, 0)


@pytest.mark.parametrize(
    "day, ruler",
    [
        (datetime(2025, 1, 26), "Sun"),
        (datetime(2025, 1, 27), "Moon"),
        (datetime(2025, 1, 31), "Venus"),
        (datetime(2025, 2, 1), "Saturn"),
    ],
)
def test_day_ruler(day, ruler):
    assert day_ruler(day) == ruler


def test_today_transits_uses_utc_julian_day(fake_ephemeris):
    transits = today_transits(fake_ephemeris, datetime(2000, 1, 1, 12, 0))

    assert transits[Body.MOON].rashi.english == "Scorpio"
    assert transits[Body.KETU].rashi.english == "Leo"
    jd = fake_ephemeris.calls[0][1]
    assert jd == pytest.approx(2451545.0)


def test_transit_houses(fake_ephemeris):
    houses = transit_houses(find_rashi("Scorpio"), today_transits(fake_ephemeris, FRIDAY))

    assert houses[Body.MOON] == 1
    assert houses[Body.JUPITER] == 7
    assert houses[Body.SATURN] == 2
    assert all(1 <= h <= 12 for h in houses.values())


class TestGeneratePrediction:
    def test_moon_house_sentence_comes_first(self):
        houses = {Body.MOON: 4, Body.JUPITER: 3, Body.SATURN: 3, Body.VENUS: 3}
        text = generate_prediction(find_rashi("Aries"), houses, "Sun")
        assert text.startswith("Home and family matters take priority.")
        assert "Saturn supports your steady efforts today." in text
        assert "Jupiter" not in text

    def test_challenging_saturn(self):
        houses = {Body.MOON: 1, Body.JUPITER: 3, Body.SATURN: 8, Body.VENUS: 3}
        text = generate_prediction(find_rashi("Aries"), houses, "Sun")
        assert "Stay disciplined and patient." in text
        assert "Saturn supports" not in text

    def test_day_ruler_bonus(self):
        houses = {Body.MOON: 1, Body.JUPITER: 5, Body.SATURN: 3, Body.VENUS: 7}
        text = generate_prediction(find_rashi("Libra"), houses, "Venus")
        assert "Jupiter's blessings" in text
        assert "Love and beauty surround you." in text
        assert text.endswith("Venus rules both the day and your sign!")


def test_lucky_number_cycles_by_date():
    scorpio = find_rashi("Scorpio")
    # Mars candidates (3, 9, 18); (31 + 1) % 3 == 2
    assert lucky_number(scorpio, datetime(2025, 1, 31)) == 18
    assert lucky_number(scorpio, datetime(2025, 1, 30)) == 9


def test_lucky_color_alternates():
    scorpio = find_rashi("Scorpio")
    assert lucky_color(scorpio, "Venus", datetime(2025, 1, 31)) == ("Pink", "#EC407A")
    assert lucky_color(scorpio, "Venus", datetime(2025, 1, 30)) == ("Red", "#E53935")


class TestDailyHoroscope:
    def test_scorpio_on_friday(self, fake_ephemeris):
        horoscope = daily_horoscope("Scorpio", fake_ephemeris, now=FRIDAY)

        assert horoscope.sign.english == "Scorpio"
        assert horoscope.date == FRIDAY.date()
        assert horoscope.day_ruler == "Venus"
        assert horoscope.prediction.startswith("Your emotions are heightened today.")
        assert "Jupiter's blessings" in horoscope.prediction
        assert horoscope.lucky_number == 18
        assert horoscope.lucky_color[0] == "Pink"

    def test_accepts_hinglish_name(self, fake_ephemeris):
        horoscope = daily_horoscope("Vrishchik", fake_ephemeris, now=FRIDAY)
        assert horoscope.sign.english == "Scorpio"

    def test_invalid_sign(self, fake_ephemeris):
        with pytest.raises(ValueError):
            daily_horoscope("Dragon", fake_ephemeris, now=FRIDAY)
