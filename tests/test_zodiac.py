"""Unit tests for longitude classification in zodiac.py."""

import pytest

from zodiac import (
    NAKSHATRAS,
    RASHIS,
    classify,
    find_rashi,
    house_offset,
    nakshatra_for,
    normalize_longitude,
    rashi_for,
)


class TestNormalizeLongitude:
    @pytest.mark.parametrize(
        "raw, expected",
        [(0.0, 0.0), (360.0, 0.0), (725.0, 5.0), (-30.0, 330.0), (-720.5, 359.5)],
    )
    def test_wraps_into_range(self, raw, expected):
        assert normalize_longitude(raw) == pytest.approx(expected)

    def test_tiny_negative_does_not_reach_360(self):
        assert 0.0 <= normalize_longitude(-1e-15) < 360.0


def test_tables_are_complete():
    assert len(RASHIS) == 12
    assert len(NAKSHATRAS) == 27
    assert [r.index for r in RASHIS] == list(range(12))
    assert [n.index for n in NAKSHATRAS] == list(range(27))


@pytest.mark.parametrize(
    "longitude, sign",
    [(0.0, "Aries"), (29.999, "Aries"), (30.0, "Taurus"), (222.5, "Scorpio"), (359.99, "Pisces")],
)
def test_rashi_for(longitude, sign):
    assert rashi_for(longitude).english == sign


class TestNakshatraFor:
    def test_first_pada_of_ashwini(self):
        nakshatra, pada = nakshatra_for(0.0)
        assert nakshatra.english == "Ashwini"
        assert pada == 1

    def test_anuradha_pada_3(self):
        nakshatra, pada = nakshatra_for(222.5)
        assert nakshatra.english == "Anuradha"
        assert nakshatra.lord == "Saturn"
        assert pada == 3

    def test_last_pada_of_revati(self):
        nakshatra, pada = nakshatra_for(359.999)
        assert nakshatra.english == "Revati"
        assert pada == 4


@pytest.mark.parametrize("longitude", [-1000.25, -0.001, 0.0, 13.3333, 179.9, 359.9999, 1e6])
def test_classify_stays_in_bounds(longitude):
    position = classify(longitude)
    assert 0.0 <= position.longitude < 360.0
    assert 0 <= position.rashi.index <= 11
    assert 0 <= position.nakshatra.index <= 26
    assert 1 <= position.pada <= 4
    assert position.rashi.index == int(position.longitude // 30)


class TestHouseOffset:
    def test_same_sign_is_first_house(self):
        assert house_offset(RASHIS[4], RASHIS[4]) == 1

    def test_counts_forward(self):
        assert house_offset(RASHIS[2], RASHIS[9]) == 8

    def test_wraps_around(self):
        assert house_offset(RASHIS[7], RASHIS[1]) == 7


class TestFindRashi:
    @pytest.mark.parametrize("name", ["Leo", "leo", " Simha ", "सिंह"])
    def test_known_names(self, name):
        assert find_rashi(name).english == "Leo"

    def test_unknown_name(self):
        assert find_rashi("Ophiuchus") is None
