"""Unit tests for the Swiss Ephemeris adapter."""

from unittest.mock import patch

import pytest
import swisseph as swe

from ephemeris import SwissEphemeris, normalize_house_result
from errors import OracleFailure
from models import Body

SAMPLE_CUSPS = tuple(float(100 + 30 * i) % 360 for i in range(12))
SAMPLE_ASCMC = (101.5, 10.2, 200.0, 300.0, 0.0, 0.0, 0.0, 0.0)


class TestNormalizeHouseResult:
    def test_pyswisseph_pair(self):
        houses = normalize_house_result((SAMPLE_CUSPS, SAMPLE_ASCMC))
        assert houses.ascendant == 101.5
        assert houses.cusps == SAMPLE_CUSPS

    def test_empty_ascmc_falls_back_to_first_cusp(self):
        houses = normalize_house_result((SAMPLE_CUSPS, ()))
        assert houses.ascendant == 100.0

    def test_points_mapping(self):
        houses = normalize_house_result({"data": {"points": [88.0, 170.0]}})
        assert houses.ascendant == 88.0

    def test_houses_mapping(self):
        houses = normalize_house_result({"data": {"houses": [12.0, 42.0]}})
        assert houses.ascendant == 12.0
        assert houses.cusps == (12.0, 42.0)

    def test_root_ascendant(self):
        assert normalize_house_result({"ascendant": 55.5}).ascendant == 55.5

    @pytest.mark.parametrize("raw", [None, {}, {"data": {}}, "P", ((), ())])
    def test_unrecognized_shapes_raise(self, raw):
        with pytest.raises(OracleFailure) as exc_info:
            normalize_house_result(raw)
        assert exc_info.value.operation == "houses"


class TestSwissEphemeris:
    def test_position_returns_longitude_and_speed(self):
        eph = SwissEphemeris()
        with patch("ephemeris.swe.calc_ut") as calc_ut:
            calc_ut.return_value = ((222.5, 0.1, 0.002, 13.2, 0.0, 0.0), swe.FLG_SIDEREAL)
            position = eph.position(2447557.9375, Body.MOON)

        assert position.longitude == 222.5
        assert position.speed == 13.2
        jd, body_id, flags = calc_ut.call_args.args
        assert body_id == swe.MOON
        assert flags & swe.FLG_SIDEREAL
        assert flags & swe.FLG_SPEED

    def test_rahu_is_mean_node(self):
        eph = SwissEphemeris()
        with patch("ephemeris.swe.calc_ut") as calc_ut:
            calc_ut.return_value = ((320.0, 0.0, 0.0, -0.05, 0.0, 0.0), 0)
            eph.position(2447557.9375, Body.RAHU)
        assert calc_ut.call_args.args[1] == swe.MEAN_NODE

    def test_ketu_is_not_an_oracle_body(self):
        with pytest.raises(ValueError):
            SwissEphemeris().position(2447557.9375, Body.KETU)

    def test_library_error_becomes_oracle_failure(self):
        eph = SwissEphemeris()
        with patch("ephemeris.swe.calc_ut", side_effect=swe.Error("file not found")):
            with pytest.raises(OracleFailure) as exc_info:
                eph.position(2447557.9375, Body.SATURN)
        assert exc_info.value.operation == "position"
        assert "saturn" in str(exc_info.value)

    def test_negative_status_becomes_oracle_failure(self):
        eph = SwissEphemeris()
        with patch("ephemeris.swe.calc_ut") as calc_ut:
            calc_ut.return_value = ((0.0, 0.0, 0.0, 0.0, 0.0, 0.0), -1)
            with pytest.raises(OracleFailure):
                eph.position(2447557.9375, Body.SUN)

    def test_houses_passes_system_code(self):
        eph = SwissEphemeris()
        with patch("ephemeris.swe.houses") as houses:
            houses.return_value = (SAMPLE_CUSPS, SAMPLE_ASCMC)
            result = eph.houses(2447557.9375, 30.9165, 74.6130)

        assert result.ascendant == 101.5
        assert houses.call_args.args == (2447557.9375, 30.9165, 74.6130, b"P")

    def test_ayanamsa(self):
        eph = SwissEphemeris()
        with patch("ephemeris.swe.get_ayanamsa_ut", return_value=23.7):
            assert eph.ayanamsa(2447557.9375) == 23.7
