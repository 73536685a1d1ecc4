"""Unit tests for birth_parser module."""

from datetime import date

import pytest

from birth_parser import (
    detect_kundli_intent,
    detect_language,
    extract_date,
    extract_place,
    extract_time,
    has_complete_birth_details,
    parse_birth_details,
    validate_birth_details,
)
from models import IntentType, Language, ParsedBirthDetails

TODAY = date(2026, 10, 18)


class TestParseBirthDetails:
    def test_single_english_message(self):
        parsed = parse_birth_details("31 January 1989, 4:00 PM, Ferozepur")

        assert parsed.date == "1989-01-31"
        assert parsed.time == "16:00"
        assert parsed.place == "Ferozepur"
        assert parsed.missing_fields == frozenset()
        assert parsed.confidence == pytest.approx(1.0)
        assert parsed.is_complete

    def test_hinglish_sentence(self):
        parsed = parse_birth_details(
            "Mera janam 15 August 1995 ko sham 4 baje Delhi mein hua tha"
        )

        assert parsed.date == "1995-08-15"
        assert parsed.time == "16:00"
        assert parsed.place == "Delhi"

    def test_slash_date_and_am_time(self):
        parsed = parse_birth_details("born on 25/12/1990 at 3:30 AM in Mumbai")

        assert parsed.date == "1990-12-25"
        assert parsed.time == "03:30"
        assert parsed.place == "Mumbai"

    def test_date_only(self):
        parsed = parse_birth_details("31/01/1989")

        assert parsed.date == "1989-01-31"
        assert parsed.missing_fields == frozenset({"time", "place"})
        assert parsed.confidence == pytest.approx(0.4)
        assert not parsed.is_complete

    def test_nothing_recognized(self):
        parsed = parse_birth_details("?")
        assert parsed.missing_fields == frozenset({"date", "time", "place"})
        assert parsed.confidence == 0


class TestExtractDate:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("31-01-1989", "1989-01-31"),
            ("5/3/2001", "2001-03-05"),
            ("31st of January 1989", "1989-01-31"),
            ("31 jan 1989", "1989-01-31"),
            ("March 15, 1990", "1990-03-15"),
            ("sept 9th 1999", "1999-09-09"),
            ("15 अगस्त 1995", "1995-08-15"),
            ("1990-03-15", "1990-03-15"),
        ],
    )
    def test_formats(self, message, expected):
        assert extract_date(message) == expected

    def test_impossible_calendar_date(self):
        assert extract_date("31/02/1990") is None

    def test_unknown_month_word(self):
        assert extract_date("12 blah 1990") is None


class TestExtractTime:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("4:00 PM", "16:00"),
            ("4:15 p.m.", "16:15"),
            ("12:30 pm", "12:30"),
            ("12 am", "00:00"),
            ("3pm", "15:00"),
            ("16:45", "16:45"),
            ("subah 6 baje", "06:00"),
            ("sham 4 baje", "16:00"),
            ("shaam 7 baje", "19:00"),
            ("raat 11 baje", "23:00"),
            ("dopahar 12 baje", "12:00"),
            ("4 baje", "04:00"),
            ("शाम 4 बजे", "16:00"),
            ("सुबह 6 बजे", "06:00"),
            ("रात 10 बजे", "22:00"),
            ("5 बजे", "05:00"),
            ("evening 7", "19:00"),
            ("morning 6", "06:00"),
        ],
    )
    def test_formats(self, message, expected):
        assert extract_time(message) == expected

    def test_out_of_range_clock(self):
        assert extract_time("25:00") is None

    def test_year_followed_by_am_word(self):
        assert extract_time("31 Jan 1989 amritsar") is None


class TestExtractPlace:
    def test_strips_stop_words(self):
        assert extract_place("meri kundli banao please, Ferozepur mein") == "Ferozepur"

    def test_title_cases_multiword(self):
        assert extract_place("new DELHI") == "New Delhi"

    def test_devanagari(self):
        assert (
            extract_place("मेरा जन्म 15 अगस्त 1995 को दिल्ली में हुआ था") == "दिल्ली"
        )

    def test_too_short(self):
        assert extract_place("in X") is None


def test_has_complete_birth_details():
    assert has_complete_birth_details("31 Jan 1989 4pm Ferozepur")
    assert not has_complete_birth_details("31 Jan 1989")


@pytest.mark.parametrize(
    "message, language",
    [
        ("meri kundli banao", Language.ENGLISH),
        ("मेरी कुंडली बनाओ", Language.HINDI),
        ("मेरी kundli banao", Language.HINGLISH),
        ("1989", Language.ENGLISH),
    ],
)
def test_detect_language(message, language):
    assert detect_language(message) == language


class TestDetectKundliIntent:
    @pytest.mark.parametrize(
        "message",
        ["meri kundli banao", "Create my birth chart", "kundli", "please generate my horoscope"],
    )
    def test_create(self, message):
        intent = detect_kundli_intent(message)
        assert intent.is_kundli_request
        assert intent.type == IntentType.CREATE

    @pytest.mark.parametrize("message", ["kundli milan karna hai", "gun milan", "matchmaking"])
    def test_match(self, message):
        assert detect_kundli_intent(message).type == IntentType.MATCH

    def test_question(self):
        assert detect_kundli_intent("mahadasha kya hai").type == IntentType.QUESTION

    def test_none(self):
        intent = detect_kundli_intent("hello, how are you?")
        assert not intent.is_kundli_request
        assert intent.type == IntentType.NONE
        assert intent.language == Language.ENGLISH


class TestValidateBirthDetails:
    def test_valid(self):
        details = ParsedBirthDetails(date="1989-01-31", time="16:00", place="Ferozepur")
        result = validate_birth_details(details, today=TODAY)
        assert result.is_valid
        assert result.warnings == []

    def test_future_date(self):
        result = validate_birth_details(ParsedBirthDetails(date="2030-01-01"), today=TODAY)
        assert not result.is_valid
        assert "Birth date cannot be in the future" in result.errors

    def test_year_before_1900(self):
        result = validate_birth_details(ParsedBirthDetails(date="1850-05-01"), today=TODAY)
        assert result.errors == ["Year must be between 1900 and 2026"]

    def test_bad_clock(self):
        result = validate_birth_details(ParsedBirthDetails(time="24:75"), today=TODAY)
        assert result.errors == [
            "Hour must be between 0 and 23",
            "Minute must be between 0 and 59",
        ]

    def test_place_warnings(self):
        result = validate_birth_details(ParsedBirthDetails(place="X"), today=TODAY)
        assert result.is_valid
        assert result.warnings == ["Place name seems too short"]

        result = validate_birth_details(ParsedBirthDetails(place="Sector 17"), today=TODAY)
        assert result.warnings == ["Place name contains numbers"]
