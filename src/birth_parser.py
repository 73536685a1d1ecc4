"""Extraction of birth details from free-form English, Hindi and Hinglish text.

Each field is recognized by an ordered chain of independent strategies; the
first strategy that produces a valid value wins. Examples of accepted input:

- "31 Jan 1989, 4pm, Ferozepur"
- "born on 25/12/1990 at 3:30 AM in Mumbai"
- "Mera janam 15 August 1995 ko sham 4 baje Delhi mein hua tha"
"""

import logging
import re
from collections.abc import Callable
from datetime import date, datetime

from models import IntentType, KundliIntent, Language, ParsedBirthDetails, ValidationResult

logger = logging.getLogger("birth_parser")

DATE_WEIGHT = 0.4
TIME_WEIGHT = 0.3
PLACE_WEIGHT = 0.3

MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
    "जनवरी": 1,
    "फरवरी": 2,
    "मार्च": 3,
    "अप्रैल": 4,
    "मई": 5,
    "जून": 6,
    "जुलाई": 7,
    "अगस्त": 8,
    "सितंबर": 9,
    "अक्टूबर": 10,
    "नवंबर": 11,
    "दिसंबर": 12,
}

NUMERIC_DATE_RE = re.compile(r"(?<!\d)(\d{1,2})[/-](\d{1,2})[/-](\d{4})(?!\d)")
DAY_MONTH_YEAR_RE = re.compile(
    r"(?<!\d)(\d{1,2})\s*(?:st|nd|rd|th)?\s*(?:of\s+)?([a-z]+)\s*,?\s*(\d{4})(?!\d)",
    re.IGNORECASE,
)
MONTH_DAY_YEAR_RE = re.compile(
    r"\b([a-z]+)\s+(\d{1,2})(?:st|nd|rd|th)?\s*,?\s*(\d{4})(?!\d)", re.IGNORECASE
)
HINDI_DATE_RE = re.compile(r"(?<!\d)(\d{1,2})\s*([ऀ-ॿ]+)\s*(\d{4})(?!\d)")
ISO_DATE_RE = re.compile(r"(?<!\d)(\d{4})-(\d{2})-(\d{2})(?!\d)")

_MERIDIEM = r"(am|pm|a\.m\.|p\.m\.)(?![a-z])"
CLOCK_MERIDIEM_RE = re.compile(r"(?<!\d)(\d{1,2}):\s*(\d{2})\s*" + _MERIDIEM, re.IGNORECASE)
HOUR_MERIDIEM_RE = re.compile(r"(?<![\d:])(\d{1,2})\s*" + _MERIDIEM, re.IGNORECASE)
CLOCK_24H_RE = re.compile(r"\b(\d{1,2}):\s*(\d{2})\b")

# (pattern, hours added when the stated hour is 12 or less)
HINDI_TIME_WORDS = (
    (re.compile(r"\bsubah\s*(\d{1,2})\s*(?:baje|bje)?", re.IGNORECASE), 0),
    (re.compile(r"\bsavere\s*(\d{1,2})\s*(?:baje|bje)?", re.IGNORECASE), 0),
    (re.compile(r"\bdopahar\s*(\d{1,2})\s*(?:baje|bje)?", re.IGNORECASE), 12),
    (re.compile(r"\bsham\s*(\d{1,2})\s*(?:baje|bje)?", re.IGNORECASE), 12),
    (re.compile(r"\bshaam\s*(\d{1,2})\s*(?:baje|bje)?", re.IGNORECASE), 12),
    (re.compile(r"\braat\s*(\d{1,2})\s*(?:baje|bje)?", re.IGNORECASE), 12),
    (re.compile(r"सुबह\s*(\d{1,2})\s*(?:बजे)?"), 0),
    (re.compile(r"सवेरे\s*(\d{1,2})\s*(?:बजे)?"), 0),
    (re.compile(r"दोपहर\s*(\d{1,2})\s*(?:बजे)?"), 12),
    (re.compile(r"शाम\s*(\d{1,2})\s*(?:बजे)?"), 12),
    (re.compile(r"रात\s*(\d{1,2})\s*(?:बजे)?"), 12),
    (re.compile(r"(?<!\d)(\d{1,2})\s*(?:baje|bje)\b", re.IGNORECASE), 0),
    (re.compile(r"(?<!\d)(\d{1,2})\s*बजे"), 0),
)
ENGLISH_TIME_WORDS = (
    (re.compile(r"\bmorning\s*(\d{1,2})(?::(\d{2}))?", re.IGNORECASE), 0),
    (re.compile(r"\bafternoon\s*(\d{1,2})(?::(\d{2}))?", re.IGNORECASE), 12),
    (re.compile(r"\bevening\s*(\d{1,2})(?::(\d{2}))?", re.IGNORECASE), 12),
    (re.compile(r"\bnight\s*(\d{1,2})(?::(\d{2}))?", re.IGNORECASE), 12),
)

PLACE_STOP_WORDS = frozenset(
    {
        "meri", "mera", "my", "apni", "apna",
        "kundli", "kundali", "janampatri", "patrika", "birth", "chart", "horoscope",
        "banao", "banana", "chahiye", "create", "generate", "make", "show",
        "janm", "janam", "born", "date", "time", "place", "city",
        "ko", "ka", "ki", "ke", "mein", "me", "in", "at", "on", "of",
        "tha", "thi", "the", "hai", "hain", "was", "is", "were", "and",
        "huya", "huyi", "hua", "hui",
        "please", "plz", "pls", "kripya",
        "मेरा", "मेरी", "जन्म", "को", "में", "का", "की", "के",
        "हुआ", "हुई", "था", "थी", "है", "कुंडली", "बनाओ", "कृपया",
    }
)
PLACE_PUNCTUATION_RE = re.compile(r"[,.;:'\"!?()\[\]]")

KUNDLI_CREATE_PATTERNS = [
    re.compile(r"\b(dob|date\s*of\s*birth|birth\s*date|born\s*on)\b.*\b(place|time|city)\b", re.I),
    re.compile(r"\b(place|city|location)\b.*\b(dob|birth|born)\b", re.I),
    re.compile(r"\b(meri|mera|apni|apna)\s*(kundli|kundali|janam\s*patri|janampatri|patrika)\b", re.I),
    re.compile(r"\b(kundli|kundali|janampatri|patrika)\s*(banao|banana|chahiye|bana\s*do|generate)\b", re.I),
    re.compile(r"\b(create|make|generate|bana)\s*(my\s*)?(kundli|kundali|birth\s*chart|janampatri)\b", re.I),
    re.compile(r"\b(create|generate|make|show)\s*(my\s*)?(kundli|kundali|birth\s*chart|horoscope|natal\s*chart)\b", re.I),
    re.compile(r"\b(my|meri)\s*(kundli|birth\s*chart)\b", re.I),
    re.compile(r"^kundli$", re.I),
    re.compile(r"^birth\s*chart$", re.I),
]

KUNDLI_MATCH_PATTERNS = [
    re.compile(r"\b(kundli|kundali)\s*(matching|milan|match)\b", re.I),
    re.compile(r"\b(gun|guna)\s*milan\b", re.I),
    re.compile(r"\b(shaadi|marriage|vivah)\s*(ke\s*liye\s*)?(kundli|match)\b", re.I),
    re.compile(r"\b(match\s*making|matchmaking)\b", re.I),
    re.compile(r"\b(compatibility|match)\s*(kundli|horoscope|chart)\b", re.I),
    re.compile(r"\bkundli\s*compatibility\b", re.I),
]

KUNDLI_QUESTION_PATTERNS = [
    re.compile(r"\b(kundli|kundali|horoscope|rashi|nakshatra|mahadasha|dasha)\s*(kya|what|how|when|which)\b", re.I),
    re.compile(r"\b(kya|what|how)\s*(hai|is|are)\s*(kundli|mahadasha|rashi)\b", re.I),
    re.compile(r"\b(tell|batao|bataiye)\s*(me|mujhe)?\s*(about|bare\s*mein)?\s*(kundli|rashi|nakshatra)\b", re.I),
]

DEVANAGARI_RE = re.compile(r"[ऀ-ॿ]")
LATIN_RE = re.compile(r"[a-zA-Z]")


def _format_date(day: int, month: int, year: int) -> str | None:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _format_time(hour: int, minute: int) -> str | None:
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return f"{hour:02d}:{minute:02d}"


def _to_24h(hour: int, meridiem: str) -> int:
    if meridiem.lower().startswith("p") and hour != 12:
        return hour + 12
    if meridiem.lower().startswith("a") and hour == 12:
        return 0
    return hour


# --- Date strategies ---


def _numeric_date(message: str) -> str | None:
    match = NUMERIC_DATE_RE.search(message)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return _format_date(day, month, year)
    return None


def _day_month_year(message: str) -> str | None:
    for match in DAY_MONTH_YEAR_RE.finditer(message):
        day, month_name, year = match.groups()
        month = MONTHS.get(month_name.lower())
        if month:
            return _format_date(int(day), month, int(year))
    return None


def _month_day_year(message: str) -> str | None:
    for match in MONTH_DAY_YEAR_RE.finditer(message):
        month_name, day, year = match.groups()
        month = MONTHS.get(month_name.lower())
        if month:
            return _format_date(int(day), month, int(year))
    return None


def _hindi_month_date(message: str) -> str | None:
    for match in HINDI_DATE_RE.finditer(message):
        day, month_name, year = match.groups()
        month = MONTHS.get(month_name)
        if month:
            return _format_date(int(day), month, int(year))
    return None


def _iso_date(message: str) -> str | None:
    match = ISO_DATE_RE.search(message)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _format_date(day, month, year)
    return None


DATE_STRATEGIES: tuple[Callable[[str], str | None], ...] = (
    _numeric_date,
    _day_month_year,
    _month_day_year,
    _hindi_month_date,
    _iso_date,
)


# --- Time strategies ---


def _clock_with_meridiem(message: str) -> str | None:
    match = CLOCK_MERIDIEM_RE.search(message)
    if match:
        hour, minute, meridiem = match.groups()
        if 1 <= int(hour) <= 12:
            return _format_time(_to_24h(int(hour), meridiem), int(minute))
    return None


def _hour_with_meridiem(message: str) -> str | None:
    match = HOUR_MERIDIEM_RE.search(message)
    if match:
        hour, meridiem = match.groups()
        if 1 <= int(hour) <= 12:
            return _format_time(_to_24h(int(hour), meridiem), 0)
    return None


def _clock_24h(message: str) -> str | None:
    match = CLOCK_24H_RE.search(message)
    if match:
        hour, minute = match.groups()
        return _format_time(int(hour), int(minute))
    return None


def _time_of_day_words(patterns) -> Callable[[str], str | None]:
    def strategy(message: str) -> str | None:
        for pattern, offset in patterns:
            match = pattern.search(message)
            if not match:
                continue
            hour = int(match.group(1))
            minute = int(match.group(2)) if match.lastindex and match.lastindex > 1 and match.group(2) else 0
            if offset and hour < 12:
                hour += offset
            return _format_time(hour, minute)
        return None

    return strategy


_hindi_time_words = _time_of_day_words(HINDI_TIME_WORDS)
_english_time_words = _time_of_day_words(ENGLISH_TIME_WORDS)

TIME_STRATEGIES: tuple[Callable[[str], str | None], ...] = (
    _clock_with_meridiem,
    _hour_with_meridiem,
    _clock_24h,
    _hindi_time_words,
    _english_time_words,
)


def extract_date(message: str) -> str | None:
    """Return the first date found in ``message`` as YYYY-MM-DD."""
    for strategy in DATE_STRATEGIES:
        result = strategy(message)
        if result:
            return result
    return None


def extract_time(message: str) -> str | None:
    """Return the first time found in ``message`` as 24-hour HH:MM."""
    for strategy in TIME_STRATEGIES:
        result = strategy(message)
        if result:
            return result
    return None


def extract_place(message: str) -> str | None:
    """Return what is left of ``message`` once dates, times and filler words are removed."""
    cleaned = message
    for pattern in (
        NUMERIC_DATE_RE,
        ISO_DATE_RE,
        DAY_MONTH_YEAR_RE,
        MONTH_DAY_YEAR_RE,
        HINDI_DATE_RE,
        CLOCK_MERIDIEM_RE,
        HOUR_MERIDIEM_RE,
        CLOCK_24H_RE,
    ):
        cleaned = pattern.sub(" ", cleaned)
    for pattern, _offset in HINDI_TIME_WORDS + ENGLISH_TIME_WORDS:
        cleaned = pattern.sub(" ", cleaned)

    cleaned = PLACE_PUNCTUATION_RE.sub(" ", cleaned)
    words = [w for w in cleaned.split() if w.lower() not in PLACE_STOP_WORDS]
    place = " ".join(w[:1].upper() + w[1:].lower() for w in words)

    return place if len(place) >= 2 else None


def parse_birth_details(message: str) -> ParsedBirthDetails:
    """Extract date, time and place from one message.

    Confidence adds 0.4 for a date, 0.3 for a time and 0.3 for a place;
    fields that could not be recognized are listed in ``missing_fields``.
    """
    found = {
        "date": extract_date(message),
        "time": extract_time(message),
        "place": extract_place(message),
    }
    weights = {"date": DATE_WEIGHT, "time": TIME_WEIGHT, "place": PLACE_WEIGHT}

    confidence = sum(weights[name] for name, value in found.items() if value)
    missing = frozenset(name for name, value in found.items() if not value)

    return ParsedBirthDetails(
        date=found["date"],
        time=found["time"],
        place=found["place"],
        missing_fields=missing,
        confidence=round(confidence, 2),
    )


def has_complete_birth_details(message: str) -> bool:
    return parse_birth_details(message).is_complete


def detect_language(message: str) -> Language:
    has_hindi = bool(DEVANAGARI_RE.search(message))
    has_latin = bool(LATIN_RE.search(message))
    if has_hindi and has_latin:
        return Language.HINGLISH
    if has_hindi:
        return Language.HINDI
    return Language.ENGLISH


def detect_kundli_intent(message: str) -> KundliIntent:
    """Classify a message as a Kundli create, match or question request."""
    normalized = message.strip().lower()
    language = detect_language(message)

    for intent_type, patterns in (
        (IntentType.CREATE, KUNDLI_CREATE_PATTERNS),
        (IntentType.MATCH, KUNDLI_MATCH_PATTERNS),
        (IntentType.QUESTION, KUNDLI_QUESTION_PATTERNS),
    ):
        if any(pattern.search(normalized) for pattern in patterns):
            return KundliIntent(True, intent_type, language)

    return KundliIntent(False, IntentType.NONE, language)


def validate_birth_details(
    details: ParsedBirthDetails, today: date | None = None
) -> ValidationResult:
    """Check parsed fields for impossible or implausible values."""
    today = today or date.today()
    errors: list[str] = []
    warnings: list[str] = []

    if details.date:
        try:
            born = datetime.strptime(details.date, "%Y-%m-%d").date()
        except ValueError:
            errors.append("Invalid date format")
        else:
            if born.year < 1900 or born.year > today.year:
                errors.append(f"Year must be between 1900 and {today.year}")
            if born > today:
                errors.append("Birth date cannot be in the future")

    if details.time:
        try:
            hour, minute = (int(part) for part in details.time.split(":"))
        except ValueError:
            errors.append("Invalid time format")
        else:
            if not 0 <= hour <= 23:
                errors.append("Hour must be between 0 and 23")
            if not 0 <= minute <= 59:
                errors.append("Minute must be between 0 and 59")

    if details.place:
        if len(details.place) < 2:
            warnings.append("Place name seems too short")
        if any(ch.isdigit() for ch in details.place):
            warnings.append("Place name contains numbers")

    return ValidationResult(errors=errors, warnings=warnings)
