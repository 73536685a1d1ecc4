"""Static Rashi and Nakshatra tables and longitude classification."""

import math

from models import Nakshatra, Rashi, ZodiacPosition

RASHI_SPAN = 30.0
NAKSHATRA_SPAN = 360.0 / 27
PADA_SPAN = 360.0 / 108

RASHIS = (
    Rashi(0, "Aries", "मेष", "Mesh", "Mars"),
    Rashi(1, "Taurus", "वृषभ", "Vrishabh", "Venus"),
    Rashi(2, "Gemini", "मिथुन", "Mithun", "Mercury"),
    Rashi(3, "Cancer", "कर्क", "Kark", "Moon"),
    Rashi(4, "Leo", "सिंह", "Simha", "Sun"),
    Rashi(5, "Virgo", "कन्या", "Kanya", "Mercury"),
    Rashi(6, "Libra", "तुला", "Tula", "Venus"),
    Rashi(7, "Scorpio", "वृश्चिक", "Vrishchik", "Mars"),
    Rashi(8, "Sagittarius", "धनु", "Dhanu", "Jupiter"),
    Rashi(9, "Capricorn", "मकर", "Makar", "Saturn"),
    Rashi(10, "Aquarius", "कुंभ", "Kumbh", "Saturn"),
    Rashi(11, "Pisces", "मीन", "Meen", "Jupiter"),
)

NAKSHATRAS = (
    Nakshatra(0, "Ashwini", "अश्विनी", "Ketu", "Ashwini Kumaras"),
    Nakshatra(1, "Bharani", "भरणी", "Venus", "Yama"),
    Nakshatra(2, "Krittika", "कृत्तिका", "Sun", "Agni"),
    Nakshatra(3, "Rohini", "रोहिणी", "Moon", "Brahma"),
    Nakshatra(4, "Mrigashira", "मृगशिरा", "Mars", "Soma"),
    Nakshatra(5, "Ardra", "आर्द्रा", "Rahu", "Rudra"),
    Nakshatra(6, "Punarvasu", "पुनर्वसु", "Jupiter", "Aditi"),
    Nakshatra(7, "Pushya", "पुष्य", "Saturn", "Brihaspati"),
    Nakshatra(8, "Ashlesha", "आश्लेषा", "Mercury", "Nagas"),
    Nakshatra(9, "Magha", "मघा", "Ketu", "Pitris"),
    Nakshatra(10, "Purva Phalguni", "पूर्व फाल्गुनी", "Venus", "Bhaga"),
    Nakshatra(11, "Uttara Phalguni", "उत्तर फाल्गुनी", "Sun", "Aryaman"),
    Nakshatra(12, "Hasta", "हस्त", "Moon", "Savitar"),
    Nakshatra(13, "Chitra", "चित्रा", "Mars", "Vishwakarma"),
    Nakshatra(14, "Swati", "स्वाति", "Rahu", "Vayu"),
    Nakshatra(15, "Vishakha", "विशाखा", "Jupiter", "Indra-Agni"),
    Nakshatra(16, "Anuradha", "अनुराधा", "Saturn", "Mitra"),
    Nakshatra(17, "Jyeshtha", "ज्येष्ठा", "Mercury", "Indra"),
    Nakshatra(18, "Mula", "मूल", "Ketu", "Nirriti"),
    Nakshatra(19, "Purva Ashadha", "पूर्वाषाढ़ा", "Venus", "Apas"),
    Nakshatra(20, "Uttara Ashadha", "उत्तराषाढ़ा", "Sun", "Vishvedevas"),
    Nakshatra(21, "Shravana", "श्रवण", "Moon", "Vishnu"),
    Nakshatra(22, "Dhanishta", "धनिष्ठा", "Mars", "Vasus"),
    Nakshatra(23, "Shatabhisha", "शतभिषा", "Rahu", "Varuna"),
    Nakshatra(24, "Purva Bhadrapada", "पूर्व भाद्रपद", "Jupiter", "Ajaikapada"),
    Nakshatra(25, "Uttara Bhadrapada", "उत्तर भाद्रपद", "Saturn", "Ahirbudhnya"),
    Nakshatra(26, "Revati", "रेवती", "Mercury", "Pushan"),
)


def normalize_longitude(longitude: float) -> float:
    """Wrap any real longitude into [0, 360)."""
    normalized = longitude % 360.0
    # -1e-15 % 360 rounds to 360.0 in floating point
    return 0.0 if normalized >= 360.0 else normalized


def rashi_for(longitude: float) -> Rashi:
    lon = normalize_longitude(longitude)
    return RASHIS[min(int(lon // RASHI_SPAN), 11)]


def nakshatra_for(longitude: float) -> tuple[Nakshatra, int]:
    """Return the Nakshatra containing ``longitude`` and the pada (1-4) within it."""
    lon = normalize_longitude(longitude)
    index = min(int(math.floor(lon / NAKSHATRA_SPAN)), 26)
    within = lon - index * NAKSHATRA_SPAN
    pada = min(int(math.floor(within / PADA_SPAN)) + 1, 4)
    return NAKSHATRAS[index], max(pada, 1)


def classify(longitude: float) -> ZodiacPosition:
    """Place a longitude in its Rashi, Nakshatra and pada.

    Accepts any real value (negative or beyond a full turn); the result
    always refers to the normalized longitude.
    """
    lon = normalize_longitude(longitude)
    nakshatra, pada = nakshatra_for(lon)
    return ZodiacPosition(
        longitude=lon, rashi=rashi_for(lon), nakshatra=nakshatra, pada=pada
    )


def house_offset(from_rashi: Rashi, to_rashi: Rashi) -> int:
    """Count signs from ``from_rashi`` to ``to_rashi``, inclusive (1-12)."""
    return ((to_rashi.index - from_rashi.index + 12) % 12) + 1


def find_rashi(name: str) -> Rashi | None:
    """Look up a Rashi by its English, Hinglish or Hindi name."""
    wanted = name.strip().lower()
    for rashi in RASHIS:
        if wanted in (rashi.english.lower(), rashi.hinglish.lower(), rashi.hindi):
            return rashi
    return None
