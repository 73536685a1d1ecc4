"""Localized reply templates for the Kundli acquisition flow."""

from astrology import kundli_marker
from models import Body, KundliResult, Language, Rashi

FLOW_TEXT = {
    Language.HINDI: {
        "ask_name": "🙏 जय सिया राम!\n\nमैं आपकी कुंडली बनाने में मदद करूंगी। पहले आपका शुभ नाम बताइए?",
        "ask_date": "धन्यवाद {name} जी! 🙏\n\nअब आपकी **जन्म तिथि** बताइए।\n(जैसे: 31 January 1989 या 31-01-1989)",
        "ask_time": "बहुत अच्छा {name} जी! ✨\n\nअब **जन्म का समय** बताइए।\n(जैसे: शाम 4 बजे या 16:00)",
        "ask_place": "बिल्कुल सही {name} जी! 📍\n\nअंतिम चरण: **जन्म स्थान** बताइए।\n(शहर का नाम, जैसे: दिल्ली, मुंबई)",
        "error_date": "🙏 यह तिथि समझ नहीं आई। कृपया इस प्रकार लिखें:\n• 31 January 1989\n• 31-01-1989",
        "error_time": "🙏 यह समय समझ नहीं आया। कृपया इस प्रकार लिखें:\n• शाम 4 बजे\n• 16:00",
        "error_place": "🙏 यह जगह नहीं मिली। कृपया शहर का नाम लिखें।",
        "short_name": "🙏 कृपया अपना नाम बताइए (कम से कम 2 अक्षर)",
        "error_generic": "🙏 क्षमा करें, कुंडली बनाने में त्रुटि आई। कृपया दोबारा प्रयास करें।",
    },
    Language.ENGLISH: {
        "ask_name": "🙏 Hello!\n\nI'll help you create your Kundli (Birth Chart). Please tell me your name?",
        "ask_date": "Thank you {name}! 🙏\n\nNow please share your **date of birth**.\n(Example: 31 January 1989 or 31-01-1989)",
        "ask_time": "Great {name}! ✨\n\nNow please share your **time of birth**.\n(Example: 4:00 PM or 16:00)",
        "ask_place": "Perfect {name}! 📍\n\nLast step: please share your **place of birth**.\n(City name, e.g., Delhi, Mumbai, London)",
        "error_date": "🙏 I couldn't understand that date. Please write like:\n• 31 January 1989\n• 31-01-1989",
        "error_time": "🙏 I couldn't understand that time. Please write like:\n• 4:00 PM\n• 16:00",
        "error_place": "🙏 I couldn't find that place. Please enter a city name.",
        "short_name": "🙏 Please enter your name (at least 2 characters)",
        "error_generic": "🙏 Sorry, there was an error creating your Kundli. Please try again.",
    },
    Language.HINGLISH: {
        "ask_name": "🙏 Jai Siya Ram!\n\nMain aapki Kundli banane mein madad karungi. Pehle aapka shubh naam batayein?",
        "ask_date": "Dhanyavaad {name} ji! 🙏\n\nAb aapki **janam tithi** batayein.\n(Jaise: 31 January 1989 ya 31-01-1989)",
        "ask_time": "Bahut accha {name} ji! ✨\n\nAb **janam ka samay** batayein.\n(Jaise: 4:00 PM ya 16:00 ya subah 6 baje)",
        "ask_place": "Perfect {name} ji! 📍\n\nLast step: **janam sthan** batayein.\n(City ka naam, jaise: Ferozepur, Delhi, Mumbai)",
        "error_date": "🙏 Ye date format samajh nahi aayi. Kripya aise likhein:\n• 31 January 1989\n• 31-01-1989",
        "error_time": "🙏 Ye time format samajh nahi aayi. Kripya aise likhein:\n• 4:00 PM\n• 16:00",
        "error_place": "🙏 Ye jagah nahi mili. Kripya city ka naam likhein.",
        "short_name": "🙏 Kripya apna naam batayein (kam se kam 2 letters)",
        "error_generic": "🙏 Sorry, Kundli generate karne mein error aayi. Kripya dobara try karein.",
    },
}

REPORT_TEXT = {
    Language.HINDI: {
        "greeting": "🙏 **जय सिया राम {name} जी!**",
        "ready": "✨ **आपकी कुंडली तैयार है!**",
        "lagna": "लग्न",
        "moon_sign": "चंद्र राशि",
        "nakshatra": "नक्षत्र",
        "pada": "पद",
        "mahadasha": "महादशा",
        "years_left": "वर्ष शेष",
        "planets": "ग्रह स्थिति",
        "table_header": "| ग्रह | राशि | भाव | अंश |",
        "ask_more": "🔮 **और जानना चाहते हैं? पूछें:**",
        "suggestions": (
            '💍 **विवाह** - "मेरी शादी कब होगी?"',
            '💰 **करियर** - "करियर में सफलता कैसे?"',
            '❤️ **स्वास्थ्य** - "स्वास्थ्य कैसा रहेगा?"',
            '👨‍👩‍👧 **परिवार** - "पारिवारिक जीवन?"',
            '📚 **शिक्षा** - "पढ़ाई में कैसा?"',
        ),
        "disclaimer": "⚠️ _कुंडली मार्गदर्शन है। मेहनत पर भरोसा रखें!_ 🙏",
    },
    Language.ENGLISH: {
        "greeting": "🙏 **Hello {name}!**",
        "ready": "✨ **Your Kundli is ready!**",
        "lagna": "Ascendant",
        "moon_sign": "Moon Sign",
        "nakshatra": "Nakshatra",
        "pada": "Pada",
        "mahadasha": "Mahadasha",
        "years_left": "years left",
        "planets": "Planetary Positions",
        "table_header": "| Planet | Sign | House | Degree |",
        "ask_more": "🔮 **Want to know more? Ask:**",
        "suggestions": (
            '💍 **Marriage** - "When will I marry?"',
            '💰 **Career** - "How will my career be?"',
            '❤️ **Health** - "How is my health?"',
            '👨‍👩‍👧 **Family** - "Family life?"',
            '📚 **Education** - "Studies?"',
        ),
        "disclaimer": "⚠️ _Kundli is guidance. Trust your efforts!_ 🙏",
    },
    Language.HINGLISH: {
        "greeting": "🙏 **Jai Siya Ram {name} ji!**",
        "ready": "✨ **Aapki Kundli taiyaar hai!**",
        "lagna": "Lagna",
        "moon_sign": "Chandra Rashi",
        "nakshatra": "Nakshatra",
        "pada": "Pada",
        "mahadasha": "Mahadasha",
        "years_left": "saal baaki",
        "planets": "Graha Sthiti",
        "table_header": "| ग्रह | राशि | भाव | अंश |",
        "ask_more": "🔮 **Aur jaanna hai? Poochein:**",
        "suggestions": (
            '💍 **Marriage** - "Shaadi kab?"',
            '💰 **Career** - "Success kaise?"',
            '❤️ **Health** - "Health kaisi?"',
            '👨‍👩‍👧 **Family** - "Family life?"',
            '📚 **Education** - "Padhai?"',
        ),
        "disclaimer": "⚠️ _Kundli margdarshan hai. Mehnat par bharosa!_ 🙏",
    },
}

MISSING_FIELD_TEXT = {
    "date": {
        Language.HINDI: "कृपया अपनी जन्म तारीख बताएं (जैसे: 15 अगस्त 1995)",
        Language.ENGLISH: "Please share your birth date (e.g., 15 August 1995)",
        Language.HINGLISH: "Apni birth date batao (jaise: 15 August 1995)",
    },
    "time": {
        Language.HINDI: "कृपया अपना जन्म समय बताएं (जैसे: सुबह 4 बजे या 4:30 PM)",
        Language.ENGLISH: "Please share your birth time (e.g., 4:30 AM or 16:30)",
        Language.HINGLISH: "Apna birth time batao (jaise: subah 4 baje ya 4:30 PM)",
    },
    "place": {
        Language.HINDI: "कृपया अपना जन्म स्थान बताएं (शहर का नाम)",
        Language.ENGLISH: "Please share your birth place (city name)",
        Language.HINGLISH: "Apna birth place batao (city ka naam)",
    },
}

MISSING_INTRO = {
    Language.HINDI: "🔮 आपकी कुंडली बनाने के लिए मुझे कुछ जानकारी चाहिए:",
    Language.ENGLISH: "🔮 To create your Kundli, I need some information:",
    Language.HINGLISH: "🔮 Aapki Kundli banane ke liye mujhe kuch details chahiye:",
}

# (emoji, Hindi name) per body, in table order
PLANET_LABELS = {
    Body.SUN: ("☀️", "सूर्य"),
    Body.MOON: ("🌙", "चंद्र"),
    Body.MARS: ("🔴", "मंगल"),
    Body.MERCURY: ("💚", "बुध"),
    Body.JUPITER: ("🟡", "गुरु"),
    Body.VENUS: ("💖", "शुक्र"),
    Body.SATURN: ("🪐", "शनि"),
    Body.RAHU: ("🐍", "राहु"),
    Body.KETU: ("🔥", "केतु"),
}

SEPARATOR = "━" * 27
MISSING_FIELD_ORDER = ("date", "time", "place")


def flow_text(language: Language, key: str, **kwargs) -> str:
    """Render one flow reply, falling back to Hinglish for unknown languages."""
    table = FLOW_TEXT.get(language, FLOW_TEXT[Language.HINGLISH])
    return table[key].format(**kwargs)


def missing_details_prompt(missing: frozenset[str] | set[str], language: Language) -> str:
    """Ask for every field in ``missing`` in one message."""
    lines = [
        MISSING_FIELD_TEXT[field].get(language, MISSING_FIELD_TEXT[field][Language.ENGLISH])
        for field in MISSING_FIELD_ORDER
        if field in missing
    ]
    intro = MISSING_INTRO.get(language, MISSING_INTRO[Language.ENGLISH])
    return intro + "\n\n" + "\n".join(lines)


def format_degree(longitude: float) -> str:
    """Degrees and arc-minutes within the sign, e.g. 12°30'."""
    # Rounded first so 16.3 does not print as 16°17'
    total_minutes = int(round((longitude % 30) * 60, 6))
    degrees, minutes = divmod(total_minutes, 60)
    return f"{degrees}°{minutes}'"


def rashi_label(rashi: Rashi, language: Language) -> str:
    if language == Language.ENGLISH:
        return rashi.english
    if language == Language.HINDI:
        return rashi.hindi
    return f"{rashi.hindi} ({rashi.english})"


def format_kundli_report(
    name: str, result: KundliResult, language: Language, data: dict
) -> str:
    """Render the finished Kundli as a localized Markdown reply.

    The reply ends with a machine-readable ``[[KUNDLI_DATA:...]]`` marker
    carrying ``data``.
    """
    text = REPORT_TEXT.get(language, REPORT_TEXT[Language.HINGLISH])
    mahadasha = result.mahadasha

    rows = []
    for body, (emoji, hindi_name) in PLANET_LABELS.items():
        placement = result.planets.get(body)
        if placement is None:
            continue
        planet_name = body.value.capitalize() if language == Language.ENGLISH else hindi_name
        retro = " (R)" if placement.retrograde else ""
        rows.append(
            f"| {emoji} {planet_name}{retro} | {rashi_label(placement.rashi, language)} "
            f"| {placement.house} | {format_degree(placement.longitude)} |"
        )

    lines = [
        text["greeting"].format(name=name),
        "",
        text["ready"],
        "",
        SEPARATOR,
        "",
        f"🌅 **{text['lagna']}:** {result.lagna.english} ({result.lagna.hindi}) "
        f"- {format_degree(result.lagna_longitude)}",
        f"🌙 **{text['moon_sign']}:** {result.moon_rashi.english} ({result.moon_rashi.hindi})",
        f"⭐ **{text['nakshatra']}:** {result.nakshatra.english} ({result.nakshatra.hindi}) "
        f"- {text['pada']} {result.pada}",
        f"🔄 **{text['mahadasha']}:** {mahadasha.current_lord} "
        f"- {mahadasha.years_remaining:.1f} {text['years_left']}",
        "",
        SEPARATOR,
        "",
        f"📊 **{text['planets']}:**",
        "",
        text["table_header"],
        "|:-----|:-----|:---:|----:|",
        *rows,
        "",
        SEPARATOR,
        "",
        text["ask_more"],
        "",
        *text["suggestions"],
        "",
        SEPARATOR,
        "",
        text["disclaimer"],
        "",
        kundli_marker(data),
    ]
    return "\n".join(lines)
