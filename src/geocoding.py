import logging
import os

import httpx

from errors import PlaceNotFound
from models import GeoResolution

logger = logging.getLogger("geocoding")

OPENCAGE_API_URL = "https://api.opencagedata.com/geocode/v1/json"

IST_OFFSET = 5.5

# Well-known Indian cities resolved without a network call: (lat, lon, state)
INDIAN_CITIES: dict[str, tuple[float, float, str]] = {
    # Punjab
    "ferozepur": (30.9165, 74.6130, "Punjab"),
    "firozpur": (30.9165, 74.6130, "Punjab"),
    "ludhiana": (30.9010, 75.8573, "Punjab"),
    "amritsar": (31.6340, 74.8723, "Punjab"),
    "jalandhar": (31.3260, 75.5762, "Punjab"),
    "patiala": (30.3398, 76.3869, "Punjab"),
    "bathinda": (30.2110, 74.9455, "Punjab"),
    "mohali": (30.7046, 76.7179, "Punjab"),
    "pathankot": (32.2643, 75.6421, "Punjab"),
    "moga": (30.8165, 75.1717, "Punjab"),
    "chandigarh": (30.7333, 76.7794, "Chandigarh"),
    # Haryana
    "ambala": (30.3782, 76.7767, "Haryana"),
    "panipat": (29.3909, 76.9635, "Haryana"),
    "karnal": (29.6857, 76.9905, "Haryana"),
    "hisar": (29.1492, 75.7217, "Haryana"),
    "rohtak": (28.8955, 76.6066, "Haryana"),
    # Delhi NCR
    "delhi": (28.6139, 77.2090, "Delhi"),
    "new delhi": (28.6139, 77.2090, "Delhi"),
    "noida": (28.5355, 77.3910, "UP"),
    "gurgaon": (28.4595, 77.0266, "Haryana"),
    "gurugram": (28.4595, 77.0266, "Haryana"),
    "faridabad": (28.4089, 77.3178, "Haryana"),
    "ghaziabad": (28.6692, 77.4538, "UP"),
    # Maharashtra
    "mumbai": (19.0760, 72.8777, "Maharashtra"),
    "bombay": (19.0760, 72.8777, "Maharashtra"),
    "pune": (18.5204, 73.8567, "Maharashtra"),
    "nagpur": (21.1458, 79.0882, "Maharashtra"),
    "nashik": (19.9975, 73.7898, "Maharashtra"),
    "thane": (19.2183, 72.9781, "Maharashtra"),
    "aurangabad": (19.8762, 75.3433, "Maharashtra"),
    # Karnataka
    "bangalore": (12.9716, 77.5946, "Karnataka"),
    "bengaluru": (12.9716, 77.5946, "Karnataka"),
    "mysore": (12.2958, 76.6394, "Karnataka"),
    "mysuru": (12.2958, 76.6394, "Karnataka"),
    "mangalore": (12.9141, 74.8560, "Karnataka"),
    "hubli": (15.3647, 75.1240, "Karnataka"),
    # Tamil Nadu
    "chennai": (13.0827, 80.2707, "Tamil Nadu"),
    "madras": (13.0827, 80.2707, "Tamil Nadu"),
    "coimbatore": (11.0168, 76.9558, "Tamil Nadu"),
    "madurai": (9.9252, 78.1198, "Tamil Nadu"),
    "tiruchirappalli": (10.7905, 78.7047, "Tamil Nadu"),
    "salem": (11.6643, 78.1460, "Tamil Nadu"),
    # Telangana & AP
    "hyderabad": (17.3850, 78.4867, "Telangana"),
    "warangal": (17.9689, 79.5941, "Telangana"),
    "visakhapatnam": (17.6868, 83.2185, "AP"),
    "vijayawada": (16.5062, 80.6480, "AP"),
    "tirupati": (13.6288, 79.4192, "AP"),
    # West Bengal
    "kolkata": (22.5726, 88.3639, "West Bengal"),
    "calcutta": (22.5726, 88.3639, "West Bengal"),
    "howrah": (22.5958, 88.2636, "West Bengal"),
    "siliguri": (26.7271, 88.3953, "West Bengal"),
    # Gujarat
    "ahmedabad": (23.0225, 72.5714, "Gujarat"),
    "surat": (21.1702, 72.8311, "Gujarat"),
    "vadodara": (22.3072, 73.1812, "Gujarat"),
    "rajkot": (22.3039, 70.8022, "Gujarat"),
    "gandhinagar": (23.2156, 72.6369, "Gujarat"),
    # Rajasthan
    "jaipur": (26.9124, 75.7873, "Rajasthan"),
    "jodhpur": (26.2389, 73.0243, "Rajasthan"),
    "udaipur": (24.5854, 73.7125, "Rajasthan"),
    "kota": (25.2138, 75.8648, "Rajasthan"),
    "ajmer": (26.4499, 74.6399, "Rajasthan"),
    "bikaner": (28.0229, 73.3119, "Rajasthan"),
    # UP & Uttarakhand
    "lucknow": (26.8467, 80.9462, "UP"),
    "kanpur": (26.4499, 80.3319, "UP"),
    "varanasi": (25.3176, 82.9739, "UP"),
    "agra": (27.1767, 78.0081, "UP"),
    "prayagraj": (25.4358, 81.8463, "UP"),
    "allahabad": (25.4358, 81.8463, "UP"),
    "meerut": (28.9845, 77.7064, "UP"),
    "mathura": (27.4924, 77.6737, "UP"),
    "gorakhpur": (26.7606, 83.3732, "UP"),
    "bareilly": (28.3670, 79.4304, "UP"),
    "dehradun": (30.3165, 78.0322, "Uttarakhand"),
    "haridwar": (29.9457, 78.1642, "Uttarakhand"),
    # MP & Chhattisgarh
    "bhopal": (23.2599, 77.4126, "MP"),
    "indore": (22.7196, 75.8577, "MP"),
    "gwalior": (26.2183, 78.1828, "MP"),
    "jabalpur": (23.1815, 79.9864, "MP"),
    "ujjain": (23.1765, 75.7885, "MP"),
    "raipur": (21.2514, 81.6296, "Chhattisgarh"),
    # Bihar & Jharkhand
    "patna": (25.5941, 85.1376, "Bihar"),
    "gaya": (24.7914, 85.0002, "Bihar"),
    "ranchi": (23.3441, 85.3096, "Jharkhand"),
    "jamshedpur": (22.8046, 86.2029, "Jharkhand"),
    # Kerala
    "kochi": (9.9312, 76.2673, "Kerala"),
    "cochin": (9.9312, 76.2673, "Kerala"),
    "thiruvananthapuram": (8.5241, 76.9366, "Kerala"),
    "trivandrum": (8.5241, 76.9366, "Kerala"),
    "kozhikode": (11.2588, 75.7804, "Kerala"),
    # Others
    "bhubaneswar": (20.2961, 85.8245, "Odisha"),
    "guwahati": (26.1445, 91.7362, "Assam"),
    "shimla": (31.1048, 77.1734, "HP"),
    "srinagar": (34.0837, 74.7973, "J&K"),
    "jammu": (32.7266, 74.8570, "J&K"),
    "panaji": (15.4909, 73.8278, "Goa"),
}

# Country (name or ISO code, lowercase) -> standard UTC offset in hours
COUNTRY_OFFSETS: dict[str, float] = {
    "india": 5.5,
    "in": 5.5,
    "pakistan": 5,
    "pk": 5,
    "bangladesh": 6,
    "bd": 6,
    "nepal": 5.75,
    "np": 5.75,
    "sri lanka": 5.5,
    "lk": 5.5,
    "united states": -5,
    "united states of america": -5,
    "us": -5,
    "usa": -5,
    "united kingdom": 0,
    "uk": 0,
    "gb": 0,
    "canada": -5,
    "ca": -5,
    "australia": 10,
    "au": 10,
    "united arab emirates": 4,
    "uae": 4,
    "ae": 4,
    "singapore": 8,
    "sg": 8,
    "malaysia": 8,
    "my": 8,
}

# Used when the provider cannot be reached at all
FALLBACK_LOCATION = (28.6139, 77.2090)


def _title(place: str) -> str:
    return " ".join(word.capitalize() for word in place.split())


def _cache_lookup(place: str) -> GeoResolution | None:
    normalized = " ".join(place.lower().split())
    # "Ferozepur, Punjab, India" -> try the full string, then the first part
    for key in (normalized, normalized.split(",")[0].strip()):
        city = INDIAN_CITIES.get(key)
        if city:
            lat, lon, state = city
            return GeoResolution(
                latitude=lat,
                longitude=lon,
                timezone_offset=IST_OFFSET,
                label=f"{_title(key)}, {state}, India",
                country="India",
            )
    return None


def is_cached(place: str) -> bool:
    return _cache_lookup(place) is not None


def timezone_for(country: str, offset_seconds: float | None = None) -> float:
    """UTC offset in hours from the provider's offset, else from the country table."""
    if offset_seconds is not None:
        return offset_seconds / 3600
    return COUNTRY_OFFSETS.get(country.strip().lower(), IST_OFFSET)


def fallback_resolution(place: str) -> GeoResolution:
    lat, lon = FALLBACK_LOCATION
    return GeoResolution(
        latitude=lat,
        longitude=lon,
        timezone_offset=IST_OFFSET,
        label=f"{_title(place)}, India (approximate)",
        country="India",
        approximate=True,
    )


async def resolve_place(place: str) -> GeoResolution:
    """Resolve a place name to coordinates, UTC offset and a display label.

    Well-known Indian cities are answered from a static table. Other places
    go to the OpenCage API; if no API key is configured, or the API cannot be
    reached in time, a fixed approximate location is returned instead.

    Args:
        place: A place name (e.g., "Ferozepur" or "Toronto, Canada")

    Returns:
        The resolved location.

    Raises:
        PlaceNotFound: If the query is empty or the API has no result for it.
    """
    if not place or not place.strip():
        raise PlaceNotFound(place)

    cached = _cache_lookup(place)
    if cached:
        logger.info(f"Geocoding cache hit: {place}")
        return cached

    api_key = os.getenv("OPENCAGE_API_KEY", "")
    if not api_key:
        logger.warning(
            f"OPENCAGE_API_KEY not set, using approximate location for {place}"
        )
        return fallback_resolution(place)

    timeout = float(os.getenv("GEOCODING_TIMEOUT_SECONDS", "5.0"))

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                OPENCAGE_API_URL,
                params={"q": place, "key": api_key, "limit": 1, "no_annotations": 0},
                timeout=timeout,
            )
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Geocoding request failed for {place}: {e}")
        return fallback_resolution(place)

    results = data.get("results") or []
    if not results:
        logger.warning(f"No geocoding results for {place}")
        raise PlaceNotFound(place)

    result = results[0]
    components = result.get("components", {})
    country = components.get("country", "")
    offset_seconds = result.get("annotations", {}).get("timezone", {}).get("offset_sec")
    geometry = result.get("geometry") or {}
    if geometry.get("lat") is None or geometry.get("lng") is None:
        logger.warning(f"Geocoding result for {place} has no coordinates")
        raise PlaceNotFound(place)

    resolution = GeoResolution(
        latitude=geometry["lat"],
        longitude=geometry["lng"],
        timezone_offset=timezone_for(country, offset_seconds),
        label=result.get("formatted", place),
        country=country,
    )
    logger.info(
        f"Geocoded {place} to {resolution.latitude},{resolution.longitude} "
        f"(UTC{resolution.timezone_offset:+g})"
    )
    return resolution
