"""
Reverse geocoding through the OpenCage API.

Best effort: a missing API key or any provider failure yields an empty
city/country pair instead of an error.
"""

from typing import Optional

import httpx

from adventure_api.core.config import get_settings
from adventure_api.core.logging import get_logger
from adventure_api.core.metrics import record_external_call

logger = get_logger(__name__)

# Most specific first
CITY_COMPONENTS = ("city", "town", "village", "municipality")


def extract_place(payload: dict) -> dict[str, str]:
    results = payload.get("results") or []
    if not results:
        return {"city": "", "country": ""}

    components = results[0].get("components") or {}
    city = next((components[key] for key in CITY_COMPONENTS if components.get(key)), "")
    return {"city": city, "country": components.get("country") or ""}


async def reverse_geocode(
    latitude: float,
    longitude: float,
    api_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> dict[str, str]:
    settings = get_settings()
    api_key = api_key if api_key is not None else settings.OPENCAGE_API_KEY
    empty = {"city": "", "country": ""}

    if not api_key:
        logger.warning("geocoding_skipped", reason="api_key_missing")
        return empty

    params = {"q": f"{latitude},{longitude}", "key": api_key, "no_annotations": 1}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as owned:
                response = await owned.get(settings.OPENCAGE_API_URL, params=params)
        else:
            response = await client.get(settings.OPENCAGE_API_URL, params=params)
        response.raise_for_status()
        place = extract_place(response.json())
    except (httpx.HTTPError, ValueError) as e:
        record_external_call("opencage", "error")
        logger.error("geocoding_failed", latitude=latitude, longitude=longitude, error=str(e))
        return empty

    record_external_call("opencage", "success")
    return place
