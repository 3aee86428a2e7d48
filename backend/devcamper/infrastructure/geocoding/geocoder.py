from dataclasses import asdict, dataclass

import httpx

from devcamper.application.errors import ValidationError
from devcamper.config import settings
from devcamper.infrastructure.cache.cache_service import cache_key, read_json, write_json
from devcamper.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GeocodedLocation:
    longitude: float
    latitude: float
    formatted_address: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None


def _parse_mapquest_payload(payload: dict) -> GeocodedLocation | None:
    results = payload.get("results") or []
    if not results:
        return None
    locations = results[0].get("locations") or []
    if not locations:
        return None
    best = locations[0]
    lat_lng = best.get("latLng") or best.get("displayLatLng") or {}
    if "lat" not in lat_lng or "lng" not in lat_lng:
        return None
    street = best.get("street") or None
    city = best.get("adminArea5") or None
    state = best.get("adminArea3") or None
    zipcode = best.get("postalCode") or None
    country = best.get("adminArea1") or None
    formatted = ", ".join(part for part in [street, city, state, zipcode, country] if part) or None
    return GeocodedLocation(
        longitude=float(lat_lng["lng"]),
        latitude=float(lat_lng["lat"]),
        formatted_address=formatted,
        street=street,
        city=city,
        state=state,
        zipcode=zipcode,
        country=country,
    )


def geocode(address: str) -> GeocodedLocation | None:
    """Resolve an address or zipcode, returning None when the provider is not configured."""
    if not settings.geocoder_api_key:
        logger.warning("geocoder_not_configured", address=address)
        return None

    key = cache_key("geocode", address.strip().lower())
    cached = read_json(key)
    if cached is not None:
        return GeocodedLocation(**cached)

    try:
        response = httpx.get(
            settings.geocoder_url,
            params={"key": settings.geocoder_api_key, "location": address, "maxResults": 1},
            timeout=settings.geocoder_timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("geocoder_request_failed", address=address, error=str(exc))
        raise ValidationError(f"Could not geocode address '{address}'") from exc

    location = _parse_mapquest_payload(payload)
    if location is None:
        logger.info("geocoder_no_match", address=address)
        return None

    write_json(key, asdict(location), settings.geocode_cache_ttl_seconds)
    logger.info("geocoder_resolved", address=address, city=location.city, zipcode=location.zipcode)
    return location
