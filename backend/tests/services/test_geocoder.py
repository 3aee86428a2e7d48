import httpx
import pytest

from devcamper.application.errors import ValidationError
from devcamper.config import settings
from devcamper.infrastructure.geocoding.geocoder import GeocodedLocation, geocode

MAPQUEST_PAYLOAD = {
    "results": [
        {
            "locations": [
                {
                    "street": "233 Bay State Rd",
                    "adminArea5": "Boston",
                    "adminArea3": "MA",
                    "postalCode": "02215",
                    "adminArea1": "US",
                    "latLng": {"lat": 42.350846, "lng": -71.104028},
                }
            ]
        }
    ]
}


def fake_response(payload: dict, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload, request=httpx.Request("GET", settings.geocoder_url))


def test_geocode_without_api_key_returns_none(monkeypatch):
    """
    Validate the geocoder is a no-op when unconfigured.

    1. Keep the API key empty.
    2. Fail the test if the provider is called.
    3. Validate None is returned.
    """
    monkeypatch.setattr(httpx, "get", lambda *args, **kwargs: pytest.fail("provider should not be called"))
    assert geocode("02215") is None


def test_geocode_calls_provider_and_caches(monkeypatch, fake_redis, db_session):
    """
    Validate provider lookup and redis caching.

    1. Configure an API key and a fake provider response.
    2. Geocode an address twice.
    3. Validate the parsed location.
    4. Validate the provider is called once thanks to the cache.
    """
    calls = []

    def fake_get(url, params, timeout):
        calls.append(params["location"])
        return fake_response(MAPQUEST_PAYLOAD)

    monkeypatch.setattr(settings, "geocoder_api_key", "test-key")
    monkeypatch.setattr(httpx, "get", fake_get)

    first = geocode("233 Bay State Rd Boston MA 02215")
    second = geocode("233 Bay State Rd Boston MA 02215")
    assert first == second
    assert first == GeocodedLocation(
        longitude=-71.104028,
        latitude=42.350846,
        formatted_address="233 Bay State Rd, Boston, MA, 02215, US",
        street="233 Bay State Rd",
        city="Boston",
        state="MA",
        zipcode="02215",
        country="US",
    )
    assert calls == ["233 Bay State Rd Boston MA 02215"]
    assert "devcamper:geocode:233 bay state rd boston ma 02215" in fake_redis.store


def test_geocode_without_match_returns_none(monkeypatch, db_session):
    """
    Validate empty provider results.

    1. Configure an API key.
    2. Return a payload with no locations.
    3. Validate None is returned.
    """
    monkeypatch.setattr(settings, "geocoder_api_key", "test-key")
    monkeypatch.setattr(httpx, "get", lambda url, params, timeout: fake_response({"results": [{"locations": []}]}))
    assert geocode("nowhere") is None


def test_geocode_provider_error_raises_validation_error(monkeypatch, db_session):
    """
    Validate provider failures surface as validation errors.

    1. Configure an API key.
    2. Return a 500 provider response.
    3. Receive ValidationError.
    """
    monkeypatch.setattr(settings, "geocoder_api_key", "test-key")
    monkeypatch.setattr(httpx, "get", lambda url, params, timeout: fake_response({}, status_code=500))
    with pytest.raises(ValidationError, match="Could not geocode"):
        geocode("02215")
