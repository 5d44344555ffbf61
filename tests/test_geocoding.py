import httpx
import pytest

from app.core.errors import (
    GeocodingAdapterError,
    InvalidAddressError,
    MalformedResultError,
    NoMatchError,
    UpstreamUnavailableError,
)
from app.core.geocoding import LocationIQGeocoder
from app.core.types import Location

pytestmark = pytest.mark.asyncio
URL = "https://geocoder.test/v1/search.php"
ADDRESS = "20 W 34th St, New York, NY 10001"


class Upstream:
    """Serves a canned response and records what the geocoder asked for."""

    def __init__(self, status_code: int = 200, json=None, content: bytes | None = None, error=None):
        self.status_code = status_code
        self.json = json
        self.content = content
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json)

    def geocoder(self) -> LocationIQGeocoder:
        return LocationIQGeocoder(api_key="test-key", url=URL, transport=httpx.MockTransport(self))


async def test_resolve():
    upstream = Upstream(json=[{"lat": "40.7484405", "lon": "-73.9878584"}, {"lat": "0", "lon": "0"}])
    location = await upstream.geocoder().resolve(ADDRESS)
    assert location == Location(lat=40.7484405, lng=-73.9878584)

    assert len(upstream.requests) == 1
    params = upstream.requests[0].url.params
    assert params["key"] == "test-key"
    assert params["q"] == ADDRESS
    assert params["format"] == "json"


async def test_resolve_numeric_coordinates():
    upstream = Upstream(json=[{"lat": 51.5, "lon": -0.12}])
    assert await upstream.geocoder().resolve("London") == Location(lat=51.5, lng=-0.12)


@pytest.mark.parametrize("address", ["", "   ", None])
async def test_resolve_blank_address(address):
    upstream = Upstream(json=[{"lat": "1", "lon": "1"}])
    with pytest.raises(InvalidAddressError):
        await upstream.geocoder().resolve(address)  # type: ignore
    assert upstream.requests == []


@pytest.mark.parametrize("status_code", [401, 404, 429, 500, 503])
async def test_resolve_upstream_error(status_code):
    upstream = Upstream(status_code=status_code, json={"error": "nope"})
    with pytest.raises(UpstreamUnavailableError):
        await upstream.geocoder().resolve(ADDRESS)


async def test_resolve_no_match():
    upstream = Upstream(json=[])
    with pytest.raises(NoMatchError):
        await upstream.geocoder().resolve(ADDRESS)


@pytest.mark.parametrize(
    "body",
    [
        [{"lat": "", "lon": "-73.98"}],
        [{"lon": "-73.98"}],
        [{"lat": "abc", "lon": "-73.98"}],
        [{"lat": "40.74", "lon": "NaN"}],
        [{"lat": "91", "lon": "0"}],
        [{"lat": True, "lon": "0"}],
        ["not an object"],
        {"lat": "40.74", "lon": "-73.98"},
    ],
)
async def test_resolve_malformed_result(body):
    upstream = Upstream(json=body)
    with pytest.raises(MalformedResultError):
        await upstream.geocoder().resolve(ADDRESS)


async def test_resolve_transport_error():
    upstream = Upstream(error=httpx.ConnectError("connection refused"))
    with pytest.raises(GeocodingAdapterError) as exc_info:
        await upstream.geocoder().resolve(ADDRESS)
    assert isinstance(exc_info.value.cause, httpx.ConnectError)


async def test_resolve_timeout():
    upstream = Upstream(error=httpx.ReadTimeout("timed out"))
    with pytest.raises(GeocodingAdapterError):
        await upstream.geocoder().resolve(ADDRESS)


async def test_resolve_invalid_json():
    upstream = Upstream(content=b"<html>definitely not json</html>")
    with pytest.raises(GeocodingAdapterError):
        await upstream.geocoder().resolve(ADDRESS)


async def test_resolve_unexpected_transport_failure():
    upstream = Upstream(error=RuntimeError("transport exploded"))
    with pytest.raises(GeocodingAdapterError) as exc_info:
        await upstream.geocoder().resolve(ADDRESS)
    assert isinstance(exc_info.value.cause, RuntimeError)
