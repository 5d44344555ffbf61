import math
from typing import Any, Optional, Protocol

import httpx

from app.core import config
from app.core.errors import (
    GeocodingAdapterError,
    InvalidAddressError,
    MalformedResultError,
    NoMatchError,
    UpstreamUnavailableError,
)
from app.core.types import Location
from app.utils import get_logger

log = get_logger(__name__)


class GeocoderProtocol(Protocol):
    async def resolve(self, address: str) -> Location:
        ...


class LocationIQGeocoder(GeocoderProtocol):
    """
    Resolve addresses with the LocationIQ search API.

    Exactly one outbound request per call and no retries; callers decide whether a failure is worth retrying.
    """

    def __init__(
        self,
        api_key: str,
        url: str = config.GEOCODING_URL,
        timeout: float = config.GEOCODING_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def resolve(self, address: str) -> Location:
        """Return the coordinates of the first match for the given address."""
        if address is None or not address.strip():
            raise InvalidAddressError("Address is required.")
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, params=dict(key=self._api_key, q=address, format="json"))
        except Exception as e:  # noqa
            log.exception("Geocoding request failed")
            raise GeocodingAdapterError(f"Failed to get coordinates for address: {address}", cause=e) from e
        if not response.is_success:
            log.warning("Geocoding request failed with status %s", response.status_code)
            raise UpstreamUnavailableError(f"Failed to fetch data for address: {address}")
        try:
            data = response.json()
        except Exception as e:  # noqa
            log.exception("Could not decode geocoding response")
            raise GeocodingAdapterError(f"Failed to get coordinates for address: {address}", cause=e) from e
        return _parse_first_match(address, data)


def _parse_first_match(address: str, data: Any) -> Location:
    if not isinstance(data, list):
        raise MalformedResultError(f"Invalid coordinates for address: {address}")
    if len(data) == 0:
        raise NoMatchError(f"No data found for the given address: {address}")
    match = data[0]
    if not isinstance(match, dict):
        raise MalformedResultError(f"Invalid coordinates for address: {address}")
    lat = _to_coordinate(match.get("lat"), limit=90)
    lng = _to_coordinate(match.get("lon"), limit=180)
    if lat is None or lng is None:
        raise MalformedResultError(f"Invalid coordinates for address: {address}")
    return Location(lat=lat, lng=lng)


def _to_coordinate(value: Any, limit: float) -> Optional[float]:
    # LocationIQ returns coordinates as strings
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        coordinate = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(coordinate) or abs(coordinate) > limit:
        return None
    return coordinate


_geocoder = LocationIQGeocoder(api_key=config.LOCATIONIQ_TOKEN)


def get_geocoder() -> GeocoderProtocol:
    return _geocoder
