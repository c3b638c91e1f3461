"""Reverse geocoding: remote resolver plus a distance-tolerant cache.

The cache answers any query within ``radius_km`` of a previously
resolved point without touching the network. Its scan is linear in the
number of entries and entries are never evicted.
"""
from __future__ import annotations

import logging
import math
import threading
import time
from typing import Any, Callable, Optional

import requests

from ..core.config import GeocodingConfig, RetryPolicy
from ..core.models import UNKNOWN_LOCATION, GeoCacheEntry, PlaceLookup
from ..core.protocols import PlaceResolver


logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

# Address fields checked in order for a usable place name
PLACE_FIELDS = ("city", "town", "village", "municipality", "county")


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def parse_place_name(payload: Any) -> str:
    """Pick the first non-empty place field from a Nominatim response."""
    if not isinstance(payload, dict):
        raise ValueError("Response body is not a JSON object")
    address = payload.get("address") or {}
    if not isinstance(address, dict):
        raise ValueError("Response 'address' is not an object")
    for key in PLACE_FIELDS:
        value = address.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return UNKNOWN_LOCATION


class NominatimPlaceResolver:
    """Looks up place names on a Nominatim-compatible endpoint.

    Every attempt is preceded by a delay from the retry policy: the
    courtesy delay on the first attempt, doubled on each retry. Only
    HTTP 429 is retried. Nothing is ever raised to the caller; every
    failure resolves to ``UNKNOWN_LOCATION``.

    Each worker thread gets its own ``requests.Session``, since sessions
    are not safe to share between threads.
    """

    def __init__(
        self,
        config: Optional[GeocodingConfig] = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the resolver.

        Args:
            config: Endpoint, identification headers, timeout and retry policy.
            session_factory: Builds the HTTP session for a thread.
            sleep: Function used to wait before each attempt.
        """
        self._config = config or GeocodingConfig()
        self._session_factory = session_factory
        self._local = threading.local()
        self._sleep = sleep

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers.update({
                "User-Agent": self._config.user_agent,
                "Referer": self._config.referer,
            })
            self._local.session = session
        return session

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._config.retry

    def fetch_place_name(self, latitude: float, longitude: float) -> str:
        return self.lookup(latitude, longitude).place_name

    def lookup(self, latitude: float, longitude: float) -> PlaceLookup:
        """Resolve coordinates, reporting attempts and the failure reason."""
        policy = self.retry_policy
        params = {
            "lat": f"{latitude:.6f}",
            "lon": f"{longitude:.6f}",
            "format": "json",
            "addressdetails": "1",
        }

        for attempt in range(policy.max_attempts):
            self._sleep(policy.delay_for(attempt))
            attempts = attempt + 1

            try:
                response = self._session().get(
                    self._config.endpoint,
                    params=params,
                    timeout=self._config.timeout,
                )
            except requests.RequestException as e:
                logger.warning("Geocoding (%s, %s) failed: %s", latitude, longitude, e)
                return PlaceLookup(attempts=attempts, error=str(e))

            if response.status_code == 429:
                if attempts < policy.max_attempts:
                    logger.info(
                        "Geocoding rate limited, retrying (attempt %d/%d)",
                        attempts, policy.max_attempts,
                    )
                    continue
                logger.warning(
                    "Geocoding (%s, %s) still rate limited after %d attempts",
                    latitude, longitude, attempts,
                )
                return PlaceLookup(attempts=attempts, error="rate limited")

            try:
                response.raise_for_status()
                place_name = parse_place_name(response.json())
            except (requests.RequestException, ValueError) as e:
                logger.warning("Geocoding (%s, %s) failed: %s", latitude, longitude, e)
                return PlaceLookup(attempts=attempts, error=str(e))

            logger.debug("Geocoded (%s, %s) -> %s", latitude, longitude, place_name)
            return PlaceLookup(place_name=place_name, attempts=attempts)

        # max_attempts >= 1, so the loop always returns
        return PlaceLookup(attempts=policy.max_attempts, error="no attempts made")


class SpatialGeocodeCache:
    """Shared place-name cache with a distance tolerance.

    The lock covers the scan and the append, never the remote call, so
    concurrent misses for nearby points may both go to the network and
    both be stored. The cache reduces lookups; it does not promise one
    lookup per area.
    """

    def __init__(self, resolver: PlaceResolver, radius_km: float = 10.0):
        self._resolver = resolver
        self._radius_km = radius_km
        self._entries: list[GeoCacheEntry] = []
        self._lock = threading.Lock()

    @property
    def radius_km(self) -> float:
        return self._radius_km

    @property
    def entries(self) -> tuple[GeoCacheEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def find(self, latitude: float, longitude: float) -> Optional[GeoCacheEntry]:
        """First entry strictly within the radius, in insertion order."""
        with self._lock:
            for entry in self._entries:
                distance = haversine_km(latitude, longitude, entry.latitude, entry.longitude)
                if distance < self._radius_km:
                    return entry
        return None

    def resolve(self, latitude: float, longitude: float) -> str:
        cached = self.find(latitude, longitude)
        if cached is not None:
            return cached.place_name

        place_name = self._resolver.fetch_place_name(latitude, longitude)
        with self._lock:
            self._entries.append(GeoCacheEntry(latitude, longitude, place_name))
        return place_name
