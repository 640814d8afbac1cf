"""Ordered provider chain with caching and per-provider breakers."""

import logging
import threading
from typing import Callable, Dict, List, Optional, Set, TypeVar

import requests

from skybrief.cache import Cache
from skybrief.config import Settings
from skybrief.errors import DataError
from skybrief.models.airport import AirportRecord, AirportDirectory
from skybrief.models.notam import Notam
from skybrief.sources.base import WeatherProvider, REPORT, AIRPORT, NEAREST, NOTAMS
from skybrief.sources.checkwx import CheckWXProvider
from skybrief.sources.avwx_rest import AvwxRestProvider
from skybrief.sources.aviationweather import AviationWeatherProvider
from skybrief.sources.faa_notam import FaaNotamProvider
from skybrief.sources.mock import MockProvider
from skybrief.weather.models import RawReport, NearestReport, ReportKind

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ProviderGateway:
    """
    Fetch data from an ordered list of providers.

    For each call the providers are tried in order; the first valid answer
    wins. A provider is skipped when it is unavailable, does not support the
    operation, or its breaker is tripped. Breakers trip on authentication and
    rate-limit failures and stay tripped for the life of the process. Other
    failures (not found, timeouts, server errors) only affect the current call.

    Per-airport results are cached under ``{kind}_{ICAO}``, ``airport_{ICAO}``
    and ``notams_{ICAO}``. The cache is read before and written after the
    provider calls, never while one is in flight. Nearest-station lookups are
    not cached.

    Example:
        gateway = ProviderGateway([CheckWXProvider(key), MockProvider()], Cache())
        report = gateway.fetch(ReportKind.METAR, "KJFK")
    """

    def __init__(self, providers: List[WeatherProvider], cache: Optional[Cache] = None):
        if not providers:
            raise ValueError("At least one provider is required")
        self.providers = list(providers)
        self.cache = cache if cache is not None else Cache()
        self._tripped: Set[str] = set()
        self._lock = threading.Lock()

    # --- Breakers ---

    def is_tripped(self, provider: WeatherProvider) -> bool:
        with self._lock:
            return provider.name in self._tripped

    def trip(self, provider: WeatherProvider, error: DataError) -> None:
        with self._lock:
            already = provider.name in self._tripped
            self._tripped.add(provider.name)
        if not already:
            logger.error(f"Disabling provider {provider.name} for this process: {error}")

    def breaker_status(self) -> Dict[str, Dict[str, bool]]:
        """Availability and breaker state per provider."""
        return {
            provider.name: {
                'available': provider.available,
                'tripped': self.is_tripped(provider),
            }
            for provider in self.providers
        }

    # --- Public operations ---

    def fetch(self, kind, icao: str) -> RawReport:
        """
        Latest raw METAR or TAF.

        Raises:
            DataError: NOT_FOUND if a provider said so and none had data,
                otherwise PROVIDER_FAILURE
        """
        kind = ReportKind.parse(kind)
        icao = icao.upper()
        return self._cached(
            Cache.fingerprint(kind.value, icao),
            REPORT,
            f"{kind.value} for {icao}",
            lambda provider: provider.fetch_report(kind, icao),
        )

    def fetch_airport(self, icao: str) -> AirportRecord:
        """
        Airport metadata.

        Raises:
            DataError: NOT_FOUND for unknown airports
        """
        icao = icao.upper()
        return self._cached(
            Cache.fingerprint("airport", icao),
            AIRPORT,
            f"airport {icao}",
            lambda provider: provider.fetch_airport(icao),
        )

    def fetch_notams(self, icao: str) -> List[Notam]:
        """Current NOTAMs; an empty list when no provider has any."""
        icao = icao.upper()
        return self._cached(
            Cache.fingerprint("notams", icao),
            NOTAMS,
            f"NOTAMs for {icao}",
            lambda provider: provider.fetch_notams(icao),
        )

    def fetch_nearest_report(self, kind, latitude: float, longitude: float) -> NearestReport:
        """Raw report of the station nearest to a coordinate (never cached)."""
        kind = ReportKind.parse(kind)
        return self._first(
            NEAREST,
            f"nearest {kind.value} at {latitude:.2f},{longitude:.2f}",
            lambda provider: provider.fetch_nearest_report(kind, latitude, longitude),
        )

    # --- Internal ---

    def _cached(self, fingerprint: str, capability: str, label: str,
                call: Callable[[WeatherProvider], T]) -> T:
        cached = self.cache.get(fingerprint)
        if cached is not None:
            return cached
        result = self._first(capability, label, call)
        self.cache.put(fingerprint, result)
        return result

    def _first(self, capability: str, label: str, call: Callable[[WeatherProvider], T]) -> T:
        """Try each eligible provider in order and return the first answer."""
        not_found: Optional[DataError] = None
        last_failure: Optional[DataError] = None

        for provider in self.providers:
            if not provider.available or not provider.supports(capability) or self.is_tripped(provider):
                continue
            try:
                result = call(provider)
            except DataError as e:
                if e.trips_breaker:
                    self.trip(provider, e)
                if e.is_not_found:
                    logger.debug(f"{provider.name} has no {label}")
                    not_found = not_found or e
                else:
                    logger.warning(f"{provider.name} failed for {label}: {e}")
                    last_failure = e
                continue
            if provider.name == MockProvider.name:
                logger.info(f"Using mock data for {label}")
            return result

        if not_found is not None:
            raise DataError.not_found(f"No {label}: {not_found.message}", provider=not_found.provider,
                                      status_code=not_found.status_code)
        if last_failure is not None:
            raise DataError.provider_failure(f"All providers failed for {label}: {last_failure.message}",
                                             provider=last_failure.provider)
        raise DataError.provider_failure(f"No provider available for {label}")


def build_providers(settings: Settings, session: Optional[requests.Session] = None,
                    directory: Optional[AirportDirectory] = None) -> List[WeatherProvider]:
    """
    The standard provider chain in priority order:
    CheckWX, AVWX, aviationweather.gov, FAA NOTAM, then built-in data.
    """
    timeout = settings.http_timeout
    return [
        CheckWXProvider(settings.checkwx_api_key, session=session, timeout=timeout),
        AvwxRestProvider(settings.avwx_api_token, session=session, timeout=timeout),
        AviationWeatherProvider(session=session, timeout=timeout, enabled=not settings.disable_public_api),
        FaaNotamProvider(settings.faa_client_id, settings.faa_client_secret, session=session, timeout=timeout),
        MockProvider(directory=directory),
    ]
