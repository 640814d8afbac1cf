"""Provider interface shared by every weather data source."""

import logging
from abc import ABC
from typing import Any, Dict, FrozenSet, List, Optional

import requests

from skybrief.errors import DataError
from skybrief.models.airport import AirportRecord
from skybrief.models.notam import Notam
from skybrief.weather.models import RawReport, NearestReport, ReportKind

logger = logging.getLogger(__name__)

# Capabilities a provider may offer
REPORT = "report"
AIRPORT = "airport"
NEAREST = "nearest"
NOTAMS = "notams"


class WeatherProvider(ABC):
    """
    Base interface for all data providers.

    A provider declares which operations it offers in ``CAPABILITIES``; the
    gateway only calls operations a provider supports. Operations signal
    failure by raising DataError:

    - NOT_FOUND: the provider answered but has no such airport/report
    - PROVIDER_FAILURE: transport, server or credential problem; with
      ``trips_breaker`` set for authentication and rate-limit errors
    """

    name = "provider"
    CAPABILITIES: FrozenSet[str] = frozenset()

    @property
    def available(self) -> bool:
        """False when the provider cannot be used at all (e.g. no credentials)."""
        return True

    def supports(self, capability: str) -> bool:
        return capability in self.CAPABILITIES

    def fetch_report(self, kind: ReportKind, icao: str) -> RawReport:
        """Latest raw METAR or TAF for an airport."""
        raise self._unsupported(REPORT)

    def fetch_airport(self, icao: str) -> AirportRecord:
        """Airport metadata."""
        raise self._unsupported(AIRPORT)

    def fetch_nearest_report(self, kind: ReportKind, latitude: float, longitude: float) -> NearestReport:
        """Raw report of the reporting station closest to a coordinate."""
        raise self._unsupported(NEAREST)

    def fetch_notams(self, icao: str) -> List[Notam]:
        """Current NOTAMs for an airport."""
        raise self._unsupported(NOTAMS)

    def _unsupported(self, capability: str) -> DataError:
        return DataError.provider_failure(f"{capability} not supported", provider=self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(available={self.available})"


class HttpProvider(WeatherProvider):
    """
    Provider backed by an HTTP API.

    Every request carries a timeout. HTTP status codes map onto DataError:

        204, 400, 404       -> NOT_FOUND
        401, 403, 429       -> PROVIDER_FAILURE, trips the breaker
        other 4xx/5xx       -> PROVIDER_FAILURE
        timeout, connection -> PROVIDER_FAILURE
    """

    BASE_URL = ""
    DEFAULT_TIMEOUT = 12
    USER_AGENT = "skybrief/1.0 (aviation weather briefing)"

    NOT_FOUND_STATUSES = (204, 400, 404)
    BREAKER_STATUSES = (401, 403, 429)

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = DEFAULT_TIMEOUT):
        """
        Args:
            session: Optional requests.Session for dependency injection (testing).
            timeout: HTTP request timeout in seconds.
        """
        self._session = session or requests.Session()
        self._timeout = timeout
        self._session.headers.setdefault("User-Agent", self.USER_AGENT)

    def _headers(self) -> Dict[str, str]:
        """Per-request headers (credentials)."""
        return {}

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None):
        """
        Make HTTP GET request and return the response.

        Raises:
            DataError: For timeouts, transport errors and non-2xx answers
        """
        url = f"{self.BASE_URL}{path}"
        try:
            response = self._session.get(url, params=params, headers=self._headers(), timeout=self._timeout)
        except requests.exceptions.Timeout as e:
            raise DataError.provider_failure(f"Timed out after {self._timeout}s: {path}", provider=self.name) from e
        except requests.exceptions.RequestException as e:
            raise DataError.provider_failure(f"Request failed for {path}: {e}", provider=self.name) from e

        status = response.status_code
        if status in self.NOT_FOUND_STATUSES:
            raise DataError.not_found(f"No data for {path} (HTTP {status})", provider=self.name, status_code=status)
        if status in self.BREAKER_STATUSES:
            raise DataError.provider_failure(
                f"Access refused for {path} (HTTP {status})",
                provider=self.name, status_code=status, trips_breaker=True,
            )
        if status >= 400:
            raise DataError.provider_failure(f"HTTP {status} for {path}", provider=self.name, status_code=status)
        return response

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._get(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise DataError.provider_failure(f"Invalid JSON from {path}", provider=self.name) from e

    def _get_text(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        return self._get(path, params).text or ""
