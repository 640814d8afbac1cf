import pytest
from datetime import datetime, timezone
from typing import List, Optional

from skybrief.cache import Cache
from skybrief.config import Settings
from skybrief.errors import DataError
from skybrief.models.airport import AirportDirectory
from skybrief.models.notam import Notam
from skybrief.service import BriefingService
from skybrief.sources.base import WeatherProvider, REPORT, AIRPORT, NEAREST, NOTAMS
from skybrief.sources.gateway import ProviderGateway
from skybrief.sources.mock import MockProvider
from skybrief.weather.models import RawReport, NearestReport, ReportKind

FIXED_NOW = datetime(2024, 1, 12, 12, 51, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class StubProvider(WeatherProvider):
    """
    Provider answering with normal weather for every station.

    Records every call so tests can check what was fetched. ``failures``
    maps (kind, icao) to a DataError raised instead of answering.
    """

    name = "stub"
    CAPABILITIES = frozenset([REPORT, AIRPORT, NEAREST, NOTAMS])

    def __init__(self, directory: AirportDirectory, failures: Optional[dict] = None,
                 nearest_station: str = "KMID"):
        self.directory = directory
        self.failures = failures or {}
        self.nearest_station = nearest_station
        self.calls: List[tuple] = []

    def _fail(self, key):
        if key in self.failures:
            raise self.failures[key]

    def fetch_report(self, kind: ReportKind, icao: str) -> RawReport:
        self.calls.append((kind.value, icao))
        self._fail((kind.value, icao))
        if kind == ReportKind.TAF:
            text = f"TAF {icao} 121120Z 1212/1318 27008KT 9999 FEW250"
        else:
            text = f"METAR {icao} 121251Z 27008KT 10SM FEW250 20/10 A3000"
        return RawReport(icao=icao, kind=kind, raw_text=text, source=self.name)

    def fetch_airport(self, icao: str):
        self.calls.append(("airport", icao))
        record = self.directory.get(icao)
        if record is None:
            raise DataError.not_found(f"Unknown airport {icao}", provider=self.name)
        return record

    def fetch_nearest_report(self, kind: ReportKind, latitude: float, longitude: float) -> NearestReport:
        self.calls.append(("nearest", round(latitude, 2), round(longitude, 2)))
        self._fail(("nearest", None))
        return NearestReport(
            report=self.fetch_report(kind, self.nearest_station),
            latitude=latitude,
            longitude=longitude,
            distance_nm=12.0,
        )

    def fetch_notams(self, icao: str) -> List[Notam]:
        self.calls.append(("notams", icao))
        self._fail(("notams", icao))
        return []


@pytest.fixture(scope="session")
def directory() -> AirportDirectory:
    """The packaged airport table."""
    return AirportDirectory()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stub_provider(directory) -> StubProvider:
    return StubProvider(directory)


@pytest.fixture
def make_stub(directory):
    """Factory for stub providers with injected failures."""
    def _make(**kwargs) -> StubProvider:
        return StubProvider(directory, **kwargs)
    return _make


@pytest.fixture
def mock_provider(directory) -> MockProvider:
    return MockProvider(directory=directory, seed=42, clock=lambda: FIXED_NOW)


@pytest.fixture
def mock_gateway(mock_provider) -> ProviderGateway:
    return ProviderGateway([mock_provider], Cache())


@pytest.fixture
def mock_service(mock_gateway, directory) -> BriefingService:
    """Service backed only by built-in data (no network)."""
    return BriefingService(mock_gateway, directory, settings=Settings(enroute_points=4, max_workers=4))
