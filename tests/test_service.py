"""Tests for the briefing service facade, backed by the mock provider."""

import threading

import pytest

from skybrief.config import Settings
from skybrief.errors import DataError, DataErrorKind, DecodeError, SynthesisError
from skybrief.models.route import RoutePlan
from skybrief.service import BriefingService
from skybrief.sources.base import WeatherProvider, REPORT
from skybrief.sources.gateway import ProviderGateway
from skybrief.sources.mock import SAMPLE_REPORTS
from skybrief.weather.models import RawReport, ReportKind
from skybrief.weather.severity import Severity


class TestDecode:

    def test_metar(self, mock_service):
        result = mock_service.decode(SAMPLE_REPORTS['KORD']['metar'])

        assert result['kind'] == "metar"
        assert result['icao'] == "KORD"
        assert result['severity']['level'] == "critical"
        assert 'forecast_periods' not in result

    def test_taf_periods(self, mock_service):
        result = mock_service.decode(SAMPLE_REPORTS['KJFK']['taf'], "taf")
        periods = result['forecast_periods']

        assert len(periods) == 3
        assert periods[0]['label'] == "INITIAL 121200Z to 131800Z"
        assert periods[1]['label'].startswith("FM ")
        assert periods[0]['severity']['level'] == "caution"

    def test_malformed(self, mock_service):
        with pytest.raises(DecodeError):
            mock_service.decode("NOT A REPORT")


class TestAirportWeather:

    def test_metar(self, mock_service):
        result = mock_service.airport_weather("kord")

        assert result['icao'] == "KORD"
        assert result['raw']['source'] == "mock"
        assert result['decoded']['severity']['level'] == "critical"

    def test_taf(self, mock_service):
        result = mock_service.airport_weather("KJFK", "taf")
        assert result['kind'] == "taf"
        assert result['decoded']['forecast_periods']

    def test_notams(self, mock_service):
        result = mock_service.airport_weather("KORD", "notams")

        assert result['count'] == 2
        assert result['notams'][0]['severity'] == "critical"

    def test_invalid_code(self, mock_service):
        with pytest.raises(ValueError):
            mock_service.airport_weather("JFK")

    def test_unknown_kind(self, mock_service):
        with pytest.raises(ValueError):
            mock_service.airport_weather("KJFK", "pirep")

    def test_airport(self, mock_service):
        assert mock_service.airport("egll").name

    def test_unknown_airport(self, mock_service):
        with pytest.raises(DataError) as exc_info:
            mock_service.airport("ZZZZ")
        assert exc_info.value.kind == DataErrorKind.NOT_FOUND

    def test_search(self, mock_service):
        assert [record.icao for record in mock_service.search_airports("heathrow")] == ["EGLL"]


class TestMultipleWeather:

    def test_results_per_airport(self, mock_service):
        result = mock_service.multiple_weather(["KJFK", "kord", "JF"], kinds=["metar"])

        assert result['count'] == 3
        assert result['airports']['KJFK']['metar']['decoded']['severity']['level'] == "normal"
        assert result['airports']['KORD']['metar']['decoded']['severity']['level'] == "critical"
        assert 'error' in result['airports']['JF']

    def test_unknown_kind_reported(self, mock_service):
        result = mock_service.multiple_weather(["KJFK"], kinds=["metar", "pirep"])
        assert 'error' in result['airports']['KJFK']['pirep']

    def test_too_many(self, mock_service):
        codes = [f"K{n:03d}" for n in range(11)]
        with pytest.raises(ValueError):
            mock_service.multiple_weather(codes)

    def test_empty(self, mock_service):
        with pytest.raises(ValueError):
            mock_service.multiple_weather([])


class TestQuickBriefing:

    def test_alerts(self, mock_service):
        result = mock_service.quick_briefing(["KJFK", "KLGA", "KORD"])

        assert [a['icao'] for a in result['alerts']] == ["KLGA", "KORD"]
        assert result['alerts'][0]['message'].startswith("Caution at KLGA: ")
        assert result['alerts'][1]['message'].startswith("Critical weather conditions at KORD: ")
        assert result['worst_severity'] == "critical"
        assert result['emoji'] == Severity.CRITICAL.emoji

    def test_all_normal(self, mock_service):
        result = mock_service.quick_briefing(["KJFK", "LFPG"])

        assert result['alerts'] == []
        assert result['worst_severity'] == "normal"

    def test_too_many(self, mock_service):
        with pytest.raises(ValueError):
            mock_service.quick_briefing(["KJFK", "KLGA", "KORD", "EGLL", "LFPG", "EDDF"])

    def test_malformed_code(self, mock_service):
        with pytest.raises(ValueError):
            mock_service.quick_briefing(["KJFK", "K!"])


class TestRouteBriefing:

    def test_demo(self, mock_service):
        briefing = mock_service.demo_briefing()

        assert briefing.route.alternates == ["KORD"]
        assert briefing.route.flight_level == 350
        assert briefing.worst_severity == Severity.CRITICAL
        assert len(briefing.enroute) == 4

    def test_from_dict(self, mock_service):
        briefing = mock_service.briefing({'origin': 'EGLL', 'destination': 'LFPG'})

        assert list(briefing.airports) == ["EGLL", "LFPG"]
        assert briefing.airports["EGLL"].metar.icao == "EGLL"

    def test_invalid(self, mock_service):
        with pytest.raises(SynthesisError):
            mock_service.briefing(RoutePlan("JFK", "KLAX"))

    def test_enroute_weather(self, mock_service):
        result = mock_service.enroute_weather("KJFK", "KLAX", points=3, flight_level=350)

        assert result['origin'] == "KJFK"
        assert result['flight_level'] == 350
        assert len(result['points']) == 3
        assert result['worst_severity'] in ("normal", "caution", "critical")

    def test_enroute_points_clamped(self, mock_service):
        assert len(mock_service.enroute_weather("KJFK", "KLAX", points=1)['points']) == 2


class TestCache:

    def test_stats_and_clear(self, mock_service):
        mock_service.airport_weather("KJFK")
        mock_service.airport_weather("KJFK", "taf")

        stats = mock_service.cache_stats()
        assert stats['count'] == 2
        assert "metar_KJFK" in stats['fingerprints']
        assert stats['ttl_seconds'] == 300
        assert stats['providers']['mock']['available']

        assert mock_service.clear_cache() == 2
        assert mock_service.cache_stats()['count'] == 0


class BarrierProvider(WeatherProvider):
    """Provider whose report fetches only return once ``parties`` of them are in flight."""

    name = "barrier"
    CAPABILITIES = frozenset([REPORT])

    def __init__(self, parties: int):
        self.barrier = threading.Barrier(parties, timeout=5)
        self.calls = []

    def fetch_report(self, kind, icao):
        self.calls.append((kind.value, icao))
        self.barrier.wait()
        text = f"METAR {icao} 121251Z 27008KT 10SM FEW250 20/10 A3000"
        if kind == ReportKind.TAF:
            text = f"TAF {icao} 121120Z 1212/1318 27008KT 9999 FEW250"
        return RawReport(icao=icao, kind=kind, raw_text=text, source=self.name)


def barrier_service(provider, directory):
    return BriefingService(ProviderGateway([provider]), directory, settings=Settings(max_workers=8))


class TestConcurrentFetches:
    """Fetches for distinct airports and kinds overlap instead of queueing."""

    def test_multiple_weather(self, directory):
        provider = BarrierProvider(parties=6)
        result = barrier_service(provider, directory).multiple_weather(["KJFK", "KLAX", "KORD"])

        assert len(provider.calls) == 6
        assert list(result['airports']) == ["KJFK", "KLAX", "KORD"]
        assert result['airports']['KORD']['taf']['kind'] == "taf"

    def test_quick_briefing(self, directory):
        provider = BarrierProvider(parties=3)
        result = barrier_service(provider, directory).quick_briefing(["KJFK", "KLAX", "KORD"])

        assert [airport['icao'] for airport in result['airports']] == ["KJFK", "KLAX", "KORD"]
        assert result['worst_severity'] == "normal"
