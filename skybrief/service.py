"""
Briefing service: the logical operations exposed by the CLI and the web API.

One BriefingService owns the process-wide cache, provider chain and
synthesizer. Results are plain dictionaries ready for JSON.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional, Union

import requests

from skybrief.cache import Cache
from skybrief.config import Settings, MAX_MULTIPLE_AIRPORTS, MAX_QUICK_AIRPORTS, clamp_enroute_points
from skybrief.errors import DataError, DecodeError
from skybrief.models.airport import AirportRecord, AirportDirectory, is_valid_icao, normalize_icao
from skybrief.models.briefing import Briefing
from skybrief.models.route import RoutePlan
from skybrief.sources.gateway import ProviderGateway, build_providers
from skybrief.synthesis import BriefingSynthesizer, weather_alert_message
from skybrief.weather.models import DecodedReport, ReportKind
from skybrief.weather.parser import ReportDecoder
from skybrief.weather.severity import Severity, SeverityClassifier, worst_severity
from skybrief.weather.summary import period_label, describe_conditions

logger = logging.getLogger(__name__)

DEMO_ROUTE = {
    'origin': 'KJFK',
    'destination': 'KLAX',
    'alternates': ['KORD'],
    'flight_level': 350,
    'route_string': 'KJFK DCT KLAX',
}


def decoded_to_dict(report: DecodedReport) -> Dict[str, Any]:
    """Decoded report with its verdict and, for TAFs, a verdict per forecast block."""
    data = report.to_dict()
    data['severity'] = SeverityClassifier.assess(report).to_dict()
    if report.kind == ReportKind.TAF:
        data['forecast_periods'] = [
            {
                'label': period_label(period),
                'summary': describe_conditions(period.conditions),
                'severity': verdict.to_dict(),
            }
            for period, verdict in SeverityClassifier.period_verdicts(report)
        ]
    return data


class BriefingService:
    """
    Facade over decoding, data acquisition and briefing synthesis.

    Example:
        service = BriefingService.from_settings(Settings.from_env())
        result = service.airport_weather("KJFK", "metar")
        print(result["decoded"]["summary"])
    """

    def __init__(self, gateway: ProviderGateway, directory: AirportDirectory,
                 synthesizer: Optional[BriefingSynthesizer] = None, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.gateway = gateway
        self.directory = directory
        self.synthesizer = synthesizer or BriefingSynthesizer(
            gateway,
            max_workers=self.settings.max_workers,
            enroute_points=self.settings.enroute_points,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None,
                      session: Optional[requests.Session] = None) -> 'BriefingService':
        """Wire cache, providers, gateway and synthesizer from settings."""
        settings = settings or Settings.from_env()
        directory = AirportDirectory()
        cache = Cache(ttl_seconds=settings.cache_ttl_seconds)
        gateway = ProviderGateway(build_providers(settings, session=session, directory=directory), cache)
        available = [p.name for p in gateway.providers if p.available]
        logger.info(f"Providers available: {', '.join(available)}")
        return cls(gateway, directory, settings=settings)

    # --- Decoding ---

    def decode(self, raw_text: str, kind: Optional[str] = None) -> Dict[str, Any]:
        """
        Decode report text.

        Args:
            raw_text: METAR or TAF text
            kind: "metar" or "taf"; detected from the text when omitted

        Raises:
            DecodeError: For malformed text
        """
        if kind:
            report = ReportDecoder.decode(raw_text, kind)
        else:
            report = ReportDecoder.decode_auto(raw_text)
        return decoded_to_dict(report)

    # --- Single airport ---

    def airport_weather(self, icao: str, kind: str = "metar") -> Dict[str, Any]:
        """
        Latest METAR, TAF or NOTAMs for one airport.

        Raises:
            ValueError: For a malformed ICAO code or unknown kind
            DecodeError: If the provider returned undecodable text
        """
        icao = self._check_icao(icao)
        if str(kind).lower() == "notams":
            return self.notams(icao)
        report_kind = ReportKind.parse(kind)
        raw = self.gateway.fetch(report_kind, icao)
        decoded = ReportDecoder.decode(raw.raw_text, report_kind)
        return {
            'icao': icao,
            'kind': report_kind.value,
            'raw': raw.to_dict(),
            'decoded': decoded_to_dict(decoded),
        }

    def notams(self, icao: str) -> Dict[str, Any]:
        icao = self._check_icao(icao)
        notams = self.gateway.fetch_notams(icao)
        return {
            'icao': icao,
            'kind': 'notams',
            'count': len(notams),
            'notams': [notam.to_dict() for notam in notams],
        }

    def airport(self, icao: str) -> AirportRecord:
        """
        Raises:
            ValueError: For a malformed ICAO code
            DataError: NOT_FOUND for unknown airports
        """
        return self.gateway.fetch_airport(self._check_icao(icao))

    def search_airports(self, query: str, limit: int = 10) -> List[AirportRecord]:
        """Unranked substring search over the built-in airport table."""
        return self.directory.search(query, limit=limit)

    # --- Multiple airports ---

    def multiple_weather(self, icaos: Iterable[str],
                         kinds: Iterable[str] = ("metar", "taf")) -> Dict[str, Any]:
        """
        Weather for up to 10 airports; invalid codes and failures are
        reported per airport. All airport and kind fetches run concurrently.

        Raises:
            ValueError: For an empty list or more than 10 airports
        """
        codes = self._check_count(icaos, MAX_MULTIPLE_AIRPORTS)
        kinds = [str(kind).lower() for kind in kinds]
        valid = [icao for icao in codes if is_valid_icao(icao)]

        with ThreadPoolExecutor(max_workers=self._pool_size(len(valid) * len(kinds))) as executor:
            futures = {
                (icao, kind): executor.submit(self.airport_weather, icao, kind)
                for icao in valid for kind in kinds
            }

            results: Dict[str, Any] = {}
            for icao in codes:
                if icao not in valid:
                    results[icao] = {'error': f"Invalid ICAO code {icao!r}"}
                    continue
                entry: Dict[str, Any] = {}
                for kind in kinds:
                    try:
                        entry[kind] = futures[(icao, kind)].result()
                    except (DataError, DecodeError, ValueError) as e:
                        entry[kind] = {'error': str(e)}
                results[icao] = entry
        return {'airports': results, 'count': len(results)}

    def quick_briefing(self, icaos: Iterable[str]) -> Dict[str, Any]:
        """
        METAR summary and verdict for up to 5 airports, with an alert for
        every airport that is not normal. The METARs are fetched concurrently.

        Raises:
            ValueError: For an empty list, more than 5 airports or a malformed code
        """
        codes = [self._check_icao(icao) for icao in self._check_count(icaos, MAX_QUICK_AIRPORTS)]
        airports = []
        alerts = []
        levels = []

        with ThreadPoolExecutor(max_workers=self._pool_size(len(codes))) as executor:
            futures = [(icao, executor.submit(self._fetch_metar, icao)) for icao in codes]
            outcomes = []
            for icao, future in futures:
                try:
                    outcomes.append((icao, future.result(), None))
                except (DataError, DecodeError) as e:
                    outcomes.append((icao, None, e))

        for icao, report, error in outcomes:
            if error is not None:
                airports.append({'icao': icao, 'error': str(error)})
                continue

            verdict = SeverityClassifier.classify(report)
            levels.append(verdict.level)
            airports.append({
                'icao': icao,
                'summary': report.summary,
                'severity': verdict.to_dict(),
            })
            if verdict.level == Severity.CRITICAL:
                alerts.append({'icao': icao, 'severity': verdict.level.value,
                               'message': weather_alert_message(icao, verdict)})
            elif verdict.level == Severity.CAUTION:
                alerts.append({'icao': icao, 'severity': verdict.level.value,
                               'message': f"Caution at {icao}: {', '.join(verdict.reasons)}"})

        worst = worst_severity(levels)
        return {
            'airports': airports,
            'alerts': alerts,
            'worst_severity': worst.value,
            'emoji': worst.emoji,
        }

    # --- Route briefing ---

    def briefing(self, plan: Union[RoutePlan, Dict[str, Any]]) -> Briefing:
        """
        Raises:
            SynthesisError: INVALID_AIRPORT for malformed or unknown codes
        """
        if not isinstance(plan, RoutePlan):
            plan = RoutePlan.from_dict(plan)
        return self.synthesizer.build(plan)

    def demo_briefing(self) -> Briefing:
        """Briefing for KJFK to KLAX with KORD as alternate at FL350."""
        return self.briefing(RoutePlan.from_dict(DEMO_ROUTE))

    def enroute_weather(self, origin: str, destination: str, points: Optional[int] = None,
                        flight_level: Optional[int] = None) -> Dict[str, Any]:
        """
        Nearest-station weather at points sampled along the great circle.

        Raises:
            ValueError: For malformed codes or airports without coordinates
            DataError: NOT_FOUND for unknown airports
        """
        origin_record = self.airport(origin)
        destination_record = self.airport(destination)
        if not origin_record.has_coordinates or not destination_record.has_coordinates:
            raise ValueError("Could not resolve airport coordinates")

        count = clamp_enroute_points(points if points is not None else self.settings.enroute_points)
        enroute = self.synthesizer.enroute_weather(origin_record, destination_record, count)
        worst = worst_severity(point.severity for point in enroute)
        return {
            'origin': origin_record.icao,
            'destination': destination_record.icao,
            'flight_level': flight_level,
            'points': [point.to_dict() for point in enroute],
            'worst_severity': worst.value,
        }

    # --- Cache ---

    def cache_stats(self) -> Dict[str, Any]:
        stats = self.gateway.cache.stats()
        stats['ttl_seconds'] = self.gateway.cache.ttl_seconds
        stats['providers'] = self.gateway.breaker_status()
        return stats

    def clear_cache(self) -> int:
        return self.gateway.cache.clear()

    # --- Helpers ---

    def _fetch_metar(self, icao: str) -> DecodedReport:
        raw = self.gateway.fetch(ReportKind.METAR, icao)
        return ReportDecoder.decode(raw.raw_text, ReportKind.METAR)

    def _pool_size(self, tasks: int) -> int:
        return max(1, min(self.settings.max_workers, tasks))

    # --- Validation ---

    @staticmethod
    def _check_icao(icao: str) -> str:
        code = normalize_icao(icao)
        if not is_valid_icao(code):
            raise ValueError(f"Invalid ICAO code {icao!r}: must be 4 alphanumeric characters")
        return code

    @staticmethod
    def _check_count(icaos: Iterable[str], limit: int) -> List[str]:
        codes = []
        for icao in icaos:
            code = normalize_icao(icao)
            if code and code not in codes:
                codes.append(code)
        if not codes:
            raise ValueError("At least one airport code is required")
        if len(codes) > limit:
            raise ValueError(f"At most {limit} airports per request, got {len(codes)}")
        return codes
