"""Route briefing synthesis: concurrent fetch, classification and aggregation."""

import logging
from concurrent.futures import ThreadPoolExecutor, Future
from functools import reduce
from typing import Dict, List, Optional, Tuple

from skybrief.config import DEFAULT_MAX_WORKERS, DEFAULT_ENROUTE_POINTS, clamp_enroute_points
from skybrief.errors import DataError, DecodeError, SynthesisError
from skybrief.geo import GeoSampler
from skybrief.models.airport import AirportRecord
from skybrief.models.briefing import (
    Briefing,
    AirportBriefing,
    EnroutePoint,
    CriticalAlert,
    BriefingSummary,
)
from skybrief.models.navpoint import NavPoint
from skybrief.models.route import RoutePlan
from skybrief.sources.gateway import ProviderGateway
from skybrief.weather.models import DecodedReport, ReportKind
from skybrief.weather.parser import ReportDecoder
from skybrief.weather.severity import Severity, SeverityVerdict, SeverityClassifier, max_severity

logger = logging.getLogger(__name__)

RECOMMEND_DELAY = "Consider delaying departure due to critical weather conditions"
RECOMMEND_ALTERNATES = "Review alternate airports and ensure adequate fuel reserves"
RECOMMEND_MONITOR = "Monitor weather conditions closely during flight"
RECOMMEND_ICING = "Consider filing for a higher altitude if icing is a concern"
RECOMMEND_REVIEW_ALERTS = "Review all critical alerts before departure"
RECOMMEND_FAVORABLE = "Weather conditions are favorable for flight"


def recommendations(worst: Severity, alerts: List[CriticalAlert]) -> List[str]:
    """Recommendation list derived from the worst severity and the alerts."""
    result = []
    if worst == Severity.CRITICAL:
        result += [RECOMMEND_DELAY, RECOMMEND_ALTERNATES]
    elif worst == Severity.CAUTION:
        result += [RECOMMEND_MONITOR, RECOMMEND_ICING]

    if alerts:
        result.append(RECOMMEND_REVIEW_ALERTS)

    if not result:
        result.append(RECOMMEND_FAVORABLE)
    return result


def weather_alert_message(icao: str, verdict: SeverityVerdict) -> str:
    return f"Critical weather conditions at {icao}: {', '.join(verdict.reasons)}"


class BriefingSynthesizer:
    """
    Build a Briefing for a RoutePlan.

    Steps:
        1. Validate every ICAO code, then resolve all airports concurrently.
           Any invalid or unresolvable code aborts with SynthesisError.
        2. Fan out METAR, TAF and NOTAM fetches for every airport, plus one
           nearest-station METAR per great-circle sample between origin and
           destination, on a single thread pool; join all of them.
        3. Decode and classify; a failed fetch or decode only degrades its
           own entry.
        4. Fold the worst severity over airport METARs and enroute points,
           collect critical alerts and derive recommendations.

    Example:
        synthesizer = BriefingSynthesizer(gateway)
        briefing = synthesizer.build(RoutePlan("KJFK", "KLAX"))
        print(briefing.summary.worst_severity)
    """

    def __init__(self, gateway: ProviderGateway, max_workers: int = DEFAULT_MAX_WORKERS,
                 enroute_points: int = DEFAULT_ENROUTE_POINTS):
        self.gateway = gateway
        self.max_workers = max_workers
        self.enroute_points = clamp_enroute_points(enroute_points)

    def build(self, plan: RoutePlan) -> Briefing:
        """
        Build a briefing.

        Raises:
            SynthesisError: INVALID_AIRPORT if any code is malformed or unknown
        """
        plan.validate()
        records = self.resolve_airports(plan)

        briefing = Briefing(route=plan)
        for icao, role in plan.airports():
            briefing.airports[icao] = AirportBriefing(icao=icao, role=role, airport=records.get(icao))

        samples = self._samples(records.get(plan.origin), records.get(plan.destination), self.enroute_points)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            report_futures: Dict[Tuple[str, ReportKind], Future] = {}
            notam_futures: Dict[str, Future] = {}
            for icao in briefing.airports:
                for kind in (ReportKind.METAR, ReportKind.TAF):
                    report_futures[(icao, kind)] = executor.submit(self.fetch_decoded, kind, icao)
                notam_futures[icao] = executor.submit(self.gateway.fetch_notams, icao)
            enroute_futures = [
                executor.submit(self.enroute_point, index, point)
                for index, point in enumerate(samples, start=1)
            ]

            for (icao, kind), future in report_futures.items():
                entry = briefing.airports[icao]
                try:
                    report, verdict = future.result()
                except (DataError, DecodeError) as e:
                    logger.warning(f"No {kind.value} for {icao}: {e}")
                    entry.errors[kind.value] = str(e)
                    continue
                if kind == ReportKind.METAR:
                    entry.metar, entry.metar_verdict = report, verdict
                else:
                    entry.taf, entry.taf_verdict = report, verdict

            for icao, future in notam_futures.items():
                try:
                    briefing.airports[icao].notams = future.result()
                except DataError as e:
                    logger.warning(f"No NOTAMs for {icao}: {e}")
                    briefing.airports[icao].errors['notams'] = str(e)

            briefing.enroute = [future.result() for future in enroute_futures]

        briefing.summary = self.summarize(briefing)
        logger.info(
            f"Briefing {plan.origin}-{plan.destination}: {briefing.summary.worst_severity.value}, "
            f"{len(briefing.summary.critical_alerts)} critical alerts"
        )
        return briefing

    def resolve_airports(self, plan: RoutePlan) -> Dict[str, AirportRecord]:
        """
        Resolve every airport of the plan concurrently.

        Raises:
            SynthesisError: INVALID_AIRPORT for the first airport, in route
                order, that no provider could resolve
        """
        codes = [icao for icao, _ in plan.airports()]
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(codes))) as executor:
            futures = {icao: executor.submit(self.gateway.fetch_airport, icao) for icao in codes}
            records = {}
            for icao, future in futures.items():
                try:
                    records[icao] = future.result()
                except DataError as e:
                    raise SynthesisError.invalid_airport(icao, f"Unknown airport {icao}: {e.message}") from e
        return records

    def fetch_decoded(self, kind: ReportKind, icao: str) -> Tuple[DecodedReport, SeverityVerdict]:
        """Fetch, decode and classify one report."""
        raw = self.gateway.fetch(kind, icao)
        report = ReportDecoder.decode(raw.raw_text, kind)
        return report, SeverityClassifier.assess(report)

    def enroute_point(self, index: int, point: NavPoint) -> EnroutePoint:
        """Nearest-station METAR for one sample point; failures stay on the point."""
        entry = EnroutePoint(index=index, point=point)
        try:
            nearest = self.gateway.fetch_nearest_report(ReportKind.METAR, point.latitude, point.longitude)
        except DataError as e:
            entry.error = str(e)
            return entry

        entry.station = nearest.station
        entry.distance_nm = nearest.distance_nm
        if entry.distance_nm is None and nearest.latitude is not None and nearest.longitude is not None:
            entry.distance_nm = point.distance_to(NavPoint(latitude=nearest.latitude, longitude=nearest.longitude))
        try:
            entry.report = ReportDecoder.decode(nearest.report.raw_text, ReportKind.METAR)
        except DecodeError as e:
            entry.error = str(e)
            return entry
        entry.verdict = SeverityClassifier.classify(entry.report)
        return entry

    def enroute_weather(self, origin: AirportRecord, destination: AirportRecord,
                        points: Optional[int] = None) -> List[EnroutePoint]:
        """
        Sampled great-circle points between two airports with nearest-station weather.

        Args:
            origin: Departure airport (needs coordinates)
            destination: Arrival airport (needs coordinates)
            points: Interior sample count, clamped to [2, 50]
        """
        samples = self._samples(origin, destination, clamp_enroute_points(points or self.enroute_points))
        if not samples:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(samples))) as executor:
            futures = [executor.submit(self.enroute_point, index, point)
                       for index, point in enumerate(samples, start=1)]
            return [future.result() for future in futures]

    def summarize(self, briefing: Briefing) -> BriefingSummary:
        """Worst severity, critical alerts and recommendations for a filled briefing."""
        worst = reduce(max_severity, (entry.severity for entry in briefing.airports.values()), Severity.NORMAL)
        worst = reduce(max_severity, (point.severity for point in briefing.enroute), worst)

        alerts = []
        for icao, entry in briefing.airports.items():
            if entry.metar_verdict is not None and entry.metar_verdict.level == Severity.CRITICAL:
                alerts.append(CriticalAlert(icao=icao, alert_type='weather',
                                            message=weather_alert_message(icao, entry.metar_verdict)))
            for notam in entry.notams:
                if notam.is_critical:
                    alerts.append(CriticalAlert(icao=icao, alert_type='notam', message=notam.message))

        return BriefingSummary(
            worst_severity=worst,
            critical_alerts=alerts,
            recommendations=recommendations(worst, alerts),
        )

    @staticmethod
    def _samples(origin: Optional[AirportRecord], destination: Optional[AirportRecord], n: int) -> List[NavPoint]:
        if origin is None or destination is None:
            return []
        start, end = origin.navpoint, destination.navpoint
        if start is None or end is None:
            return []
        try:
            return GeoSampler.sample(start, end, n)
        except ValueError as e:
            logger.warning(f"No enroute sampling between {origin.icao} and {destination.icao}: {e}")
            return []
