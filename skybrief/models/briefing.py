"""Briefing result models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from skybrief.models.airport import AirportRecord
from skybrief.models.navpoint import NavPoint
from skybrief.models.notam import Notam
from skybrief.models.route import RoutePlan, AirportRole
from skybrief.weather.models import DecodedReport
from skybrief.weather.severity import Severity, SeverityVerdict


def _report_dict(report: Optional[DecodedReport], verdict: Optional[SeverityVerdict]) -> Optional[Dict[str, Any]]:
    if report is None:
        return None
    data = report.to_dict()
    data['severity'] = verdict.to_dict() if verdict else None
    return data


@dataclass
class AirportBriefing:
    """
    Everything known about one airport of the route.

    A failed fetch leaves the field empty and records a message under
    ``errors`` keyed by data kind ('metar', 'taf', 'notams').
    """

    icao: str
    role: AirportRole
    airport: Optional[AirportRecord] = None
    metar: Optional[DecodedReport] = None
    metar_verdict: Optional[SeverityVerdict] = None
    taf: Optional[DecodedReport] = None
    taf_verdict: Optional[SeverityVerdict] = None
    notams: List[Notam] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def severity(self) -> Severity:
        """Severity of the current conditions (METAR), normal when unknown."""
        return self.metar_verdict.level if self.metar_verdict else Severity.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            'icao': self.icao,
            'role': self.role.value,
            'airport': self.airport.to_dict() if self.airport else None,
            'metar': _report_dict(self.metar, self.metar_verdict),
            'taf': _report_dict(self.taf, self.taf_verdict),
            'notams': [notam.to_dict() for notam in self.notams],
            'errors': dict(self.errors),
        }


@dataclass
class EnroutePoint:
    """
    One great-circle sample between origin and destination.

    Attributes:
        index: 1-based position along the route
        point: Sampled coordinate
        station: Nearest reporting station, if one was found
        distance_nm: Distance from the sample to the station
        report: Decoded METAR of the station, or None
        verdict: Severity of ``report``
        error: Why no report is available
    """

    index: int
    point: NavPoint
    station: Optional[str] = None
    distance_nm: Optional[float] = None
    report: Optional[DecodedReport] = None
    verdict: Optional[SeverityVerdict] = None
    error: Optional[str] = None

    @property
    def severity(self) -> Severity:
        return self.verdict.level if self.verdict else Severity.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            'index': self.index,
            'latitude': round(self.point.latitude, 4),
            'longitude': round(self.point.longitude, 4),
            'station': self.station,
            'distance_nm': round(self.distance_nm, 1) if self.distance_nm is not None else None,
            'metar': _report_dict(self.report, self.verdict),
            'error': self.error,
        }


@dataclass(frozen=True)
class CriticalAlert:
    """A critical METAR or NOTAM at one airport."""

    icao: str
    alert_type: str  # 'weather' or 'notam'
    message: str
    severity: Severity = Severity.CRITICAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            'icao': self.icao,
            'type': self.alert_type,
            'severity': self.severity.value,
            'message': self.message,
        }


@dataclass
class BriefingSummary:
    """Aggregate over all airports and enroute points."""

    worst_severity: Severity = Severity.NORMAL
    critical_alerts: List[CriticalAlert] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'worst_severity': self.worst_severity.value,
            'emoji': self.worst_severity.emoji,
            'description': self.worst_severity.description,
            'critical_alerts': [alert.to_dict() for alert in self.critical_alerts],
            'recommendations': list(self.recommendations),
        }


@dataclass
class Briefing:
    """
    Route briefing built fresh for each request.

    ``airports`` preserves route order: origin, destination, then alternates.
    """

    route: RoutePlan
    airports: Dict[str, AirportBriefing] = field(default_factory=dict)
    enroute: List[EnroutePoint] = field(default_factory=list)
    summary: BriefingSummary = field(default_factory=BriefingSummary)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def worst_severity(self) -> Severity:
        return self.summary.worst_severity

    def airports_with_role(self, role: AirportRole) -> List[AirportBriefing]:
        return [entry for entry in self.airports.values() if entry.role == role]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON export."""
        return {
            'route': self.route.to_dict(),
            'airports': {icao: entry.to_dict() for icao, entry in self.airports.items()},
            'enroute': [point.to_dict() for point in self.enroute],
            'summary': self.summary.to_dict(),
            'generated_at': self.generated_at.isoformat(),
        }
