"""Weather report data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any

# Statute mile to meters conversion used for all visibility thresholds
SM_TO_METERS = 1609.34

# Ceiling-forming cloud coverages
CEILING_COVERAGES = ('BKN', 'OVC')


class ReportKind(Enum):
    """Kind of coded weather report."""

    METAR = "metar"
    TAF = "taf"

    @classmethod
    def parse(cls, value: Any) -> 'ReportKind':
        """
        Coerce a string (case-insensitive) or ReportKind into a ReportKind.

        Raises:
            ValueError: If the value is not a known report kind
        """
        if isinstance(value, ReportKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Report kind must be 'metar' or 'taf', got {value!r}")


@dataclass(frozen=True)
class RawReport:
    """
    Raw coded report as obtained from a provider.

    Immutable once fetched; this is the unit stored in the cache.
    """

    icao: str
    kind: ReportKind
    raw_text: str
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source: str = ""

    def to_dict(self) -> dict:
        return {
            'icao': self.icao,
            'kind': self.kind.value,
            'raw_text': self.raw_text,
            'fetched_at': self.fetched_at.isoformat(),
            'source': self.source,
        }


@dataclass(frozen=True)
class NearestReport:
    """
    Report from the station closest to a coordinate.

    Attributes:
        report: Raw report of the nearest reporting station
        latitude: Station latitude, if the provider knows it
        longitude: Station longitude, if the provider knows it
        distance_nm: Distance from the requested coordinate to the station
    """

    report: RawReport
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_nm: Optional[float] = None

    @property
    def station(self) -> str:
        return self.report.icao


@dataclass
class Wind:
    """
    Surface wind, always in knots.

    ``direction`` is None when the wind is variable (VRB).
    """

    speed: int
    direction: Optional[int] = None
    gust: Optional[int] = None
    variable: bool = False
    variable_from: Optional[int] = None
    variable_to: Optional[int] = None

    @property
    def is_calm(self) -> bool:
        return self.speed == 0 and not self.gust

    def to_dict(self) -> dict:
        return {
            'direction': 'variable' if self.variable else self.direction,
            'speed': self.speed,
            'gust': self.gust,
            'variable_from': self.variable_from,
            'variable_to': self.variable_to,
        }


@dataclass
class Visibility:
    """
    Prevailing visibility as reported.

    Attributes:
        value: Numeric visibility in ``unit``
        unit: "m" (meters) or "SM" (statute miles)
        qualifier: ">" for "more than" (P6SM, 9999, CAVOK), "<" for "less than" (M1/4SM)
    """

    METERS = "m"
    STATUTE_MILES = "SM"

    value: float
    unit: str = METERS
    qualifier: Optional[str] = None

    @property
    def meters(self) -> float:
        """Visibility normalized to meters."""
        if self.unit == self.STATUTE_MILES:
            return self.value * SM_TO_METERS
        return float(self.value)

    @property
    def statute_miles(self) -> float:
        if self.unit == self.STATUTE_MILES:
            return float(self.value)
        return self.value / SM_TO_METERS

    def to_dict(self) -> dict:
        return {
            'value': self.value,
            'unit': self.unit,
            'qualifier': self.qualifier,
            'meters': round(self.meters, 1),
        }


@dataclass
class CloudLayer:
    """A single cloud layer: coverage (FEW/SCT/BKN/OVC...), base in feet, optional type (CB/TCU)."""

    coverage: str
    base_ft: Optional[int] = None
    cloud_type: Optional[str] = None

    @property
    def forms_ceiling(self) -> bool:
        return self.coverage in CEILING_COVERAGES and self.base_ft is not None

    def to_dict(self) -> dict:
        return {
            'coverage': self.coverage,
            'base_ft': self.base_ft,
            'type': self.cloud_type,
        }


@dataclass
class WeatherPhenomenon:
    """
    A present-weather group such as ``+TSRA`` or ``BR``.

    Attributes:
        intensity: "-", "+", "VC" or None (moderate)
        descriptor: Descriptor code (TS, SH, FZ, ...) or None
        codes: Precipitation/obscuration codes (RA, SN, FG, ...)
    """

    intensity: Optional[str] = None
    descriptor: Optional[str] = None
    codes: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return f"{self.intensity or ''}{self.descriptor or ''}{''.join(self.codes)}"

    def to_dict(self) -> dict:
        return {
            'intensity': self.intensity,
            'descriptor': self.descriptor,
            'codes': list(self.codes),
        }


@dataclass
class ValidityWindow:
    """TAF validity window in day/hour form (end is None for FM groups)."""

    start_day: int
    start_hour: int
    start_minute: int = 0
    end_day: Optional[int] = None
    end_hour: Optional[int] = None

    def __str__(self) -> str:
        start = f"{self.start_day:02d}{self.start_hour:02d}{self.start_minute:02d}Z"
        if self.end_day is None or self.end_hour is None:
            return f"from {start}"
        return f"{start} to {self.end_day:02d}{self.end_hour:02d}00Z"

    def to_dict(self) -> dict:
        return {
            'start_day': self.start_day,
            'start_hour': self.start_hour,
            'start_minute': self.start_minute,
            'end_day': self.end_day,
            'end_hour': self.end_hour,
        }


@dataclass
class ForecastPeriod:
    """
    One block of a TAF: the initial conditions or a change group.

    Attributes:
        change_type: "INITIAL", "FM", "BECMG", "TEMPO", "PROB" or "INTER"
        conditions: Conditions decoded with the same field model as a METAR
        validity: Validity window of the block
        probability: PROB30/PROB40 percentage
    """

    change_type: str
    conditions: 'DecodedReport'
    validity: Optional[ValidityWindow] = None
    probability: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'change_type': self.change_type,
            'validity': self.validity.to_dict() if self.validity else None,
            'probability': self.probability,
            'conditions': self.conditions.to_dict(),
        }


@dataclass
class DecodedReport:
    """
    Structured METAR or TAF.

    For TAFs, the top-level fields hold the initial conditions and
    ``periods`` holds the change groups, each with nested conditions.

    Attributes:
        icao: Station identifier
        kind: METAR or TAF
        report_type: "METAR", "SPECI" or "TAF"
        raw_text: Original report text
        day, hour, minute: Observation (METAR) or issuance (TAF) time
        wind: Surface wind in knots
        visibility: Prevailing visibility
        cavok: Ceiling And Visibility OK
        clouds: Cloud layers, lowest first as reported
        phenomena: Present weather groups in report order
        temperature: Temperature in Celsius
        dewpoint: Dew point in Celsius
        altimeter_hpa: QNH in hectopascals
        altimeter_inhg: Altimeter setting in inches of mercury when reported as Axxxx
        validity: TAF validity window
        periods: TAF change periods
        summary: Plain-language summary
        details: Per-field plain-language descriptions
    """

    icao: str = ""
    kind: ReportKind = ReportKind.METAR
    report_type: str = "METAR"
    raw_text: str = ""

    day: Optional[int] = None
    hour: Optional[int] = None
    minute: Optional[int] = None

    wind: Optional[Wind] = None
    visibility: Optional[Visibility] = None
    cavok: bool = False
    clouds: List[CloudLayer] = field(default_factory=list)
    phenomena: List[WeatherPhenomenon] = field(default_factory=list)

    temperature: Optional[int] = None
    dewpoint: Optional[int] = None
    altimeter_hpa: Optional[float] = None
    altimeter_inhg: Optional[float] = None

    validity: Optional[ValidityWindow] = None
    periods: List[ForecastPeriod] = field(default_factory=list)

    summary: str = ""
    details: Dict[str, str] = field(default_factory=dict)

    @property
    def ceiling_ft(self) -> Optional[int]:
        """Lowest broken/overcast layer base in feet; None means unlimited."""
        bases = [layer.base_ft for layer in self.clouds if layer.forms_ceiling]
        return min(bases) if bases else None

    @property
    def visibility_meters(self) -> Optional[float]:
        if self.visibility is not None:
            return self.visibility.meters
        if self.cavok:
            return 10000.0
        return None

    @property
    def issued(self) -> Optional[str]:
        """Observation/issuance time group, e.g. ``121251Z``."""
        if self.day is None or self.hour is None:
            return None
        return f"{self.day:02d}{self.hour:02d}{(self.minute or 0):02d}Z"

    def forecast_periods(self) -> List[ForecastPeriod]:
        """Initial conditions followed by every change period (TAF only)."""
        if self.kind != ReportKind.TAF:
            return []
        initial = ForecastPeriod(change_type="INITIAL", conditions=self, validity=self.validity)
        return [initial] + list(self.periods)

    def condition_blocks(self) -> List['DecodedReport']:
        """Every set of conditions carried by the report, for worst-case classification."""
        return [self] + [period.conditions for period in self.periods]

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        ceiling = self.ceiling_ft
        return {
            'icao': self.icao,
            'kind': self.kind.value,
            'report_type': self.report_type,
            'raw_text': self.raw_text,
            'issued': self.issued,
            'wind': self.wind.to_dict() if self.wind else None,
            'visibility': self.visibility.to_dict() if self.visibility else None,
            'cavok': self.cavok,
            'ceiling_ft': ceiling if ceiling is not None else 'unlimited',
            'clouds': [layer.to_dict() for layer in self.clouds],
            'phenomena': [p.to_dict() for p in self.phenomena],
            'temperature': self.temperature,
            'dewpoint': self.dewpoint,
            'altimeter_hpa': self.altimeter_hpa,
            'altimeter_inhg': self.altimeter_inhg,
            'validity': self.validity.to_dict() if self.validity else None,
            'periods': [p.to_dict() for p in self.periods],
            'summary': self.summary,
            'details': dict(self.details),
        }

    def __repr__(self) -> str:
        return f"DecodedReport({self.report_type} {self.icao} {self.issued or ''})"
