"""Flight-safety severity classification of decoded weather."""

from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Optional, List, Iterable, Tuple, Union

from skybrief.weather.models import DecodedReport, ReportKind, ForecastPeriod


class Severity(Enum):
    """
    Three-level flight-safety severity.

    Totally ordered: NORMAL < CAUTION < CRITICAL.
    """

    NORMAL = "normal"
    CAUTION = "caution"
    CRITICAL = "critical"

    @property
    def order(self) -> int:
        """Numeric ordering from best (0) to worst (2)."""
        return _SEVERITY_ORDER[self]

    @property
    def emoji(self) -> str:
        return _SEVERITY_EMOJI[self]

    @property
    def description(self) -> str:
        return _SEVERITY_DESCRIPTION[self]

    def __lt__(self, other: 'Severity') -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.order < other.order

    def __le__(self, other: 'Severity') -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.order <= other.order

    def __gt__(self, other: 'Severity') -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.order > other.order

    def __ge__(self, other: 'Severity') -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.order >= other.order


_SEVERITY_ORDER = {
    Severity.NORMAL: 0,
    Severity.CAUTION: 1,
    Severity.CRITICAL: 2,
}

_SEVERITY_EMOJI = {
    Severity.NORMAL: "🟢",
    Severity.CAUTION: "🟡",
    Severity.CRITICAL: "🔴",
}

_SEVERITY_DESCRIPTION = {
    Severity.NORMAL: "Good flying conditions",
    Severity.CAUTION: "Use caution - monitor conditions",
    Severity.CRITICAL: "Poor conditions - consider alternatives",
}


@dataclass(frozen=True)
class SeverityVerdict:
    """
    Severity level plus the ordered reasons that triggered it.

    Verdicts order by level only, so ``max`` and ``sorted`` work across any
    collection of verdicts.
    """

    level: Severity = Severity.NORMAL
    reasons: Tuple[str, ...] = ()

    @property
    def emoji(self) -> str:
        return self.level.emoji

    @property
    def description(self) -> str:
        return self.level.description

    def __lt__(self, other: 'SeverityVerdict') -> bool:
        if not isinstance(other, SeverityVerdict):
            return NotImplemented
        return self.level < other.level

    def __le__(self, other: 'SeverityVerdict') -> bool:
        if not isinstance(other, SeverityVerdict):
            return NotImplemented
        return self.level <= other.level

    def __gt__(self, other: 'SeverityVerdict') -> bool:
        if not isinstance(other, SeverityVerdict):
            return NotImplemented
        return self.level > other.level

    def __ge__(self, other: 'SeverityVerdict') -> bool:
        if not isinstance(other, SeverityVerdict):
            return NotImplemented
        return self.level >= other.level

    def to_dict(self) -> dict:
        return {
            'level': self.level.value,
            'emoji': self.emoji,
            'description': self.description,
            'reasons': list(self.reasons),
        }


NORMAL_VERDICT = SeverityVerdict(Severity.NORMAL, ())

Ranked = Union[Severity, SeverityVerdict]


def max_severity(a: Ranked, b: Ranked) -> Ranked:
    """Worst of two severities (or verdicts); ``b`` replaces ``a`` only if strictly worse."""
    return b if b > a else a


def worst_severity(items: Iterable[Severity], initial: Severity = Severity.NORMAL) -> Severity:
    """Fold ``max_severity`` over a collection of severities."""
    return reduce(max_severity, items, initial)


@dataclass(frozen=True)
class Thresholds:
    """Limits for one severity tier (inclusive)."""

    visibility_m: float
    ceiling_ft: int
    gust_kt: int
    wind_kt: int


CRITICAL_THRESHOLDS = Thresholds(visibility_m=3000, ceiling_ft=200, gust_kt=35, wind_kt=25)
CAUTION_THRESHOLDS = Thresholds(visibility_m=5000, ceiling_ft=1000, gust_kt=25, wind_kt=20)

PRECIPITATION_CODES = frozenset(['DZ', 'RA', 'SN', 'SG', 'IC', 'PL', 'GR', 'GS', 'UP'])


class SeverityClassifier:
    """
    Threshold rules turning decoded weather into a SeverityVerdict.

    Tiers are evaluated worst first. The first tier with any triggered rule
    wins, and every rule triggered within that tier contributes its reason:

        critical: visibility <= 3000 m, ceiling <= 200 ft, gust >= 35 kt,
                  wind >= 25 kt, thunderstorm, freezing phenomena or
                  temperature <= 0°C, heavy precipitation
        caution:  visibility <= 5000 m, ceiling <= 1000 ft, gust >= 25 kt,
                  wind >= 20 kt, light or moderate precipitation

    Statute-mile visibilities are converted to meters before comparison.
    A missing ceiling (no BKN/OVC layer) is unlimited and never triggers.
    Missing or empty input yields a normal verdict with no reasons.
    """

    @classmethod
    def classify(cls, report: Optional[DecodedReport]) -> SeverityVerdict:
        """
        Classify one set of conditions (a METAR or one TAF block).

        Args:
            report: Decoded conditions; None is treated as normal

        Returns:
            SeverityVerdict
        """
        if report is None:
            return NORMAL_VERDICT

        reasons = cls._critical_reasons(report)
        if reasons:
            return SeverityVerdict(Severity.CRITICAL, tuple(reasons))

        reasons = cls._caution_reasons(report)
        if reasons:
            return SeverityVerdict(Severity.CAUTION, tuple(reasons))

        return NORMAL_VERDICT

    @classmethod
    def classify_reduced(cls, reports: Iterable[Optional[DecodedReport]]) -> SeverityVerdict:
        """
        Classify several condition blocks and keep the worst verdict.

        Reasons are the deduplicated union of every reason raised at the
        maximum tier, in first-seen order.
        """
        verdicts = [cls.classify(report) for report in reports]
        if not verdicts:
            return NORMAL_VERDICT

        worst = reduce(max_severity, verdicts, NORMAL_VERDICT)
        reasons: List[str] = []
        for verdict in verdicts:
            if verdict.level != worst.level:
                continue
            for reason in verdict.reasons:
                if reason not in reasons:
                    reasons.append(reason)
        return SeverityVerdict(worst.level, tuple(reasons))

    @classmethod
    def assess(cls, report: Optional[DecodedReport]) -> SeverityVerdict:
        """Verdict for any decoded report: TAFs reduce over all their blocks."""
        if report is None:
            return NORMAL_VERDICT
        if report.kind == ReportKind.TAF:
            return cls.classify_reduced(report.condition_blocks())
        return cls.classify(report)

    @classmethod
    def period_verdicts(cls, report: DecodedReport) -> List[Tuple[ForecastPeriod, SeverityVerdict]]:
        """Each TAF block with its own verdict, initial conditions first."""
        return [(period, cls.classify(period.conditions)) for period in report.forecast_periods()]

    # --- Tier rules ---

    @classmethod
    def _limit_reasons(cls, report: DecodedReport, limits: Thresholds, labels: Tuple[str, str, str, str]) -> List[str]:
        reasons = []
        visibility_m = report.visibility_meters
        if visibility_m is not None and visibility_m <= limits.visibility_m:
            reasons.append(labels[0])

        ceiling = report.ceiling_ft
        if ceiling is not None and ceiling <= limits.ceiling_ft:
            reasons.append(labels[1])

        wind = report.wind
        if wind is not None:
            if wind.gust is not None and wind.gust >= limits.gust_kt:
                reasons.append(labels[2])
            if wind.speed >= limits.wind_kt:
                reasons.append(labels[3])
        return reasons

    @classmethod
    def _critical_reasons(cls, report: DecodedReport) -> List[str]:
        reasons = cls._limit_reasons(
            report,
            CRITICAL_THRESHOLDS,
            ("Very low visibility", "Very low ceiling", "Severe wind gusts", "Strong sustained winds"),
        )
        phenomena = report.phenomena or []

        if any(p.descriptor == 'TS' or 'TS' in p.codes for p in phenomena):
            reasons.append("Thunderstorms")

        freezing = any(p.descriptor == 'FZ' for p in phenomena)
        if freezing or (report.temperature is not None and report.temperature <= 0):
            reasons.append("Icing conditions")

        if any(p.intensity == '+' and PRECIPITATION_CODES.intersection(p.codes) for p in phenomena):
            reasons.append("Heavy precipitation")
        return reasons

    @classmethod
    def _caution_reasons(cls, report: DecodedReport) -> List[str]:
        reasons = cls._limit_reasons(
            report,
            CAUTION_THRESHOLDS,
            ("Reduced visibility", "Low ceiling", "Gusty winds", "Strong winds"),
        )
        if any(p.intensity in (None, '-') and PRECIPITATION_CODES.intersection(p.codes)
               for p in report.phenomena or []):
            reasons.append("Precipitation")
        return reasons
