"""
Weather module for decoding and classifying METAR/TAF reports.

Provides:
- DecodedReport: Structured METAR or TAF data with a plain-language summary
- RawReport: Raw report text as obtained from a provider
- ReportKind: METAR/TAF enum
- ReportDecoder: Decode raw METAR/TAF text
- Severity: normal/caution/critical enum with ordering
- SeverityVerdict: Severity plus triggering reasons
- SeverityClassifier: Threshold rules, TAF worst-case reduction

Example:
    from skybrief.weather import ReportDecoder, SeverityClassifier

    report = ReportDecoder.decode(
        "METAR KJFK 121251Z 28014G20KT 10SM FEW250 24/18 A3000", "metar"
    )
    print(report.summary)
    print(SeverityClassifier.classify(report).level)  # Severity.NORMAL
"""

from skybrief.weather.models import (
    DecodedReport,
    RawReport,
    NearestReport,
    ReportKind,
    Wind,
    Visibility,
    CloudLayer,
    WeatherPhenomenon,
    ValidityWindow,
    ForecastPeriod,
)
from skybrief.weather.parser import ReportDecoder
from skybrief.weather.severity import (
    Severity,
    SeverityVerdict,
    SeverityClassifier,
    max_severity,
    worst_severity,
)

__all__ = [
    'DecodedReport',
    'RawReport',
    'NearestReport',
    'ReportKind',
    'Wind',
    'Visibility',
    'CloudLayer',
    'WeatherPhenomenon',
    'ValidityWindow',
    'ForecastPeriod',
    'ReportDecoder',
    'Severity',
    'SeverityVerdict',
    'SeverityClassifier',
    'max_severity',
    'worst_severity',
]
