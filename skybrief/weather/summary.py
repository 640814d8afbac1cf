"""
Plain-language descriptions of decoded reports.

Each field contributes exactly one clause. The clause table below fixes the
order; a field that is absent renders its fallback clause instead of being
dropped, so summaries of different reports line up clause by clause.
"""

from fractions import Fraction
from typing import Optional, List, Dict, Callable, Tuple

from skybrief.weather.models import (
    DecodedReport,
    ReportKind,
    Wind,
    Visibility,
    CloudLayer,
    WeatherPhenomenon,
    ForecastPeriod,
)

INTENSITY_WORDS = {
    '-': 'light',
    '+': 'heavy',
}

DESCRIPTOR_WORDS = {
    'MI': 'shallow',
    'PR': 'partial',
    'BC': 'patches of',
    'DR': 'low drifting',
    'BL': 'blowing',
    'SH': 'showers of',
    'TS': 'thunderstorm',
    'FZ': 'freezing',
}

PHENOMENON_WORDS = {
    'DZ': 'drizzle',
    'RA': 'rain',
    'SN': 'snow',
    'SG': 'snow grains',
    'IC': 'ice crystals',
    'PL': 'ice pellets',
    'GR': 'hail',
    'GS': 'small hail',
    'UP': 'unknown precipitation',
    'BR': 'mist',
    'FG': 'fog',
    'FU': 'smoke',
    'VA': 'volcanic ash',
    'DU': 'widespread dust',
    'SA': 'sand',
    'HZ': 'haze',
    'PY': 'spray',
    'PO': 'dust whirls',
    'SQ': 'squalls',
    'FC': 'funnel cloud',
    'SS': 'sandstorm',
    'DS': 'duststorm',
}

COVERAGE_WORDS = {
    'FEW': 'few clouds',
    'SCT': 'scattered clouds',
    'BKN': 'broken clouds',
    'OVC': 'overcast',
    'VV': 'vertical visibility',
}

CLEAR_COVERAGES = {
    'SKC': 'Sky clear',
    'CLR': 'Sky clear',
    'NSC': 'No significant cloud',
    'NCD': 'No cloud detected',
}

CLOUD_TYPE_WORDS = {
    'CB': 'cumulonimbus',
    'TCU': 'towering cumulus',
}


# --- Field clauses (None means "not present") ---

def wind_clause(wind: Optional[Wind]) -> Optional[str]:
    """``Wind from 280° at 14 knots, gusting to 20 knots``."""
    if wind is None:
        return None
    if wind.is_calm:
        return "Calm wind"
    if wind.variable or wind.direction is None:
        text = f"Variable wind at {wind.speed} knots"
    else:
        text = f"Wind from {wind.direction:03d}° at {wind.speed} knots"
    if wind.gust:
        text += f", gusting to {wind.gust} knots"
    if wind.variable_from is not None and wind.variable_to is not None:
        text += f", varying between {wind.variable_from:03d}° and {wind.variable_to:03d}°"
    return text


def visibility_clause(visibility: Optional[Visibility], cavok: bool = False) -> Optional[str]:
    if cavok:
        return "Visibility 10 kilometers or more (CAVOK)"
    if visibility is None:
        return None

    if visibility.unit == Visibility.STATUTE_MILES:
        amount = format_miles(visibility.value)
        unit = "statute mile" if visibility.value == 1 else "statute miles"
    elif visibility.value >= 10000:
        amount, unit = "10", "kilometers"
        if visibility.qualifier is None:
            visibility = Visibility(visibility.value, visibility.unit, '>')
    else:
        amount, unit = str(int(visibility.value)), "meters"

    if visibility.qualifier == '>':
        return f"Visibility greater than {amount} {unit}"
    if visibility.qualifier == '<':
        return f"Visibility less than {amount} {unit}"
    return f"Visibility {amount} {unit}"


def weather_clause(phenomena: List[WeatherPhenomenon]) -> Optional[str]:
    if not phenomena:
        return None
    return "Weather: " + ", ".join(describe_phenomenon(p) for p in phenomena)


def clouds_clause(clouds: List[CloudLayer], cavok: bool = False) -> Optional[str]:
    if not clouds:
        return "No significant cloud" if cavok else None

    parts = []
    for layer in clouds:
        if layer.coverage in CLEAR_COVERAGES:
            return CLEAR_COVERAGES[layer.coverage]
        parts.append(describe_layer(layer))
    return "Clouds: " + ", ".join(parts)


def temperature_clause(report: DecodedReport) -> Optional[str]:
    if report.temperature is None:
        return None
    text = f"Temperature {report.temperature}°C"
    if report.dewpoint is not None:
        text += f", dew point {report.dewpoint}°C"
    return text


def pressure_clause(report: DecodedReport) -> Optional[str]:
    if report.altimeter_inhg is not None:
        text = f"Altimeter setting {report.altimeter_inhg:.2f} inHg"
        if report.altimeter_hpa is not None:
            text += f" ({int(round(report.altimeter_hpa))} hPa)"
        return text
    if report.altimeter_hpa is not None:
        return f"QNH {int(round(report.altimeter_hpa))} hPa"
    return None


# (details key, clause builder, fallback when the field is absent)
CLAUSES: List[Tuple[str, Callable[[DecodedReport], Optional[str]], str]] = [
    ('wind', lambda r: wind_clause(r.wind), "Wind information not available"),
    ('visibility', lambda r: visibility_clause(r.visibility, r.cavok), "Visibility not reported"),
    ('weather', lambda r: weather_clause(r.phenomena), "No significant weather"),
    ('clouds', lambda r: clouds_clause(r.clouds, r.cavok), "Cloud information not available"),
    ('temperature', temperature_clause, "Temperature not reported"),
    ('pressure', pressure_clause, "Pressure not reported"),
]

# TAF change groups carry no temperature or pressure
PERIOD_FIELDS = ('wind', 'visibility', 'weather', 'clouds')


def details(report: DecodedReport, fields: Optional[Tuple[str, ...]] = None) -> Dict[str, str]:
    """Per-field descriptions keyed by field name, in clause order."""
    result = {}
    for key, build, fallback in CLAUSES:
        if fields is not None and key not in fields:
            continue
        result[key] = build(report) or fallback
    return result


def describe_conditions(
    report: DecodedReport,
    fields: Optional[Tuple[str, ...]] = PERIOD_FIELDS,
    separator: str = "; ",
) -> str:
    """Join the field clauses of a set of conditions."""
    return separator.join(details(report, fields).values())


def station_clause(report: DecodedReport) -> str:
    if report.kind == ReportKind.TAF:
        text = f"Terminal Aerodrome Forecast for {report.icao}"
    else:
        text = f"{report.report_type} for {report.icao}"
    if report.issued:
        text += f" at {report.issued}" if report.kind == ReportKind.METAR else f" issued {report.issued}"
    return text


def period_label(period: ForecastPeriod) -> str:
    """``TEMPO 121800Z to 122200Z``, ``PROB30 TEMPO ...``, ``FM 121800Z``."""
    change = period.change_type
    if period.probability and change != "PROB":
        change = f"PROB{period.probability} {change}"
    elif period.probability:
        change = f"PROB{period.probability}"
    if period.validity is None:
        return change
    window = str(period.validity)
    if window.startswith("from "):
        window = window[5:]
    return f"{change} {window}"


def annotate(report: DecodedReport) -> DecodedReport:
    """Fill ``summary`` and ``details`` of a freshly decoded report."""
    report.details = details(report)
    report.summary = summarize(report)
    return report


def summarize(report: DecodedReport) -> str:
    """
    Build the plain-language summary.

    METAR: station/time, wind, visibility, weather, clouds, temperature, pressure.
    TAF: station/issue time, validity, initial conditions, then each change period.
    """
    if report.kind != ReportKind.TAF:
        clauses = [station_clause(report)] + list(details(report).values())
        return ". ".join(clauses) + "."

    parts = [station_clause(report)]
    if report.validity is not None:
        parts.append(f"Valid {report.validity}")
    parts.append(f"Initial conditions: {describe_conditions(report)}")
    for period in report.periods:
        parts.append(f"{period_label(period)}: {describe_conditions(period.conditions)}")
    return ". ".join(parts) + "."


# --- Word helpers ---

def describe_phenomenon(phenomenon: WeatherPhenomenon) -> str:
    """``+TSRA`` -> ``heavy thunderstorm with rain``; ``-SHRA`` -> ``light showers of rain``."""
    words = []
    vicinity = phenomenon.intensity == 'VC'
    if phenomenon.intensity in INTENSITY_WORDS:
        words.append(INTENSITY_WORDS[phenomenon.intensity])

    codes = " and ".join(PHENOMENON_WORDS.get(code, code) for code in phenomenon.codes)
    if phenomenon.descriptor == 'TS':
        words.append("thunderstorm")
        if codes:
            words.append(f"with {codes}")
    elif phenomenon.descriptor:
        words.append(DESCRIPTOR_WORDS.get(phenomenon.descriptor, phenomenon.descriptor))
        if codes:
            words.append(codes)
    elif codes:
        words.append(codes)

    text = " ".join(words)
    if vicinity:
        text += " in the vicinity"
    return text


def describe_layer(layer: CloudLayer) -> str:
    text = COVERAGE_WORDS.get(layer.coverage, layer.coverage.lower())
    if layer.base_ft is not None:
        text += f" at {layer.base_ft:,} feet"
    if layer.cloud_type in CLOUD_TYPE_WORDS:
        text += f" ({CLOUD_TYPE_WORDS[layer.cloud_type]})"
    return text


def format_miles(value: float) -> str:
    """Render statute miles as whole numbers or fractions: 10, 1/2, 1 1/2."""
    fraction = Fraction(value).limit_denominator(16)
    whole = fraction.numerator // fraction.denominator
    remainder = fraction - whole
    if remainder == 0:
        return str(whole)
    if whole == 0:
        return str(remainder)
    return f"{whole} {remainder}"
