"""Report decoder wrapping the metar_taf_parser library."""

import re
import logging
from fractions import Fraction
from typing import Optional, List, Tuple, Any

from metar_taf_parser.parser.parser import MetarParser, TAFParser

from skybrief.errors import DecodeError
from skybrief.weather.models import (
    DecodedReport,
    ReportKind,
    Wind,
    Visibility,
    CloudLayer,
    WeatherPhenomenon,
    ValidityWindow,
    ForecastPeriod,
)
from skybrief.weather import summary

logger = logging.getLogger(__name__)

_STATION_RE = re.compile(r'^[A-Z0-9]{4}$')
_TIME_RE = re.compile(r'^\d{6}Z$')
_VALIDITY_RE = re.compile(r'^\d{4}/\d{4}$')
_SM_VISIBILITY_RE = re.compile(r'^([PM])?(\d+|\d/\d)SM$')
_INHG_RE = re.compile(r'^A(\d{4})$')

# Conversion factors to knots
_WIND_TO_KNOTS = {
    'KT': 1.0,
    'MPS': 1.94384,
    'KM/H': 0.539957,
    'KMH': 0.539957,
}


class ReportDecoder:
    """
    Decode METAR and TAF text into DecodedReport objects.

    The metar_taf_parser library does the tokenizing; this class checks the
    mandatory groups, maps the library objects onto our own dataclasses and
    attaches the plain-language summary. Decoding is side-effect free: the
    same text always yields an equal DecodedReport.

    Example:
        report = ReportDecoder.decode(
            "METAR KJFK 121251Z 28014G20KT 10SM FEW250 24/18 A3000", "metar"
        )
        print(report.summary)
    """

    @classmethod
    def decode(cls, raw_text: str, kind: Any) -> DecodedReport:
        """
        Decode report text of the given kind.

        Args:
            raw_text: Raw METAR or TAF text
            kind: "metar", "taf" or a ReportKind

        Returns:
            DecodedReport

        Raises:
            DecodeError: If the text does not match the grammar for ``kind``
            ValueError: If ``kind`` is unknown
        """
        report_kind = ReportKind.parse(kind)
        if raw_text is None or not str(raw_text).strip():
            raise DecodeError(raw_text or "", "Empty report text")
        if report_kind == ReportKind.TAF:
            return cls.decode_taf(raw_text)
        return cls.decode_metar(raw_text)

    @classmethod
    def decode_auto(cls, raw_text: str) -> DecodedReport:
        """Decode as TAF when the text starts with ``TAF``, otherwise as METAR."""
        text = (raw_text or "").strip().upper()
        if text.startswith("TAF"):
            return cls.decode(raw_text, ReportKind.TAF)
        return cls.decode(raw_text, ReportKind.METAR)

    @classmethod
    def decode_metar(cls, raw_text: str) -> DecodedReport:
        """
        Decode a METAR (or SPECI).

        Raises:
            DecodeError: On NIL reports, a missing station identifier, a
                malformed observation time or a library parse failure
        """
        text = _normalize(raw_text)
        if not text:
            raise DecodeError(raw_text or "", "Empty report text")

        report_type = "METAR"
        clean = text
        if clean.startswith("SPECI"):
            report_type = "SPECI"
            clean = clean[5:].strip()
        elif clean.startswith("METAR"):
            clean = clean[5:].strip()

        if clean.startswith("COR "):
            clean = clean[3:].strip()

        tokens = clean.split()
        if not tokens or not _STATION_RE.match(tokens[0]):
            raise DecodeError(raw_text, "Missing or malformed station identifier")
        if len(tokens) < 2 or not _TIME_RE.match(tokens[1]):
            raise DecodeError(raw_text, "Missing or malformed observation time group")
        if "NIL" in tokens:
            raise DecodeError(raw_text, "NIL report")

        try:
            parsed = MetarParser().parse(clean)
        except Exception as e:
            logger.debug("Failed to parse METAR: %s - %s", raw_text[:80], e)
            raise DecodeError(raw_text, f"Unparseable METAR ({e})") from e

        body = _body_tokens(tokens[2:])
        day, hour, minute = _extract_time(parsed)

        report = DecodedReport(
            icao=tokens[0],
            kind=ReportKind.METAR,
            report_type=report_type,
            raw_text=raw_text.strip(),
            day=day,
            hour=hour,
            minute=minute,
            wind=cls._extract_wind(parsed),
            visibility=cls._extract_visibility(parsed, body),
            cavok=bool(getattr(parsed, 'cavok', False)),
            clouds=cls._extract_clouds(parsed),
            phenomena=cls._extract_phenomena(parsed),
            temperature=getattr(parsed, 'temperature', None),
            dewpoint=getattr(parsed, 'dew_point', None),
            altimeter_hpa=getattr(parsed, 'altimeter', None),
            altimeter_inhg=_extract_inhg(body),
        )
        summary.annotate(report)
        return report

    @classmethod
    def decode_taf(cls, raw_text: str) -> DecodedReport:
        """
        Decode a TAF into initial conditions plus change periods.

        Raises:
            DecodeError: On NIL/cancelled TAFs, a missing station identifier,
                a missing validity period or a library parse failure
        """
        text = _normalize(raw_text)
        if not text:
            raise DecodeError(raw_text or "", "Empty report text")

        # The library expects the TAF prefix
        if not text.startswith("TAF"):
            text = "TAF " + text

        tokens = text.split()
        index = 1
        while index < len(tokens) and tokens[index] in ("AMD", "COR"):
            index += 1
        if index >= len(tokens) or not _STATION_RE.match(tokens[index]):
            raise DecodeError(raw_text, "Missing or malformed station identifier")
        if "NIL" in tokens or "CNL" in tokens:
            raise DecodeError(raw_text, "NIL or cancelled TAF")
        header = tokens[index + 1:index + 3]
        if not any(_VALIDITY_RE.match(token) for token in header):
            raise DecodeError(raw_text, "Missing or malformed validity period")

        try:
            parsed = TAFParser().parse(text)
        except Exception as e:
            logger.debug("Failed to parse TAF: %s - %s", raw_text[:80], e)
            raise DecodeError(raw_text, f"Unparseable TAF ({e})") from e

        validity = cls._extract_validity(getattr(parsed, 'validity', None))
        if validity is None:
            raise DecodeError(raw_text, "Missing or malformed validity period")

        station = tokens[index]
        initial_tokens = _initial_tokens(tokens[index + 1:])
        day, hour, minute = _extract_time(parsed)

        report = DecodedReport(
            icao=station,
            kind=ReportKind.TAF,
            report_type="TAF",
            raw_text=raw_text.strip(),
            day=day,
            hour=hour,
            minute=minute,
            wind=cls._extract_wind(parsed),
            visibility=cls._extract_visibility(parsed, initial_tokens),
            cavok=bool(getattr(parsed, 'cavok', False)),
            clouds=cls._extract_clouds(parsed),
            phenomena=cls._extract_phenomena(parsed),
            validity=validity,
            periods=cls._build_periods(parsed, station),
        )
        summary.annotate(report)
        return report

    # --- Internal builders ---

    @classmethod
    def _build_periods(cls, parsed_taf, station: str) -> List[ForecastPeriod]:
        """Convert TAF change groups into ForecastPeriods with nested conditions."""
        periods = []
        for trend in getattr(parsed_taf, 'trends', None) or []:
            change_type = "CHANGE"
            trend_type = getattr(trend, 'type', None)
            if trend_type is not None:
                change_type = getattr(trend_type, 'name', str(trend_type))

            conditions = DecodedReport(
                icao=station,
                kind=ReportKind.TAF,
                report_type="TAF",
                wind=cls._extract_wind(trend),
                visibility=cls._extract_visibility(trend, []),
                cavok=bool(getattr(trend, 'cavok', False)),
                clouds=cls._extract_clouds(trend),
                phenomena=cls._extract_phenomena(trend),
            )
            conditions.summary = summary.describe_conditions(conditions)
            conditions.details = summary.details(conditions, summary.PERIOD_FIELDS)

            periods.append(ForecastPeriod(
                change_type=change_type,
                conditions=conditions,
                validity=cls._extract_validity(getattr(trend, 'validity', None)),
                probability=getattr(trend, 'probability', None),
            ))
        return periods

    # --- Field extraction helpers ---

    @classmethod
    def _extract_wind(cls, parsed) -> Optional[Wind]:
        wind = getattr(parsed, 'wind', None)
        if not wind:
            return None
        speed = getattr(wind, 'speed', None)
        if speed is None:
            return None

        unit = (getattr(wind, 'unit', None) or 'KT').upper()
        factor = _WIND_TO_KNOTS.get(unit, 1.0)
        degrees = getattr(wind, 'degrees', None)
        variable = getattr(wind, 'direction', None) == 'VRB' or (degrees is None and speed > 0)
        gust = getattr(wind, 'gust', None)

        return Wind(
            speed=int(round(speed * factor)),
            direction=None if variable else degrees,
            gust=int(round(gust * factor)) if gust else None,
            variable=variable,
            variable_from=getattr(wind, 'min_variation', None),
            variable_to=getattr(wind, 'max_variation', None),
        )

    @classmethod
    def _extract_visibility(cls, parsed, tokens: List[str]) -> Optional[Visibility]:
        """
        Extract prevailing visibility keeping the reported unit.

        Falls back to scanning the raw groups for statute-mile values
        (P6SM, M1/4SM) the library does not always pick up.
        """
        if getattr(parsed, 'cavok', False):
            return Visibility(10000, Visibility.METERS, '>')

        vis = getattr(parsed, 'visibility', None)
        distance = getattr(vis, 'distance', None) if vis else None
        if distance is not None:
            # Newer library releases report the unit separately ('10' + SM)
            if _unit_name(getattr(vis, 'unit', None)) == 'SM':
                visibility = _visibility_from_statute_miles(str(distance))
            else:
                visibility = _visibility_from_distance(str(distance))
            if visibility is not None:
                return visibility

        for index, token in enumerate(tokens):
            match = _SM_VISIBILITY_RE.match(token)
            if not match:
                continue
            text = match.group(2)
            # "1 1/2SM" is split over two groups
            if '/' in text and not match.group(1) and index > 0 and tokens[index - 1].isdigit():
                text = f"{tokens[index - 1]} {text}"
            value = _safe_parse_fraction(text)
            if value is not None:
                qualifier = {'P': '>', 'M': '<'}.get(match.group(1) or '')
                return Visibility(value, Visibility.STATUTE_MILES, qualifier)
        return None

    @classmethod
    def _extract_clouds(cls, parsed) -> List[CloudLayer]:
        layers = []
        for cloud in getattr(parsed, 'clouds', None) or []:
            quantity = getattr(cloud, 'quantity', None)
            if quantity is None:
                continue
            cloud_type = getattr(cloud, 'type', None)
            layers.append(CloudLayer(
                coverage=getattr(quantity, 'name', str(quantity)),
                base_ft=getattr(cloud, 'height', None),
                cloud_type=getattr(cloud_type, 'name', None) if cloud_type else None,
            ))
        return layers

    @classmethod
    def _extract_phenomena(cls, parsed) -> List[WeatherPhenomenon]:
        phenomena = []
        for wc in getattr(parsed, 'weather_conditions', None) or []:
            intensity = getattr(wc, 'intensity', None)
            descriptive = getattr(wc, 'descriptive', None)
            codes = [_enum_value(p) for p in getattr(wc, 'phenomenons', None) or []]
            phenomenon = WeatherPhenomenon(
                intensity=_enum_value(intensity) if intensity else None,
                descriptor=_enum_value(descriptive) if descriptive else None,
                codes=codes,
            )
            if phenomenon.descriptor or phenomenon.codes:
                phenomena.append(phenomenon)
        return phenomena

    @classmethod
    def _extract_validity(cls, validity) -> Optional[ValidityWindow]:
        if validity is None:
            return None
        start_day = getattr(validity, 'start_day', None)
        start_hour = getattr(validity, 'start_hour', None)
        if start_day is None or start_hour is None:
            return None
        return ValidityWindow(
            start_day=start_day,
            start_hour=start_hour,
            start_minute=getattr(validity, 'start_minutes', 0) or 0,
            end_day=getattr(validity, 'end_day', None),
            end_hour=getattr(validity, 'end_hour', None),
        )


# --- Module-level helpers (pure functions) ---

def _normalize(raw_text: Optional[str]) -> str:
    """Uppercase, collapse whitespace and drop the trailing '=' terminator."""
    if not raw_text:
        return ""
    return " ".join(raw_text.upper().split()).rstrip("=").strip()


def _body_tokens(tokens: List[str]) -> List[str]:
    """Groups before the remarks section."""
    body = []
    for token in tokens:
        if token == "RMK":
            break
        body.append(token.rstrip("="))
    return body


def _initial_tokens(tokens: List[str]) -> List[str]:
    """TAF groups belonging to the initial conditions block."""
    body = []
    for token in tokens:
        if token.startswith(("FM", "BECMG", "TEMPO", "PROB", "INTER", "RMK")) and not token.startswith("FMT"):
            break
        body.append(token)
    return body


def _extract_time(parsed) -> Tuple[Optional[int], Optional[int], Optional[int]]:
    day = getattr(parsed, 'day', None)
    parsed_time = getattr(parsed, 'time', None)
    if day is None or parsed_time is None:
        return day, None, None
    return day, parsed_time.hour, parsed_time.minute


def _extract_inhg(tokens: List[str]) -> Optional[float]:
    for token in tokens:
        match = _INHG_RE.match(token)
        if match:
            return int(match.group(1)) / 100.0
    return None


def _enum_value(item) -> str:
    return item.value if hasattr(item, 'value') else str(item)


def _visibility_from_distance(distance: str) -> Optional[Visibility]:
    """
    Convert the library's distance string ("> 10km", "3000m", "1/2SM") into a Visibility.

    Uses safe arithmetic for fraction parsing (no eval()).
    """
    text = distance.strip().upper()
    qualifier = None
    if text.startswith('>'):
        qualifier = '>'
    elif text.startswith('<'):
        qualifier = '<'
    text = text.replace('>', '').replace('<', '').strip()
    if not text:
        return None

    if text.endswith('SM'):
        return _visibility_from_statute_miles(text[:-2], qualifier)

    if text.endswith('KM'):
        try:
            return Visibility(int(float(text[:-2].strip()) * 1000), Visibility.METERS, qualifier)
        except ValueError:
            return None

    if text.endswith('M'):
        text = text[:-1].strip()
    try:
        meters = int(float(text))
    except ValueError:
        return None
    if meters >= 9999:
        return Visibility(10000, Visibility.METERS, '>')
    return Visibility(meters, Visibility.METERS, qualifier)


def _unit_name(unit) -> Optional[str]:
    """'SM' or 'M' for a library unit given as enum or string."""
    if unit is None:
        return None
    for attr in ('value', 'name'):
        text = str(getattr(unit, attr, '') or '').strip().upper()
        if text in ('SM', 'M'):
            return text
    return str(unit).strip().upper() or None


def _visibility_from_statute_miles(text: str, qualifier: Optional[str] = None) -> Optional[Visibility]:
    """Statute-mile distance such as "10", "1 1/2", "P6" or "M1/4"."""
    text = text.strip().upper()
    if text.startswith('P'):
        qualifier = '>'
    elif text.startswith('M'):
        qualifier = '<'
    value = _safe_parse_fraction(text) if text else None
    if value is None:
        return None
    return Visibility(value, Visibility.STATUTE_MILES, qualifier)


def _safe_parse_fraction(text: str) -> Optional[float]:
    """
    Safely parse a fractional number string.

    Handles: "1/2", "1 1/2", "10", "0.5", "M1/4" (M = less than), "P6" (P = more than)
    """
    text = text.strip()
    if text[:1] in ('M', 'P'):
        text = text[1:].strip()
    if not text:
        return None

    try:
        return float(text)
    except ValueError:
        pass

    try:
        if ' ' in text:
            whole, frac = text.split(None, 1)
            return float(int(whole) + Fraction(frac))
        return float(Fraction(text))
    except (ValueError, ZeroDivisionError):
        return None
