"""Aviation Weather (aviationweather.gov) API provider, free and keyless."""

import logging
from typing import List, Optional

import requests

from skybrief.errors import DataError
from skybrief.models.airport import AirportRecord
from skybrief.models.navpoint import NavPoint
from skybrief.sources.base import HttpProvider, REPORT, AIRPORT, NEAREST
from skybrief.weather.models import RawReport, NearestReport, ReportKind

logger = logging.getLogger(__name__)

METERS_TO_FEET = 3.28084


class AviationWeatherProvider(HttpProvider):
    """
    Fetch live METAR and TAF data from the aviationweather.gov API.

    Reports are requested in raw text format. Nearest-station lookups query a
    bounding box around the coordinate in JSON format and pick the closest
    station that has a report.

    Example:
        provider = AviationWeatherProvider()
        report = provider.fetch_report(ReportKind.METAR, "EGLL")
        print(report.raw_text)
    """

    name = "aviationweather"
    BASE_URL = "https://aviationweather.gov/api/data"
    CAPABILITIES = frozenset([REPORT, AIRPORT, NEAREST])

    # Half-size of the nearest-station search box in degrees
    SEARCH_BOX_DEGREES = 1.5

    def __init__(self, session: Optional[requests.Session] = None,
                 timeout: int = HttpProvider.DEFAULT_TIMEOUT, enabled: bool = True):
        """
        Args:
            session: Optional requests.Session for dependency injection (testing).
            timeout: HTTP request timeout in seconds.
            enabled: False to skip the public API entirely (offline runs).
        """
        super().__init__(session=session, timeout=timeout)
        self._enabled = enabled

    @property
    def available(self) -> bool:
        return self._enabled

    def fetch_report(self, kind: ReportKind, icao: str) -> RawReport:
        params = {"ids": icao, "format": "raw"}
        if kind == ReportKind.METAR:
            params["hours"] = "2"
        raw = self._get_text(f"/{kind.value}", params)

        if kind == ReportKind.TAF:
            blocks = self._split_taf_blocks(raw)
            text = " ".join(blocks[0].split()) if blocks else ""
        else:
            lines = [line.strip() for line in raw.splitlines() if line.strip()]
            text = lines[0] if lines else ""

        if not text:
            raise DataError.not_found(f"No {kind.value} for {icao}", provider=self.name)
        return RawReport(icao=icao, kind=kind, raw_text=text, source=self.name)

    def fetch_airport(self, icao: str) -> AirportRecord:
        payload = self._get_json("/airport", {"ids": icao, "format": "json"})
        if not isinstance(payload, list) or not payload:
            raise DataError.not_found(f"Unknown airport {icao}", provider=self.name)

        entry = payload[0]
        elevation_m = entry.get("elev")
        return AirportRecord(
            icao=(entry.get("icaoId") or icao).upper(),
            name=entry.get("name") or icao,
            country=entry.get("country") or "",
            latitude=entry.get("lat"),
            longitude=entry.get("lon"),
            iata=entry.get("iataId") or None,
            city=entry.get("state") or None,
            elevation_ft=int(round(elevation_m * METERS_TO_FEET)) if elevation_m is not None else None,
            source=self.name,
        )

    def fetch_nearest_report(self, kind: ReportKind, latitude: float, longitude: float) -> NearestReport:
        box = self.SEARCH_BOX_DEGREES
        bbox = ",".join(f"{value:.3f}" for value in (
            max(-90.0, latitude - box), max(-180.0, longitude - box),
            min(90.0, latitude + box), min(180.0, longitude + box),
        ))
        payload = self._get_json(f"/{kind.value}", {"bbox": bbox, "format": "json"})
        if not isinstance(payload, list):
            payload = []

        raw_key = "rawTAF" if kind == ReportKind.TAF else "rawOb"
        origin = NavPoint(latitude=latitude, longitude=longitude)
        best = None
        for entry in payload:
            raw = entry.get(raw_key)
            lat, lon = entry.get("lat"), entry.get("lon")
            if not raw or lat is None or lon is None or not entry.get("icaoId"):
                continue
            distance = origin.distance_to(NavPoint(latitude=lat, longitude=lon))
            if best is None or distance < best[1]:
                best = (entry, distance)

        if best is None:
            raise DataError.not_found(f"No station near {latitude:.2f},{longitude:.2f}", provider=self.name)

        entry, distance = best
        return NearestReport(
            report=RawReport(icao=entry["icaoId"].upper(), kind=kind,
                             raw_text=" ".join(entry[raw_key].split()), source=self.name),
            latitude=entry["lat"],
            longitude=entry["lon"],
            distance_nm=distance,
        )

    @staticmethod
    def _split_taf_blocks(raw_text: str) -> List[str]:
        """
        Split multi-TAF raw text into individual TAF blocks.

        The API returns TAFs separated by blank lines or TAF headers.
        Each TAF may span multiple lines (continuation lines).
        """
        if not raw_text or not raw_text.strip():
            return []

        blocks = []
        current = []

        for line in raw_text.splitlines():
            stripped = line.strip()
            if not stripped:
                # Blank line ends current block
                if current:
                    blocks.append("\n".join(current))
                    current = []
                continue

            if stripped.startswith("TAF") and current:
                blocks.append("\n".join(current))
                current = [stripped]
            else:
                current.append(stripped)

        if current:
            blocks.append("\n".join(current))

        return blocks
