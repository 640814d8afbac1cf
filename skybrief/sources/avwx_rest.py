"""AVWX REST API provider (avwx.rest, token required)."""

import logging
from typing import Dict, Optional

import requests

from skybrief.errors import DataError
from skybrief.models.airport import AirportRecord
from skybrief.sources.base import HttpProvider, REPORT, AIRPORT, NEAREST
from skybrief.weather.models import RawReport, NearestReport, ReportKind

logger = logging.getLogger(__name__)


class AvwxRestProvider(HttpProvider):
    """
    Fetch raw METAR/TAF and station metadata from AVWX.

    The nearest-report lookup asks for the closest reporting station first,
    then fetches that station's report.
    """

    name = "avwx"
    BASE_URL = "https://avwx.rest/api"
    CAPABILITIES = frozenset([REPORT, AIRPORT, NEAREST])

    def __init__(self, token: Optional[str], session: Optional[requests.Session] = None,
                 timeout: int = HttpProvider.DEFAULT_TIMEOUT):
        super().__init__(session=session, timeout=timeout)
        self._token = token

    @property
    def available(self) -> bool:
        return bool(self._token)

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"BEARER {self._token or ''}"}

    def fetch_report(self, kind: ReportKind, icao: str) -> RawReport:
        payload = self._get_json(f"/{kind.value}/{icao}", {"options": "", "onfail": "error"})
        raw = (payload or {}).get("raw") if isinstance(payload, dict) else None
        if not raw:
            raise DataError.not_found(f"No {kind.value} for {icao}", provider=self.name)
        return RawReport(icao=icao, kind=kind, raw_text=raw.strip(), source=self.name)

    def fetch_airport(self, icao: str) -> AirportRecord:
        station = self._get_json(f"/station/{icao}")
        if not isinstance(station, dict) or not station.get("icao"):
            raise DataError.not_found(f"Unknown station {icao}", provider=self.name)
        elevation = station.get("elevation_ft")
        return AirportRecord(
            icao=station["icao"].upper(),
            name=station.get("name") or icao,
            country=station.get("country") or "",
            latitude=station.get("latitude"),
            longitude=station.get("longitude"),
            iata=station.get("iata") or None,
            city=station.get("city") or None,
            elevation_ft=int(round(elevation)) if elevation is not None else None,
            source=self.name,
        )

    def fetch_nearest_report(self, kind: ReportKind, latitude: float, longitude: float) -> NearestReport:
        stations = self._get_json(
            f"/station/near/{latitude:.4f},{longitude:.4f}",
            {"n": 1, "airport": "true", "reporting": "true"},
        )
        if not isinstance(stations, list) or not stations:
            raise DataError.not_found(f"No station near {latitude:.2f},{longitude:.2f}", provider=self.name)

        nearest = stations[0]
        station = nearest.get("station") or {}
        icao = (station.get("icao") or "").upper()
        if not icao:
            raise DataError.not_found(f"No station near {latitude:.2f},{longitude:.2f}", provider=self.name)

        return NearestReport(
            report=self.fetch_report(kind, icao),
            latitude=station.get("latitude"),
            longitude=station.get("longitude"),
            distance_nm=nearest.get("nautical_miles"),
        )
