"""CheckWX API provider (api.checkwx.com, API key required)."""

import logging
from typing import Any, Dict, List, Optional

import requests

from skybrief.errors import DataError
from skybrief.models.airport import AirportRecord
from skybrief.sources.base import HttpProvider, REPORT, AIRPORT, NEAREST
from skybrief.weather.models import RawReport, NearestReport, ReportKind

logger = logging.getLogger(__name__)

# Statute miles to nautical miles
SM_TO_NM = 0.868976


class CheckWXProvider(HttpProvider):
    """
    Fetch raw METAR/TAF, station metadata and nearest-station reports from CheckWX.

    Responses are wrapped as ``{"results": n, "data": [...]}``; zero results
    is reported as NOT_FOUND.

    Example:
        provider = CheckWXProvider(api_key="...")
        report = provider.fetch_report(ReportKind.METAR, "KJFK")
    """

    name = "checkwx"
    BASE_URL = "https://api.checkwx.com"
    CAPABILITIES = frozenset([REPORT, AIRPORT, NEAREST])

    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None,
                 timeout: int = HttpProvider.DEFAULT_TIMEOUT):
        super().__init__(session=session, timeout=timeout)
        self._api_key = api_key

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    def _headers(self) -> Dict[str, str]:
        return {"X-API-Key": self._api_key or ""}

    def _data(self, path: str) -> List[Any]:
        payload = self._get_json(path)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not data:
            raise DataError.not_found(f"No results for {path}", provider=self.name)
        return data

    def fetch_report(self, kind: ReportKind, icao: str) -> RawReport:
        data = self._data(f"/{kind.value}/{icao}")
        raw = data[0] if isinstance(data[0], str) else data[0].get("raw_text", "")
        if not raw.strip():
            raise DataError.not_found(f"Empty {kind.value} for {icao}", provider=self.name)
        return RawReport(icao=icao, kind=kind, raw_text=raw.strip(), source=self.name)

    def fetch_airport(self, icao: str) -> AirportRecord:
        station = self._data(f"/station/{icao}")[0]
        latitude, longitude = _coordinates(station)
        country = station.get("country")
        elevation = (station.get("elevation") or {}).get("feet")
        return AirportRecord(
            icao=station.get("icao", icao).upper(),
            name=station.get("name") or icao,
            country=country.get("code", "") if isinstance(country, dict) else (country or ""),
            latitude=latitude,
            longitude=longitude,
            iata=station.get("iata") or None,
            city=station.get("city") or None,
            elevation_ft=int(round(elevation)) if elevation is not None else None,
            source=self.name,
        )

    def fetch_nearest_report(self, kind: ReportKind, latitude: float, longitude: float) -> NearestReport:
        data = self._data(f"/{kind.value}/lat/{latitude:.4f}/lon/{longitude:.4f}/decoded")
        entry = data[0]
        raw = entry.get("raw_text", "")
        icao = entry.get("icao", "")
        if not raw or not icao:
            raise DataError.not_found(f"No station near {latitude:.2f},{longitude:.2f}", provider=self.name)

        station_lat, station_lon = _coordinates(entry.get("station") or {})
        miles = ((entry.get("position") or {}).get("distance") or {}).get("miles")
        return NearestReport(
            report=RawReport(icao=icao.upper(), kind=kind, raw_text=raw.strip(), source=self.name),
            latitude=station_lat,
            longitude=station_lon,
            distance_nm=miles * SM_TO_NM if miles is not None else None,
        )


def _coordinates(station: Dict[str, Any]):
    """Extract (lat, lon) from either ``latitude.decimal`` or GeoJSON ``geometry``."""
    lat = (station.get("latitude") or {}).get("decimal") if isinstance(station.get("latitude"), dict) else None
    lon = (station.get("longitude") or {}).get("decimal") if isinstance(station.get("longitude"), dict) else None
    if lat is None or lon is None:
        coordinates = (station.get("geometry") or {}).get("coordinates")
        if coordinates and len(coordinates) >= 2:
            lon, lat = coordinates[0], coordinates[1]
    if lat is None or lon is None:
        return None, None
    return float(lat), float(lon)
