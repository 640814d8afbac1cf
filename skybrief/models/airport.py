"""Airport records and the built-in airport table."""

import re
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple, Union

import pandas as pd

from skybrief.models.navpoint import NavPoint

logger = logging.getLogger(__name__)

ICAO_RE = re.compile(r'^[A-Z0-9]{4}$')

DEFAULT_AIRPORTS_FILE = Path(__file__).resolve().parent.parent / 'data' / 'airports.csv'

MIN_SEARCH_LENGTH = 2


def is_valid_icao(code: Any) -> bool:
    """True if ``code`` is exactly 4 uppercase alphanumeric characters."""
    return isinstance(code, str) and bool(ICAO_RE.match(code))


def normalize_icao(code: Any) -> str:
    """Strip and uppercase a user supplied airport code (no validation)."""
    return str(code or "").strip().upper()


@dataclass(frozen=True)
class AirportRecord:
    """
    Airport metadata.

    Attributes:
        icao: ICAO code (primary key)
        name: Display name
        country: Country name or ISO code
        latitude: Decimal degrees
        longitude: Decimal degrees
        iata: IATA code, if any
        city: City served, if known
        elevation_ft: Field elevation in feet, if known
        source: Name of the provider that supplied the record
    """

    icao: str
    name: str
    country: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    iata: Optional[str] = None
    city: Optional[str] = None
    elevation_ft: Optional[int] = None
    source: str = ""

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def navpoint(self) -> Optional[NavPoint]:
        if not self.has_coordinates:
            return None
        return NavPoint(latitude=self.latitude, longitude=self.longitude, name=self.icao)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'icao': self.icao,
            'iata': self.iata,
            'name': self.name,
            'city': self.city,
            'country': self.country,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'elevation_ft': self.elevation_ft,
            'source': self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AirportRecord':
        elevation = data.get('elevation_ft')
        return cls(
            icao=normalize_icao(data['icao']),
            name=data.get('name') or data['icao'],
            country=data.get('country') or "",
            latitude=_optional_float(data.get('latitude')),
            longitude=_optional_float(data.get('longitude')),
            iata=data.get('iata') or None,
            city=data.get('city') or None,
            elevation_ft=int(round(float(elevation))) if elevation not in (None, "") else None,
            source=data.get('source', ""),
        )


class AirportDirectory:
    """
    Static built-in airport table.

    Loaded once from a CSV file (columns icao, iata, name, city, country,
    latitude, longitude, elevation_ft). Used as the airport provider of last
    resort, to locate the station nearest to a coordinate for mock data, and
    for plain substring search.

    Example:
        directory = AirportDirectory()
        directory.get("KJFK").name            # 'John F Kennedy International Airport'
        directory.search("heathrow")         # [AirportRecord(icao='EGLL', ...)]
    """

    def __init__(self, source: Union[str, Path, pd.DataFrame, None] = None):
        """
        Args:
            source: CSV path or DataFrame; defaults to the packaged table
        """
        if isinstance(source, pd.DataFrame):
            df = source
        else:
            path = Path(source) if source is not None else DEFAULT_AIRPORTS_FILE
            df = pd.read_csv(path, dtype={'icao': str, 'iata': str}, keep_default_na=False, na_values=[''])
        self._records: Dict[str, AirportRecord] = {}
        for _, row in df.iterrows():
            record = self._record_from_row(row)
            if record is not None:
                self._records[record.icao] = record
        logger.debug(f"Loaded {len(self._records)} airports")

    @staticmethod
    def _safe_get(row: pd.Series, key: str) -> Any:
        """Get a value from a pandas row, converting nan to None."""
        value = row.get(key)
        if value is None or pd.isna(value):
            return None
        return value

    def _record_from_row(self, row: pd.Series) -> Optional[AirportRecord]:
        icao = normalize_icao(self._safe_get(row, 'icao'))
        if not is_valid_icao(icao):
            return None
        elevation = self._safe_get(row, 'elevation_ft')
        latitude = self._safe_get(row, 'latitude')
        longitude = self._safe_get(row, 'longitude')
        return AirportRecord(
            icao=icao,
            name=str(self._safe_get(row, 'name') or icao),
            country=str(self._safe_get(row, 'country') or ""),
            latitude=float(latitude) if latitude is not None else None,
            longitude=float(longitude) if longitude is not None else None,
            iata=self._safe_get(row, 'iata'),
            city=self._safe_get(row, 'city'),
            elevation_ft=int(elevation) if elevation is not None else None,
            source="static",
        )

    def get(self, icao: str) -> Optional[AirportRecord]:
        return self._records.get(normalize_icao(icao))

    def __contains__(self, icao: str) -> bool:
        return normalize_icao(icao) in self._records

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> List[AirportRecord]:
        return list(self._records.values())

    def search(self, query: str, limit: int = 10) -> List[AirportRecord]:
        """
        Substring match over ICAO, IATA, name and city.

        Results keep table order; no ranking is applied.

        Args:
            query: Free text (at least 2 characters)
            limit: Maximum number of results

        Returns:
            Matching records, empty for queries shorter than 2 characters
        """
        text = (query or "").strip().upper()
        if len(text) < MIN_SEARCH_LENGTH:
            return []

        matches = []
        for record in self._records.values():
            haystack = [record.icao, record.iata or "", record.name, record.city or ""]
            if any(text in value.upper() for value in haystack):
                matches.append(record)
                if len(matches) >= limit:
                    break
        return matches

    def nearest(self, latitude: float, longitude: float,
                exclude: Optional[List[str]] = None) -> Optional[Tuple[AirportRecord, float]]:
        """
        Closest airport with coordinates to a point.

        Returns:
            Tuple of (record, distance in nautical miles), or None if the table is empty
        """
        point = NavPoint(latitude=latitude, longitude=longitude)
        excluded = {normalize_icao(code) for code in exclude or []}
        best = None
        for record in self._records.values():
            if not record.has_coordinates or record.icao in excluded:
                continue
            distance = point.distance_to(record.navpoint)
            if best is None or distance < best[1]:
                best = (record, distance)
        return best


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)
