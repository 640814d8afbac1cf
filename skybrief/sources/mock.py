"""Built-in samples and synthetic data, the provider of last resort."""

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from skybrief.errors import DataError
from skybrief.models.airport import AirportRecord, AirportDirectory
from skybrief.models.notam import Notam
from skybrief.sources.base import WeatherProvider, REPORT, AIRPORT, NEAREST, NOTAMS
from skybrief.weather.models import RawReport, NearestReport, ReportKind

logger = logging.getLogger(__name__)

SAMPLE_REPORTS: Dict[str, Dict[str, str]] = {
    'KJFK': {
        'metar': 'METAR KJFK 121251Z 28014G20KT 10SM FEW250 24/18 A3000 RMK AO2 SLP158 T02440183=',
        'taf': 'TAF KJFK 121120Z 1212/1318 28015G25KT P6SM FEW250 FM121600 30012KT P6SM SCT250 FM130000 32008KT P6SM BKN250=',
    },
    'KLGA': {
        'metar': 'METAR KLGA 121251Z 09022G28KT 4SM -RA BKN008 OVC015 18/16 A2992 RMK AO2 SLP132 P0001 T01830161=',
        'taf': 'TAF KLGA 121120Z 1212/1318 09025G35KT 3SM -RA BKN008 OVC020 FM121800 12015KT 5SM BKN015 OVC030=',
    },
    'KORD': {
        'metar': 'METAR KORD 121251Z 27035G45KT 1/2SM +TSRA BKN008 OVC020 CB 15/14 A2965 RMK AO2 TSB35 SLP043 P0015 T01500144=',
        'taf': 'TAF KORD 121120Z 1212/1318 27040G50KT 1/4SM +TSRA BKN005 OVC015 CB TEMPO 1212/1216 1/8SM +TSRA FG BKN002=',
    },
    'EGLL': {
        'metar': 'METAR EGLL 121320Z AUTO 25012KT 9999 FEW035 SCT250 16/11 Q1016 NOSIG=',
        'taf': 'TAF EGLL 121100Z 1212/1318 25015KT 9999 SCT035 BECMG 1216/1218 27018G30KT=',
    },
    'LFPG': {
        'metar': 'METAR LFPG 121330Z 27008KT CAVOK 19/12 Q1018 NOSIG=',
        'taf': 'TAF LFPG 121100Z 1212/1318 27010KT CAVOK TEMPO 1218/1222 25015G25KT=',
    },
}

SAMPLE_NOTAMS: Dict[str, List[dict]] = {
    'KJFK': [
        {
            'id': 'NOTAM-001',
            'type': 'runway',
            'severity': 'caution',
            'message': 'RWY 04L/22R CLSD FOR MAINTENANCE 1300-1700 DAILY',
            'start_time': '2024-01-15T13:00:00Z',
            'end_time': '2024-01-15T17:00:00Z',
            'location': 'KJFK',
        },
    ],
    'KLGA': [
        {
            'id': 'NOTAM-002',
            'type': 'navaid',
            'severity': 'normal',
            'message': 'ILS RWY 04 GP U/S',
            'start_time': '2024-01-15T08:00:00Z',
            'end_time': '2024-01-16T20:00:00Z',
            'location': 'KLGA',
        },
    ],
    'KORD': [
        {
            'id': 'NOTAM-003',
            'type': 'runway',
            'severity': 'critical',
            'message': 'RWY 10C/28C CLSD DUE TO SNOW REMOVAL OPS',
            'start_time': '2024-01-15T06:00:00Z',
            'end_time': '2024-01-15T18:00:00Z',
            'location': 'KORD',
        },
        {
            'id': 'NOTAM-004',
            'type': 'facility',
            'severity': 'caution',
            'message': 'TWR FREQ 120.15 U/S USE 121.9',
            'start_time': '2024-01-15T10:00:00Z',
            'end_time': '2024-01-15T16:00:00Z',
            'location': 'KORD',
        },
    ],
}


class MockProvider(WeatherProvider):
    """
    Always-available provider backed by built-in samples.

    - METAR/TAF: sample reports for a few airports, otherwise a synthetic
      report with light wind, good visibility and mild temperatures. The
      synthetic values are drawn from a generator seeded by the station, so
      the same station always gets the same weather within a process.
    - Airports: the static airport table; unknown codes are NOT_FOUND.
    - NOTAMs: built-in samples, otherwise an empty list.
    - Nearest report: nearest airport of the static table.
    """

    name = "mock"
    CAPABILITIES = frozenset([REPORT, AIRPORT, NEAREST, NOTAMS])

    def __init__(self, directory: Optional[AirportDirectory] = None, seed: Optional[int] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            directory: Airport table; the packaged one by default
            seed: Extra seed mixed into synthetic report generation
            clock: Returns the current UTC time, used for synthetic time groups
        """
        self._directory = directory if directory is not None else AirportDirectory()
        self._seed = seed
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def directory(self) -> AirportDirectory:
        return self._directory

    def fetch_report(self, kind: ReportKind, icao: str) -> RawReport:
        sample = SAMPLE_REPORTS.get(icao, {}).get(kind.value)
        if sample is None:
            logger.info(f"Generating synthetic {kind.value} for {icao}")
            sample = self.synthetic_report(kind, icao)
        return RawReport(icao=icao, kind=kind, raw_text=sample, source=self.name)

    def fetch_airport(self, icao: str) -> AirportRecord:
        record = self._directory.get(icao)
        if record is None:
            raise DataError.not_found(f"Unknown airport {icao}", provider=self.name)
        return record

    def fetch_nearest_report(self, kind: ReportKind, latitude: float, longitude: float) -> NearestReport:
        nearest = self._directory.nearest(latitude, longitude)
        if nearest is None:
            raise DataError.not_found(f"No station near {latitude:.2f},{longitude:.2f}", provider=self.name)
        record, distance = nearest
        return NearestReport(
            report=self.fetch_report(kind, record.icao),
            latitude=record.latitude,
            longitude=record.longitude,
            distance_nm=distance,
        )

    def fetch_notams(self, icao: str) -> List[Notam]:
        return [Notam.from_dict(data, source=self.name) for data in SAMPLE_NOTAMS.get(icao, [])]

    def synthetic_report(self, kind: ReportKind, icao: str) -> str:
        """
        Plausible report text for a station without a sample.

        Wind 3-15 kt, 10 SM or more, few/scattered clouds at 3000 ft or
        above, temperature 8-28°C.
        """
        rng = random.Random(f"{self._seed}:{icao}:{kind.value}")
        now = self._clock()

        direction = rng.randrange(10, 370, 10)
        speed = rng.randint(3, 15)
        wind = f"{direction:03d}{speed:02d}KT"
        clouds = f"{rng.choice(['FEW', 'SCT'])}{rng.randrange(30, 250, 10):03d}"

        if kind == ReportKind.TAF:
            end = now + timedelta(hours=24)
            issued = f"{now.day:02d}{now.hour:02d}00Z"
            validity = f"{now.day:02d}{now.hour:02d}/{end.day:02d}{end.hour:02d}"
            return f"TAF {icao} {issued} {validity} {wind} P6SM {clouds}="

        temperature = rng.randint(8, 28)
        dewpoint = temperature - rng.randint(2, 8)
        altimeter = rng.randint(2990, 3030)
        observed = f"{now.day:02d}{now.hour:02d}{now.minute:02d}Z"
        return f"METAR {icao} {observed} {wind} 10SM {clouds} {temperature:02d}/{dewpoint:02d} A{altimeter}="
