"""Tests for airport records and the built-in table."""

import pandas as pd
import pytest

from skybrief.models.airport import AirportRecord, AirportDirectory, is_valid_icao, normalize_icao


class TestIcao:

    def test_valid(self):
        assert is_valid_icao("KJFK")
        assert is_valid_icao("K1A5")

    def test_invalid(self):
        assert not is_valid_icao("JFK")
        assert not is_valid_icao("kjfk")
        assert not is_valid_icao("KJFKX")
        assert not is_valid_icao(None)

    def test_normalize(self):
        assert normalize_icao(" kjfk ") == "KJFK"
        assert normalize_icao(None) == ""


class TestAirportDirectory:

    def test_loads_packaged_table(self, directory):
        assert len(directory) > 50
        assert "KJFK" in directory
        assert "kord" in directory

    def test_get(self, directory):
        record = directory.get("KLAX")
        assert record.iata == "LAX"
        assert record.city == "Los Angeles"
        assert record.has_coordinates
        assert record.source == "static"

    def test_unknown(self, directory):
        assert directory.get("ZZZZ") is None

    def test_search_by_name(self, directory):
        results = directory.search("heathrow")
        assert [r.icao for r in results] == ["EGLL"]

    def test_search_by_iata(self, directory):
        assert "KORD" in [r.icao for r in directory.search("ORD")]

    def test_search_limit(self, directory):
        assert len(directory.search("international", limit=3)) == 3

    def test_search_too_short(self, directory):
        assert directory.search("K") == []

    def test_nearest(self, directory):
        record, distance = directory.nearest(40.65, -73.78)
        assert record.icao == "KJFK"
        assert distance < 5

    def test_nearest_exclude(self, directory):
        record, _ = directory.nearest(40.6398, -73.7789, exclude=["KJFK"])
        assert record.icao != "KJFK"

    def test_from_dataframe(self):
        df = pd.DataFrame([
            {'icao': 'TEST', 'iata': None, 'name': 'Test Field', 'city': None, 'country': 'XX',
             'latitude': 1.0, 'longitude': 2.0, 'elevation_ft': 100},
            {'icao': 'BAD', 'iata': None, 'name': 'Bad', 'city': None, 'country': 'XX',
             'latitude': 0.0, 'longitude': 0.0, 'elevation_ft': 0},
        ])
        directory = AirportDirectory(df)

        assert len(directory) == 1
        record = directory.get("TEST")
        assert record.iata is None
        assert record.elevation_ft == 100
        assert record.navpoint.latitude == 1.0


class TestAirportRecord:

    def test_round_trip(self):
        record = AirportRecord(icao="KJFK", name="JFK", country="US", latitude=40.6, longitude=-73.8, iata="JFK")
        assert AirportRecord.from_dict(record.to_dict()) == record

    def test_without_coordinates(self):
        record = AirportRecord(icao="XXXX", name="Nowhere")
        assert not record.has_coordinates
        assert record.navpoint is None

    def test_from_dict_normalizes(self):
        record = AirportRecord.from_dict({'icao': 'egll', 'latitude': '51.47', 'longitude': '-0.46'})
        assert record.icao == "EGLL"
        assert record.name == "egll"
        assert record.latitude == pytest.approx(51.47)
