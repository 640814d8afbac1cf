"""Tests for route plans."""

import pytest

from skybrief.errors import SynthesisError, SynthesisErrorKind
from skybrief.models.route import RoutePlan, AirportRole


class TestRoutePlan:

    def test_from_dict(self):
        plan = RoutePlan.from_dict({
            'origin': 'kjfk',
            'destination': ' klax ',
            'alternates': ['kord'],
            'flightLevel': '350',
            'route': 'KJFK DCT KLAX',
        })

        assert plan.origin == "KJFK"
        assert plan.destination == "KLAX"
        assert plan.alternates == ["KORD"]
        assert plan.flight_level == 350
        assert plan.route_string == "KJFK DCT KLAX"

    def test_alternates_as_string(self):
        plan = RoutePlan.from_dict({'origin': 'KJFK', 'destination': 'KLAX', 'alternates': 'KORD, KSFO'})
        assert plan.alternates == ["KORD", "KSFO"]

    def test_airports_in_route_order(self):
        plan = RoutePlan("KJFK", "KLAX", ["KORD", "KSFO"])
        assert plan.airports() == [
            ("KJFK", AirportRole.ORIGIN),
            ("KLAX", AirportRole.DESTINATION),
            ("KORD", AirportRole.ALTERNATE),
            ("KSFO", AirportRole.ALTERNATE),
        ]

    def test_duplicate_keeps_first_role(self):
        plan = RoutePlan("KJFK", "KLAX", ["KLAX", "KORD", "KORD"])
        assert plan.airports() == [
            ("KJFK", AirportRole.ORIGIN),
            ("KLAX", AirportRole.DESTINATION),
            ("KORD", AirportRole.ALTERNATE),
        ]

    def test_validate_ok(self):
        RoutePlan("KJFK", "KLAX", ["KORD"]).validate()

    def test_validate_short_origin(self):
        with pytest.raises(SynthesisError) as exc_info:
            RoutePlan("JFK", "KLAX").validate()
        assert exc_info.value.kind == SynthesisErrorKind.INVALID_AIRPORT
        assert exc_info.value.icao == "JFK"

    def test_validate_bad_alternate(self):
        with pytest.raises(SynthesisError) as exc_info:
            RoutePlan("KJFK", "KLAX", ["KO-D"]).validate()
        assert exc_info.value.icao == "KO-D"

    def test_to_dict(self):
        data = RoutePlan("KJFK", "KLAX", flight_level=350).to_dict()
        assert data == {
            'origin': 'KJFK',
            'destination': 'KLAX',
            'alternates': [],
            'flight_level': 350,
            'route_string': None,
        }
