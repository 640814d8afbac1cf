"""Tests for route briefing synthesis."""

import pytest

from skybrief.cache import Cache
from skybrief.errors import DataError, SynthesisError, SynthesisErrorKind
from skybrief.models.route import RoutePlan, AirportRole
from skybrief.sources.gateway import ProviderGateway
from skybrief.synthesis import (
    BriefingSynthesizer,
    recommendations,
    RECOMMEND_FAVORABLE,
    RECOMMEND_DELAY,
    RECOMMEND_ALTERNATES,
    RECOMMEND_MONITOR,
    RECOMMEND_ICING,
    RECOMMEND_REVIEW_ALERTS,
)
from skybrief.models.briefing import CriticalAlert
from skybrief.weather.severity import Severity


def synthesizer_for(*providers, points=8):
    return BriefingSynthesizer(ProviderGateway(list(providers), Cache()), max_workers=8, enroute_points=points)


class TestRecommendations:

    def test_normal(self):
        assert recommendations(Severity.NORMAL, []) == [RECOMMEND_FAVORABLE]

    def test_caution(self):
        assert recommendations(Severity.CAUTION, []) == [RECOMMEND_MONITOR, RECOMMEND_ICING]

    def test_critical_with_alerts(self):
        alerts = [CriticalAlert("KORD", "weather", "Critical weather conditions at KORD: Thunderstorms")]
        assert recommendations(Severity.CRITICAL, alerts) == [
            RECOMMEND_DELAY, RECOMMEND_ALTERNATES, RECOMMEND_REVIEW_ALERTS,
        ]

    def test_alerts_replace_favorable(self):
        alerts = [CriticalAlert("KORD", "notam", "RWY 10C/28C CLSD")]
        assert recommendations(Severity.NORMAL, alerts) == [RECOMMEND_REVIEW_ALERTS]


class TestBuild:

    def test_normal_route(self, stub_provider):
        briefing = synthesizer_for(stub_provider).build(RoutePlan("KJFK", "KLAX"))

        assert briefing.summary.worst_severity == Severity.NORMAL
        assert briefing.summary.recommendations == [RECOMMEND_FAVORABLE]
        assert briefing.summary.critical_alerts == []
        assert list(briefing.airports) == ["KJFK", "KLAX"]
        assert briefing.airports["KJFK"].role == AirportRole.ORIGIN
        assert briefing.airports["KLAX"].metar.icao == "KLAX"
        assert briefing.airports["KLAX"].taf is not None
        assert len(briefing.enroute) == 8

    def test_enroute_points(self, stub_provider):
        briefing = synthesizer_for(stub_provider, points=3).build(RoutePlan("KJFK", "KLAX"))

        assert [point.index for point in briefing.enroute] == [1, 2, 3]
        point = briefing.enroute[0]
        assert point.station == "KMID"
        assert point.distance_nm == 12.0
        assert point.severity == Severity.NORMAL

    def test_malformed_code_fails_before_fetch(self, stub_provider):
        with pytest.raises(SynthesisError) as exc_info:
            synthesizer_for(stub_provider).build(RoutePlan("JFK", "KLAX"))

        assert exc_info.value.kind == SynthesisErrorKind.INVALID_AIRPORT
        assert exc_info.value.icao == "JFK"
        assert stub_provider.calls == []

    def test_unknown_airport(self, stub_provider):
        with pytest.raises(SynthesisError) as exc_info:
            synthesizer_for(stub_provider).build(RoutePlan("KJFK", "KLAX", ["ZZZZ"]))

        assert exc_info.value.icao == "ZZZZ"
        assert not any(call[0] in ("metar", "taf", "notams") for call in stub_provider.calls)

    def test_fetch_failure_degrades_entry(self, make_stub):
        provider = make_stub(failures={
            ("taf", "KLAX"): DataError.provider_failure("HTTP 500"),
            ("notams", "KJFK"): DataError.provider_failure("timeout"),
        })
        briefing = synthesizer_for(provider).build(RoutePlan("KJFK", "KLAX"))

        assert briefing.airports["KLAX"].taf is None
        assert "taf" in briefing.airports["KLAX"].errors
        assert briefing.airports["KLAX"].metar is not None
        assert "notams" in briefing.airports["KJFK"].errors
        assert briefing.summary.worst_severity == Severity.NORMAL

    def test_enroute_failure_stays_on_point(self, make_stub):
        provider = make_stub(failures={("nearest", None): DataError.not_found("nothing near")})
        briefing = synthesizer_for(provider, points=2).build(RoutePlan("KJFK", "KLAX"))

        assert all(point.error for point in briefing.enroute)
        assert all(point.report is None for point in briefing.enroute)
        assert briefing.summary.worst_severity == Severity.NORMAL

    def test_critical_alternate(self, mock_provider):
        briefing = synthesizer_for(mock_provider, points=2).build(RoutePlan("KJFK", "KLAX", ["KORD"]))
        summary = briefing.summary

        assert summary.worst_severity == Severity.CRITICAL
        assert summary.recommendations[:2] == [RECOMMEND_DELAY, RECOMMEND_ALTERNATES]
        assert summary.recommendations[-1] == RECOMMEND_REVIEW_ALERTS

        weather = [a for a in summary.critical_alerts if a.alert_type == 'weather']
        notams = [a for a in summary.critical_alerts if a.alert_type == 'notam']
        assert [a.icao for a in weather] == ["KORD"]
        assert weather[0].message.startswith("Critical weather conditions at KORD: ")
        assert "Thunderstorms" in weather[0].message
        assert [a.message for a in notams] == ["RWY 10C/28C CLSD DUE TO SNOW REMOVAL OPS"]

    def test_caution_notam_is_not_an_alert(self, mock_provider):
        briefing = synthesizer_for(mock_provider, points=2).build(RoutePlan("KJFK", "KLAX"))
        assert len(briefing.airports["KJFK"].notams) == 1
        assert not [a for a in briefing.summary.critical_alerts if a.icao == "KJFK"]

    def test_duplicate_airports_fetched_once(self, stub_provider):
        briefing = synthesizer_for(stub_provider, points=2).build(RoutePlan("KJFK", "KLAX", ["KLAX"]))

        assert list(briefing.airports) == ["KJFK", "KLAX"]
        assert stub_provider.calls.count(("metar", "KLAX")) == 1

    def test_to_dict(self, stub_provider):
        data = synthesizer_for(stub_provider, points=2).build(RoutePlan("KJFK", "KLAX")).to_dict()

        assert data['route']['origin'] == "KJFK"
        assert data['summary']['worst_severity'] == "normal"
        assert data['airports']['KJFK']['metar']['severity']['level'] == "normal"
        assert len(data['enroute']) == 2
        assert data['enroute'][0]['station'] == "KMID"


class TestEnrouteWeather:

    def test_points(self, stub_provider, directory):
        synthesizer = synthesizer_for(stub_provider)
        points = synthesizer.enroute_weather(directory.get("KJFK"), directory.get("KLAX"), 5)

        assert len(points) == 5
        assert all(point.report is not None for point in points)

    def test_points_clamped(self, stub_provider, directory):
        synthesizer = synthesizer_for(stub_provider)
        assert len(synthesizer.enroute_weather(directory.get("KJFK"), directory.get("KLAX"), 500)) == 50

    def test_same_airport(self, stub_provider, directory):
        synthesizer = synthesizer_for(stub_provider)
        points = synthesizer.enroute_weather(directory.get("KJFK"), directory.get("KJFK"), 5)
        assert len(points) == 1
