"""Tests for plain-language report descriptions."""

from skybrief.weather import summary
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


class TestClauses:
    """Test per-field clauses."""

    def test_wind_with_gust(self):
        wind = Wind(speed=14, direction=280, gust=20)
        assert summary.wind_clause(wind) == "Wind from 280° at 14 knots, gusting to 20 knots"

    def test_wind_padded_direction(self):
        assert summary.wind_clause(Wind(speed=5, direction=60)) == "Wind from 060° at 5 knots"

    def test_variable_wind(self):
        assert summary.wind_clause(Wind(speed=3, variable=True)) == "Variable wind at 3 knots"

    def test_calm_wind(self):
        assert summary.wind_clause(Wind(speed=0, direction=0)) == "Calm wind"

    def test_wind_variation(self):
        wind = Wind(speed=10, direction=240, variable_from=210, variable_to=270)
        assert summary.wind_clause(wind).endswith("varying between 210° and 270°")

    def test_visibility_meters(self):
        assert summary.visibility_clause(Visibility(800)) == "Visibility 800 meters"

    def test_visibility_statute_fraction(self):
        clause = summary.visibility_clause(Visibility(0.5, Visibility.STATUTE_MILES))
        assert clause == "Visibility 1/2 statute miles"

    def test_visibility_one_mile(self):
        assert summary.visibility_clause(Visibility(1, Visibility.STATUTE_MILES)) == "Visibility 1 statute mile"

    def test_visibility_greater_than(self):
        clause = summary.visibility_clause(Visibility(6, Visibility.STATUTE_MILES, '>'))
        assert clause == "Visibility greater than 6 statute miles"

    def test_visibility_less_than(self):
        clause = summary.visibility_clause(Visibility(0.25, Visibility.STATUTE_MILES, '<'))
        assert clause == "Visibility less than 1/4 statute miles"

    def test_visibility_ten_km(self):
        assert summary.visibility_clause(Visibility(10000)) == "Visibility greater than 10 kilometers"

    def test_cavok(self):
        assert summary.visibility_clause(None, cavok=True) == "Visibility 10 kilometers or more (CAVOK)"

    def test_clouds(self):
        layers = [CloudLayer("FEW", 2500), CloudLayer("OVC", 8000, "CB")]
        assert summary.clouds_clause(layers) == (
            "Clouds: few clouds at 2,500 feet, overcast at 8,000 feet (cumulonimbus)"
        )

    def test_sky_clear(self):
        assert summary.clouds_clause([CloudLayer("SKC")]) == "Sky clear"

    def test_clouds_cavok(self):
        assert summary.clouds_clause([], cavok=True) == "No significant cloud"

    def test_weather(self):
        phenomena = [WeatherPhenomenon("-", "SH", ["RA"]), WeatherPhenomenon(None, None, ["BR"])]
        assert summary.weather_clause(phenomena) == "Weather: light showers of rain, mist"

    def test_vicinity(self):
        assert summary.describe_phenomenon(WeatherPhenomenon("VC", "TS")) == "thunderstorm in the vicinity"

    def test_several_codes(self):
        text = summary.describe_phenomenon(WeatherPhenomenon("+", "TS", ["RA", "GR"]))
        assert text == "heavy thunderstorm with rain and hail"

    def test_pressure_inhg(self):
        r = DecodedReport(altimeter_inhg=29.92, altimeter_hpa=1013)
        assert summary.pressure_clause(r) == "Altimeter setting 29.92 inHg (1013 hPa)"

    def test_format_miles(self):
        assert summary.format_miles(10) == "10"
        assert summary.format_miles(0.5) == "1/2"
        assert summary.format_miles(1.5) == "1 1/2"
        assert summary.format_miles(0.25) == "1/4"


class TestSummary:
    """Missing fields keep their place as fallback clauses."""

    def test_empty_metar(self):
        r = DecodedReport(icao="KXYZ")
        assert summary.summarize(r) == (
            "METAR for KXYZ. Wind information not available. Visibility not reported. "
            "No significant weather. Cloud information not available. "
            "Temperature not reported. Pressure not reported."
        )

    def test_details_keys_in_order(self):
        r = DecodedReport(icao="KXYZ")
        assert list(summary.details(r)) == ['wind', 'visibility', 'weather', 'clouds', 'temperature', 'pressure']

    def test_period_fields(self):
        r = DecodedReport(wind=Wind(speed=12, direction=300))
        assert summary.describe_conditions(r) == (
            "Wind from 300° at 12 knots; Visibility not reported; "
            "No significant weather; Cloud information not available"
        )

    def test_annotate(self):
        r = DecodedReport(icao="KXYZ", day=12, hour=12, minute=51, temperature=-3, dewpoint=-5)
        summary.annotate(r)
        assert r.summary.startswith("METAR for KXYZ at 121251Z.")
        assert r.details['temperature'] == "Temperature -3°C, dew point -5°C"


class TestPeriodLabel:

    def test_tempo(self):
        period = ForecastPeriod("TEMPO", DecodedReport(), ValidityWindow(12, 18, 0, 12, 22))
        assert summary.period_label(period) == "TEMPO 121800Z to 122200Z"

    def test_from(self):
        period = ForecastPeriod("FM", DecodedReport(), ValidityWindow(12, 16))
        assert summary.period_label(period) == "FM 121600Z"

    def test_prob(self):
        period = ForecastPeriod("PROB", DecodedReport(), ValidityWindow(13, 0, 0, 13, 6), probability=30)
        assert summary.period_label(period) == "PROB30 130000Z to 130600Z"

    def test_prob_tempo(self):
        period = ForecastPeriod("TEMPO", DecodedReport(), ValidityWindow(13, 0, 0, 13, 6), probability=40)
        assert summary.period_label(period) == "PROB40 TEMPO 130000Z to 130600Z"

    def test_taf_summary_lists_periods(self):
        tempo = DecodedReport(kind=ReportKind.TAF, visibility=Visibility(4000))
        taf = DecodedReport(
            icao="EGLL",
            kind=ReportKind.TAF,
            report_type="TAF",
            validity=ValidityWindow(12, 12, 0, 13, 18),
            periods=[ForecastPeriod("TEMPO", tempo, ValidityWindow(12, 18, 0, 12, 22))],
        )
        text = summary.summarize(taf)
        assert text.startswith("Terminal Aerodrome Forecast for EGLL. Valid 121200Z to 131800Z.")
        assert "TEMPO 121800Z to 122200Z: Wind information not available; Visibility 4000 meters" in text
