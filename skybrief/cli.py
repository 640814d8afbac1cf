#!/usr/bin/env python3

import sys
import json
import argparse
import logging
from typing import Any, Dict, List, Optional

from skybrief.config import Settings
from skybrief.errors import SkybriefError
from skybrief.models.briefing import Briefing
from skybrief.service import BriefingService

logger = logging.getLogger(__name__)


class Command:
    """Command-line interface for skybrief."""

    def __init__(self, args, service: Optional[BriefingService] = None, settings: Optional[Settings] = None):
        """
        Args:
            args: Parsed command line arguments
            service: Service to use; built from settings when omitted
            settings: Settings for building the service
        """
        self.args = args
        self.settings = settings or Settings.from_env()
        self._service = service

    @property
    def service(self) -> BriefingService:
        if self._service is None:
            self._service = BriefingService.from_settings(self.settings)
        return self._service

    def output(self, data: Dict[str, Any], human: str) -> None:
        if self.args.format == 'json':
            print(json.dumps(data, indent=2, default=str))
        else:
            print(human)

    def run_decode(self):
        """Decode raw report text given as arguments."""
        raw_text = " ".join(self.args.items)
        result = self.service.decode(raw_text, self.args.kind)
        severity = result['severity']
        lines = [result['summary'], f"{severity['emoji']} {severity['level'].upper()}: {severity['description']}"]
        lines += [f"  - {reason}" for reason in severity['reasons']]
        for period in result.get('forecast_periods', []):
            lines.append(f"{period['severity']['emoji']} {period['label']}: {period['summary']}")
        self.output(result, "\n".join(lines))

    def run_weather(self):
        """Latest METAR/TAF/NOTAMs for each airport."""
        for icao in self.args.items:
            result = self.service.airport_weather(icao, self.args.kind or 'metar')
            if result['kind'] == 'notams':
                human = "\n".join(
                    [f"{result['icao']}: {result['count']} NOTAMs"] +
                    [f"  [{n['severity']}] {n['message']}" for n in result['notams']]
                )
            else:
                decoded = result['decoded']
                human = "\n".join([
                    decoded['raw_text'],
                    decoded['summary'],
                    f"{decoded['severity']['emoji']} {decoded['severity']['level'].upper()} "
                    f"{', '.join(decoded['severity']['reasons'])}".rstrip(),
                ])
            self.output(result, human)

    def run_airport(self):
        """Airport metadata."""
        for icao in self.args.items:
            record = self.service.airport(icao)
            self.output(record.to_dict(), f"{record.icao} {record.iata or '-'} {record.name} "
                                          f"({record.city or ''} {record.country}) "
                                          f"{record.latitude}, {record.longitude}")

    def run_search(self):
        """Search the built-in airport table."""
        query = " ".join(self.args.items)
        records = self.service.search_airports(query)
        self.output(
            {'query': query, 'airports': [r.to_dict() for r in records]},
            "\n".join(f"{r.icao} {r.iata or '-'} {r.name}, {r.city or ''}" for r in records) or "No airports found",
        )

    def run_brief(self):
        """Route briefing: origin destination [alternates...]."""
        if len(self.args.items) < 2:
            raise ValueError("brief needs an origin and a destination")
        plan = {
            'origin': self.args.items[0],
            'destination': self.args.items[1],
            'alternates': self.args.items[2:],
            'flight_level': self.args.flight_level,
        }
        briefing = self.service.briefing(plan)
        self.output(briefing.to_dict(), format_briefing(briefing))

    def run_demo(self):
        """Demo briefing KJFK to KLAX."""
        briefing = self.service.demo_briefing()
        self.output(briefing.to_dict(), format_briefing(briefing))

    def run_enroute(self):
        """Great-circle enroute weather: origin destination."""
        if len(self.args.items) != 2:
            raise ValueError("enroute needs an origin and a destination")
        result = self.service.enroute_weather(self.args.items[0], self.args.items[1],
                                              self.args.points, self.args.flight_level)
        lines = [f"{result['origin']} -> {result['destination']}: {result['worst_severity']}"]
        for point in result['points']:
            metar = point['metar']
            level = metar['severity']['level'] if metar else 'n/a'
            lines.append(f"  {point['index']:2d} {point['latitude']:8.3f} {point['longitude']:9.3f} "
                         f"{point['station'] or '----'} {level}")
        self.output(result, "\n".join(lines))

    def run_serve(self):
        """Run the web API."""
        from skybrief.web.app import run
        run(host=self.args.host, port=self.args.port, settings=self.settings)

    def run(self) -> int:
        method = getattr(self, f"run_{self.args.command}")
        try:
            method()
        except (SkybriefError, ValueError) as e:
            logger.error(str(e))
            return 1
        return 0


def format_briefing(briefing: Briefing) -> str:
    """Human readable briefing."""
    summary = briefing.summary
    route = briefing.route
    lines = [
        f"Briefing {route.origin} -> {route.destination}"
        + (f" (alternates {', '.join(route.alternates)})" if route.alternates else "")
        + (f" FL{route.flight_level}" if route.flight_level else ""),
        f"{summary.worst_severity.emoji} {summary.worst_severity.value.upper()}: {summary.worst_severity.description}",
        "",
    ]
    for icao, entry in briefing.airports.items():
        lines.append(f"{entry.role.value.upper()} {icao}")
        if entry.metar:
            lines.append(f"  {entry.metar_verdict.emoji} {entry.metar.summary}")
        for kind, error in entry.errors.items():
            lines.append(f"  {kind}: unavailable ({error})")
        for notam in entry.notams:
            lines.append(f"  NOTAM [{notam.severity.value}] {notam.message}")
    if briefing.enroute:
        lines.append("")
        lines.append("ENROUTE")
        for point in briefing.enroute:
            station = point.station or "----"
            lines.append(f"  {point.index:2d} {station} {point.severity.emoji} {point.severity.value}")
    if summary.critical_alerts:
        lines.append("")
        lines.append("CRITICAL ALERTS")
        lines += [f"  {alert.icao}: {alert.message}" for alert in summary.critical_alerts]
    lines.append("")
    lines.append("RECOMMENDATIONS")
    lines += [f"  - {text}" for text in summary.recommendations]
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Aviation weather decoding and route briefings')
    parser.add_argument('command', help='Command to execute',
                        choices=['decode', 'weather', 'airport', 'search', 'brief', 'demo', 'enroute', 'serve'])
    parser.add_argument('items', help='Report text, ICAO codes or search text', nargs='*')
    parser.add_argument('-k', '--kind', help='Report kind (metar, taf, notams)')
    parser.add_argument('-l', '--flight-level', help='Requested flight level', type=int)
    parser.add_argument('-p', '--points', help='Enroute sample points (2-50)', type=int)
    parser.add_argument('--format', help='Output format', choices=['json', 'human'], default='human')
    parser.add_argument('--host', help='Host for serve', default='127.0.0.1')
    parser.add_argument('--port', help='Port for serve', type=int, default=8000)
    parser.add_argument('-v', '--verbose', help='Verbose output', action='store_true')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=settings.log_format)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    return Command(args, settings=settings).run()


if __name__ == '__main__':
    sys.exit(main())
