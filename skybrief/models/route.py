"""Route plan requested for a briefing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple

from skybrief.errors import SynthesisError
from skybrief.models.airport import is_valid_icao, normalize_icao


class AirportRole(Enum):
    """Role of an airport within a route."""

    ORIGIN = "origin"
    DESTINATION = "destination"
    ALTERNATE = "alternate"


@dataclass
class RoutePlan:
    """
    Origin, destination and alternates of a planned flight.

    Attributes:
        origin: Departure ICAO
        destination: Arrival ICAO
        alternates: Alternate ICAOs, in order
        flight_level: Requested cruise flight level (e.g. 350)
        route_string: Free text route label
    """

    origin: str
    destination: str
    alternates: List[str] = field(default_factory=list)
    flight_level: Optional[int] = None
    route_string: Optional[str] = None

    def validate(self) -> None:
        """
        Check every airport code before anything is fetched.

        Raises:
            SynthesisError: INVALID_AIRPORT for the first code that is not
                exactly 4 alphanumeric characters
        """
        for code in [self.origin, self.destination] + list(self.alternates):
            if not is_valid_icao(code):
                raise SynthesisError.invalid_airport(
                    str(code), f"Invalid ICAO code {code!r}: must be 4 alphanumeric characters"
                )

    def airports(self) -> List[Tuple[str, AirportRole]]:
        """
        Every distinct airport with its role, in route order.

        An airport listed twice keeps its first role (origin before
        destination before alternate).
        """
        roles = [(self.origin, AirportRole.ORIGIN), (self.destination, AirportRole.DESTINATION)]
        roles += [(code, AirportRole.ALTERNATE) for code in self.alternates]

        seen = set()
        result = []
        for code, role in roles:
            if code in seen:
                continue
            seen.add(code)
            result.append((code, role))
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            'origin': self.origin,
            'destination': self.destination,
            'alternates': list(self.alternates),
            'flight_level': self.flight_level,
            'route_string': self.route_string,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoutePlan':
        """
        Build a plan from a JSON body. Codes are stripped and uppercased but
        not validated; call ``validate()`` for that.
        """
        alternates = data.get('alternates') or []
        if isinstance(alternates, str):
            alternates = [code for code in alternates.replace(',', ' ').split() if code]
        flight_level = data.get('flight_level', data.get('flightLevel'))
        return cls(
            origin=normalize_icao(data.get('origin')),
            destination=normalize_icao(data.get('destination')),
            alternates=[normalize_icao(code) for code in alternates],
            flight_level=int(flight_level) if flight_level not in (None, "") else None,
            route_string=data.get('route_string', data.get('route')),
        )
