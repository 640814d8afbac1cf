import math
from typing import Optional, Tuple
from dataclasses import dataclass

# Earth's radius in nautical miles
EARTH_RADIUS_NM = 3440


@dataclass
class NavPoint:
    """
    A geographic point with coordinates and optional name.

    All coordinates are stored in decimal degrees:
    - Latitude: -90 to +90 degrees (negative for South, positive for North)
    - Longitude: -180 to +180 degrees (negative for West, positive for East)

    All distance calculations use nautical miles (1 nautical mile = 1.852 kilometers)
    """

    latitude: float  # Decimal degrees, -90 to +90
    longitude: float  # Decimal degrees, -180 to +180
    name: Optional[str] = None  # Optional identifier for the point

    def __post_init__(self):
        """Validate coordinates after initialization."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be between -90 and 90 degrees, got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be between -180 and 180 degrees, got {self.longitude}")

    def angular_distance(self, other: 'NavPoint') -> float:
        """
        Central angle to another point in radians (haversine formula).

        Args:
            other: The target NavPoint

        Returns:
            Angle in radians between 0 and pi
        """
        lat1 = math.radians(self.latitude)
        lon1 = math.radians(self.longitude)
        lat2 = math.radians(other.latitude)
        lon2 = math.radians(other.longitude)

        dlat = lat2 - lat1
        dlon = lon2 - lon1

        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        a = min(1.0, max(0.0, a))
        return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    def haversine_distance(self, other: 'NavPoint') -> Tuple[float, float]:
        """
        Calculate the bearing and distance to another NavPoint using the Haversine formula.

        Args:
            other: The target NavPoint

        Returns:
            Tuple of (bearing in degrees, distance in nautical miles)
            - bearing: 0-360 degrees (0/360 is North, 90 is East, etc.)
            - distance: Distance in nautical miles
        """
        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        dlon = math.radians(other.longitude - self.longitude)

        distance = EARTH_RADIUS_NM * self.angular_distance(other)

        y = math.sin(dlon) * math.cos(lat2)
        x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
        bearing = math.degrees(math.atan2(y, x))
        bearing = (bearing + 360) % 360  # Normalize to [0, 360)

        return bearing, distance

    def distance_to(self, other: 'NavPoint') -> float:
        """Great-circle distance in nautical miles."""
        return EARTH_RADIUS_NM * self.angular_distance(other)

    def to_dict(self) -> dict:
        return {
            'latitude': round(self.latitude, 6),
            'longitude': round(self.longitude, 6),
            'name': self.name,
        }

    def __repr__(self) -> str:
        name = f"{self.name} " if self.name else ""
        return f"NavPoint({name}{self.latitude:.4f}, {self.longitude:.4f})"
