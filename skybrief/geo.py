"""Great-circle sampling between two coordinates."""

import math
from typing import List

from skybrief.models.navpoint import NavPoint

# Below this angle (radians, about 0.2 m) two points are treated as identical
_IDENTICAL_EPSILON = 1e-10


class GeoSampler:
    """
    Evenly spaced interior points along a great-circle arc.

    Points are produced by spherical linear interpolation of the Cartesian
    unit vectors of the two endpoints, at fractions ``i / (n + 1)`` for
    ``i = 1..n``. The endpoints themselves are never included.
    """

    @staticmethod
    def sample(start: NavPoint, end: NavPoint, n: int) -> List[NavPoint]:
        """
        Sample ``n`` interior points between ``start`` and ``end``.

        Args:
            start: Departure coordinate
            end: Arrival coordinate
            n: Number of interior points (callers clamp this to [2, 50])

        Returns:
            Points ordered from ``start`` towards ``end``; ``[start]`` when
            both coordinates are identical

        Raises:
            ValueError: If the points are antipodal (the arc is undefined)
        """
        d = start.angular_distance(end)
        if d < _IDENTICAL_EPSILON:
            return [start]
        if n <= 0:
            return []

        sin_d = math.sin(d)
        if abs(sin_d) < _IDENTICAL_EPSILON:
            raise ValueError(f"Great circle undefined between antipodal points {start} and {end}")

        x1, y1, z1 = _to_cartesian(start)
        x2, y2, z2 = _to_cartesian(end)

        points = []
        for i in range(1, n + 1):
            f = i / (n + 1)
            a = math.sin((1 - f) * d) / sin_d
            b = math.sin(f * d) / sin_d
            x = a * x1 + b * x2
            y = a * y1 + b * y2
            z = a * z1 + b * z2
            lat = math.degrees(math.atan2(z, math.sqrt(x * x + y * y)))
            lon = math.degrees(math.atan2(y, x))
            points.append(NavPoint(latitude=lat, longitude=lon))
        return points


def _to_cartesian(point: NavPoint):
    lat = math.radians(point.latitude)
    lon = math.radians(point.longitude)
    return (
        math.cos(lat) * math.cos(lon),
        math.cos(lat) * math.sin(lon),
        math.sin(lat),
    )
