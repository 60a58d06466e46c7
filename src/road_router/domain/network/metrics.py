import math
from collections.abc import Sequence

import numpy as np

from road_router.app.protocols import DistanceMetric
from road_router.domain.entities.geography import Point

EARTH_RADIUS_M = 6_371_008.8


class PlanarMetric(DistanceMetric):
    name = "planar"
    units = "units"

    def distance(self, a: Point, b: Point) -> float:
        return math.hypot(b.x - a.x, b.y - a.y)

    def embed(self, points: Sequence[Point]) -> np.ndarray:
        return np.array([(p.x, p.y) for p in points], dtype=float).reshape(-1, 2)


class GeographicMetric(DistanceMetric):
    """Great-circle distance in metres; points are (lon, lat) in degrees."""

    name = "geographic"
    units = "meters"

    def __init__(self, radius_m: float = EARTH_RADIUS_M):
        self.radius_m = radius_m

    def distance(self, a: Point, b: Point) -> float:
        lat1, lat2 = math.radians(a.y), math.radians(b.y)
        dlat = lat2 - lat1
        dlon = math.radians(b.x - a.x)
        h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        return 2 * self.radius_m * math.asin(min(1.0, math.sqrt(h)))

    def embed(self, points: Sequence[Point]) -> np.ndarray:
        # unit-sphere vectors: chord length grows monotonically with arc length
        ll = np.radians(np.array([(p.x, p.y) for p in points], dtype=float).reshape(-1, 2))
        lon, lat = ll[:, 0], ll[:, 1]
        return np.column_stack((np.cos(lat) * np.cos(lon), np.cos(lat) * np.sin(lon), np.sin(lat)))
