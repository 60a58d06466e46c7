import math
from collections.abc import Sequence

import numpy as np
from scipy.spatial import KDTree

from road_router.app.protocols import DistanceMetric, NearestLocator
from road_router.domain.entities.geography import Point
from road_router.domain.errors import InvalidCoordinateError

_TIE_CANDIDATES = 8


class SpatialIndex(NearestLocator):
    """
    Nearest-node lookup over node positions, built once per network.

    Positions are embedded by the metric (raw x/y for planar, unit-sphere
    vectors for geographic) so a KD-tree's Euclidean nearest is also the
    metric nearest. Result indices are positions in the ``points`` sequence.
    """

    def __init__(
        self,
        points: Sequence[Point],
        metric: DistanceMetric,
        *,
        max_snap_distance: float | None = None,
    ):
        self.points = tuple(points)
        self.metric = metric
        self.max_snap_distance = max_snap_distance
        self._tree = KDTree(metric.embed(self.points)) if self.points else None

    def __len__(self) -> int:
        return len(self.points)

    def nearest(self, p: Point) -> int:
        return self.nearest_with_distance(p)[0]

    def nearest_with_distance(self, p: Point) -> tuple[int, float]:
        if self._tree is None:
            raise InvalidCoordinateError("network has no nodes to snap to")
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise InvalidCoordinateError(f"non-finite query point ({p.x}, {p.y})")

        k = min(_TIE_CANDIDATES, len(self.points))
        dd, ii = self._tree.query(self.metric.embed([p])[0], k=k)
        dd, ii = np.atleast_1d(dd), np.atleast_1d(ii)
        # equidistant candidates resolve to the lowest index
        best = int(min(i for d, i in zip(dd, ii) if d <= dd[0]))

        dist = self.metric.distance(p, self.points[best])
        if self.max_snap_distance is not None and dist > self.max_snap_distance:
            raise InvalidCoordinateError(
                f"({p.x}, {p.y}) is {dist:.3f} {self.metric.units} from the nearest node, "
                f"beyond max_snap_distance={self.max_snap_distance}"
            )
        return best, dist
