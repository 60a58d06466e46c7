import math

import numpy as np
import pytest

from road_router.domain.entities.geography import Point
from road_router.domain.errors import InvalidCoordinateError
from road_router.domain.network.metrics import GeographicMetric, PlanarMetric
from road_router.domain.network.spatial_index import SpatialIndex


def _brute_nearest(points, metric, q):
    return min(range(len(points)), key=lambda i: (metric.distance(q, points[i]), i))


@pytest.mark.parametrize(
    "metric, box",
    [
        (PlanarMetric(), (0.0, 0.0, 100.0, 100.0)),
        (GeographicMetric(), (-0.2, 51.4, 0.1, 51.6)),
    ],
)
def test_nearest_matches_brute_force(metric, box):
    rng = np.random.default_rng(7)
    x0, y0, x1, y1 = box
    pts = [Point(float(x), float(y)) for x, y in zip(rng.uniform(x0, x1, 300), rng.uniform(y0, y1, 300))]
    idx = SpatialIndex(pts, metric)
    for qx, qy in zip(rng.uniform(x0, x1, 50), rng.uniform(y0, y1, 50)):
        q = Point(float(qx), float(qy))
        i, d = idx.nearest_with_distance(q)
        assert i == _brute_nearest(pts, metric, q)
        assert d == pytest.approx(metric.distance(q, pts[i]))


def test_equidistant_candidates_pick_lowest_index():
    pts = [Point(2.0, 0.0), Point(0.0, 2.0), Point(-2.0, 0.0), Point(0.0, -2.0)]
    idx = SpatialIndex(pts, PlanarMetric())
    assert idx.nearest(Point(0.0, 0.0)) == 0


def test_empty_index_raises():
    idx = SpatialIndex([], PlanarMetric())
    assert len(idx) == 0
    with pytest.raises(InvalidCoordinateError):
        idx.nearest(Point(0.0, 0.0))


@pytest.mark.parametrize("q", [Point(math.nan, 0.0), Point(0.0, math.inf)])
def test_non_finite_query_raises(q):
    idx = SpatialIndex([Point(0.0, 0.0)], PlanarMetric())
    with pytest.raises(InvalidCoordinateError):
        idx.nearest(q)


def test_max_snap_distance_rejects_far_queries():
    idx = SpatialIndex([Point(0.0, 0.0), Point(10.0, 0.0)], PlanarMetric(), max_snap_distance=2.0)
    assert idx.nearest(Point(9.0, 1.0)) == 1
    with pytest.raises(InvalidCoordinateError):
        idx.nearest(Point(50.0, 50.0))


def test_single_point_index():
    idx = SpatialIndex([Point(3.0, 4.0)], PlanarMetric())
    assert idx.nearest_with_distance(Point(0.0, 0.0)) == (0, pytest.approx(5.0))
