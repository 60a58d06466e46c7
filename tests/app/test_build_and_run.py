# tests/app/test_build_and_run.py
import json
import logging

import pytest
from pydantic import ValidationError

from road_router.app.build import build
from road_router.app.protocols import RoutePlanner, RouteRenderer
from road_router.config.models import RouterModel
from road_router.domain.entities.geography import Point
from road_router.domain.errors import InvalidCoordinateError, NoPathFoundError
from road_router.io.search_logging import JsonFormatter, SearchLogging
from road_router.runtime.registries import make_metric

PLANAR = {"name": "test", "run_id": "t-1", "network": {"metric": "planar"}}


def test_build_and_route_square(square_osm):
    app = build(PLANAR, square_osm, use_logging=False)
    assert isinstance(app.planner, RoutePlanner)

    route = app.planner.route(Point(0.0, 0.0), Point(10.0, 10.0))
    assert route.total_length == pytest.approx(20.0)
    assert len(route.points) == 3
    assert route.points[0] == Point(0.0, 0.0) and route.points[-1] == Point(10.0, 10.0)
    assert [s.length for s in route.segments] == pytest.approx([10.0, 10.0])
    # segments chain end-to-start
    assert route.segments[0].end == route.segments[1].start


def test_off_network_points_snap_to_nearest_nodes(square_osm):
    app = build(PLANAR, square_osm, use_logging=False)
    assert app.planner.distance(Point(-1.0, -2.0), Point(11.0, 0.5)) == pytest.approx(10.0)


def test_relative_points_use_map_extent(square_osm):
    app = build(PLANAR, square_osm, use_logging=False)
    assert app.planner.relative_point(10, 90) == Point(1.0, 9.0)
    a, b = app.planner.relative_point(10, 10), app.planner.relative_point(90, 90)
    assert app.planner.distance(a, b) == pytest.approx(20.0)


def test_max_snap_distance_from_config(square_osm):
    cfg = {**PLANAR, "network": {"metric": "planar", "max_snap_distance": 1.5}}
    app = build(cfg, square_osm, use_logging=False)
    with pytest.raises(InvalidCoordinateError):
        app.planner.route(Point(50.0, 50.0), Point(0.0, 0.0))


def test_disconnected_route_surfaces_no_path(make_osm):
    nodes = {1: (0, 0), 2: (1, 0), 3: (5, 5), 4: (6, 5)}
    ways = {10: ([1, 2], {"highway": "residential"}), 11: ([3, 4], {"highway": "residential"})}
    app = build(PLANAR, make_osm(nodes, ways), use_logging=False)
    with pytest.raises(NoPathFoundError):
        app.planner.route(Point(0.0, 0.0), Point(6.0, 5.0))


# ---------- Config


def test_config_defaults():
    m = RouterModel.model_validate({})
    assert m.network.metric == "geographic"
    assert "residential" in m.network.drivable_highways
    assert "footway" not in m.network.drivable_highways
    assert m.network.max_snap_distance is None


@pytest.mark.parametrize(
    "bad",
    [
        {"unknown": 1},
        {"network": {"metric": "manhattan"}},
        {"network": {"max_snap_distance": 0}},
        {"network": {"drivable_highways": []}},
        {"search": {"sample_every": 0}},
        {"log": {"level": "TRACE"}},
    ],
)
def test_config_rejects_invalid(bad):
    with pytest.raises(ValidationError):
        RouterModel.model_validate(bad)


def test_unknown_metric_kind():
    with pytest.raises(ValueError):
        make_metric("manhattan")


# ---------- Logging


def test_search_logging_emits_lifecycle(square_osm, caplog):
    logger = logging.getLogger("road_router.test_search")
    hooks = SearchLogging(run_id="t-9", debug=True, sample_every=1, logger=logger)
    app = build(PLANAR, square_osm, use_logging=False)
    app.planner.hooks = hooks

    with caplog.at_level(logging.DEBUG, logger="road_router.test_search"):
        app.planner.route(Point(0.0, 0.0), Point(10.0, 10.0))

    msgs = [r.getMessage() for r in caplog.records if r.name == "road_router.test_search"]
    assert msgs[0] == "search_start" and msgs[-1] == "search_end"
    assert "node_expanded" in msgs

    end = JsonFormatter().format(caplog.records[-1])
    payload = json.loads(end)
    assert payload["msg"] == "search_end"
    assert payload["run_id"] == "t-9"
    assert payload["found"] is True
    assert payload["cost"] == pytest.approx(20.0)


def test_builder_logs_summary(square_osm, caplog):
    with caplog.at_level(logging.INFO, logger="road_router.network"):
        build(PLANAR, square_osm, use_logging=False)
    rec = next(r for r in caplog.records if r.getMessage() == "network_built")
    assert rec.extra["nodes"] == 4 and rec.extra["edges"] == 8


# ---------- Renderer collaborator


class _RecordingRenderer:
    def __init__(self):
        self.calls = []

    def render(self, network, route):
        self.calls.append((len(network), network.edge_count, route.points))


def test_renderer_receives_network_and_route(square_osm):
    app = build(PLANAR, square_osm, use_logging=False)
    route = app.planner.route(Point(0.0, 0.0), Point(10.0, 10.0))
    renderer = _RecordingRenderer()
    assert isinstance(renderer, RouteRenderer)

    renderer.render(app.network, route)
    assert renderer.calls == [(4, 8, route.points)]
    # the network is still usable for further queries afterwards
    assert app.planner.route(Point(0.0, 0.0), Point(10.0, 10.0)) == route
