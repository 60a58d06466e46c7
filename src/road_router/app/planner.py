from collections.abc import Callable

from road_router.app.protocols import RoutePlanner
from road_router.domain.entities.geography import Point, Route, Segment
from road_router.domain.network.road_network import RoadNetwork
from road_router.domain.search.astar import find_path
from road_router.domain.search.hooks import SearchHooks


class NetworkRoutePlanner(RoutePlanner):
    def __init__(self, network: RoadNetwork, hooks: SearchHooks | None = None):
        self.G, self.hooks = network, hooks

    def snap(self, p: Point) -> int:
        return self.G.nearest_node(p)

    def route(self, a: Point, b: Point, *, should_cancel: Callable[[], bool] | None = None) -> Route:
        na, nb = self.snap(a), self.snap(b)
        path = find_path(self.G, na, nb, hooks=self.hooks, should_cancel=should_cancel)
        segs = tuple(
            Segment(self.G.node_point(u), self.G.node_point(v), e.length, u, v)
            for u, v, e in self.G.iter_edges(path.nodes)
        )
        points = tuple(self.G.node_point(i) for i in path.nodes)
        return Route(path, segs, points)

    def distance(self, a: Point, b: Point) -> float:
        return self.route(a, b).total_length

    def relative_point(self, fx_pct: float, fy_pct: float) -> Point:
        """Map percentages (0-100) of the network's bounding box to a coordinate."""
        return self.G.bounds.at_fraction(fx_pct / 100.0, fy_pct / 100.0)
