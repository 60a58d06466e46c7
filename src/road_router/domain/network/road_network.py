from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from road_router.app.protocols import DistanceMetric
from road_router.domain.entities.geography import Edge, Node, Point
from road_router.domain.errors import InvalidCoordinateError
from road_router.domain.network.spatial_index import SpatialIndex


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def at_fraction(self, fx: float, fy: float) -> Point:
        return Point(
            self.min_x + fx * (self.max_x - self.min_x),
            self.min_y + fy * (self.max_y - self.min_y),
        )


class RoadNetwork:
    """
    Read-only road graph: a flat node table addressed by integer index.

    Nothing here changes after construction, so one network can serve any
    number of searches, concurrent ones included.
    """

    def __init__(
        self,
        nodes: Sequence[Node],
        metric: DistanceMetric,
        *,
        max_snap_distance: float | None = None,
    ):
        self.nodes: tuple[Node, ...] = tuple(nodes)
        self.metric = metric
        self._by_osm_id = {n.osm_id: n.index for n in self.nodes}
        self.index = SpatialIndex(
            [n.position for n in self.nodes], metric, max_snap_distance=max_snap_distance
        )
        if self.nodes:
            xs = [n.position.x for n in self.nodes]
            ys = [n.position.y for n in self.nodes]
            self.bounds = Bounds(min(xs), min(ys), max(xs), max(ys))
        else:
            self.bounds = Bounds(0.0, 0.0, 0.0, 0.0)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(n.edges) for n in self.nodes)

    def has_node(self, i: int) -> bool:
        return 0 <= i < len(self.nodes)

    def node(self, i: int) -> Node:
        if not self.has_node(i):
            raise InvalidCoordinateError(f"node index {i} is not in the network")
        return self.nodes[i]

    def node_point(self, i: int) -> Point:
        return self.node(i).position

    def index_of(self, osm_id: int) -> int:
        try:
            return self._by_osm_id[osm_id]
        except KeyError:
            raise InvalidCoordinateError(f"OSM node {osm_id} is not in the network") from None

    def neighbors(self, i: int) -> tuple[Edge, ...]:
        return self.nodes[i].edges

    def edge(self, u: int, v: int) -> Edge | None:
        for e in self.nodes[u].edges:
            if e.target == v:
                return e
        return None

    def distance(self, u: int, v: int) -> float:
        return self.metric.distance(self.nodes[u].position, self.nodes[v].position)

    def nearest_node(self, p: Point) -> int:
        return self.index.nearest(p)

    def iter_edges(self, nodes: Sequence[int]) -> Iterator[tuple[int, int, Edge]]:
        """Yield (u, v, edge) for each consecutive pair of a node sequence."""
        for u, v in zip(nodes, nodes[1:]):
            e = self.edge(u, v)
            if e is None:
                raise LookupError(f"no edge {u} -> {v}")
            yield u, v, e
