# domain/search/astar.py
import heapq
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from road_router.domain.entities.geography import Path
from road_router.domain.errors import InvalidCoordinateError, NoPathFoundError, SearchCancelledError
from road_router.domain.network.road_network import RoadNetwork
from road_router.domain.search.hooks import NoopHooks, SearchHooks


class NodeStatus(Enum):
    UNVISITED = 0
    OPEN = 1
    CLOSED = 2


@dataclass
class SearchState:
    """
    Everything one search mutates, keyed by node index.

    Lives for a single find_path call; the shared RoadNetwork is never touched.
    Nodes absent from ``status`` are UNVISITED.
    """

    g: dict[int, float] = field(default_factory=dict)
    h: dict[int, float] = field(default_factory=dict)
    f: dict[int, float] = field(default_factory=dict)
    parent: dict[int, int] = field(default_factory=dict)
    status: dict[int, NodeStatus] = field(default_factory=dict)
    # (f, h, seq, node): smaller h breaks f ties, then insertion order
    heap: list[tuple[float, float, int, int]] = field(default_factory=list)
    seq: int = 0
    expanded: int = 0

    def state_of(self, i: int) -> NodeStatus:
        return self.status.get(i, NodeStatus.UNVISITED)

    def push(self, i: int, g: float, h: float, parent: int | None = None):
        self.g[i], self.h[i], self.f[i] = g, h, g + h
        if parent is not None:
            self.parent[i] = parent
        self.status[i] = NodeStatus.OPEN
        self.seq += 1
        heapq.heappush(self.heap, (g + h, h, self.seq, i))

    def pop(self) -> int | None:
        while self.heap:
            f, _, _, i = heapq.heappop(self.heap)
            # lazy decrease-key: drop entries that were superseded or already closed
            if self.status[i] is NodeStatus.CLOSED or f != self.f[i]:
                continue
            self.status[i] = NodeStatus.CLOSED
            return i
        return None

    def open_size(self) -> int:
        return len(self.heap)

    def reconstruct(self, goal: int) -> tuple[int, ...]:
        nodes = [goal]
        while nodes[-1] in self.parent:
            nodes.append(self.parent[nodes[-1]])
        nodes.reverse()
        return tuple(nodes)


def find_path(
    network: RoadNetwork,
    start: int,
    goal: int,
    *,
    hooks: SearchHooks | None = None,
    should_cancel: Callable[[], bool] | None = None,
) -> Path:
    """
    A* from ``start`` to ``goal`` (node indices).

    The heuristic is the network metric's straight-line distance, which never
    overestimates road distance, so the first time the goal is closed its
    ``g`` is the shortest path length.
    """
    hooks = hooks or NoopHooks()
    for i in (start, goal):
        if not network.has_node(i):
            hooks.error(reason="unknown_node", node=i)
            raise InvalidCoordinateError(f"node index {i} is not in the network")

    t0 = time.perf_counter()
    st = SearchState()
    h0 = network.distance(start, goal)
    st.push(start, 0.0, h0)
    hooks.search_start(start=start, goal=goal, h0=h0)

    while (cur := st.pop()) is not None:
        if should_cancel is not None and should_cancel():
            hooks.error(reason="cancelled", expanded=st.expanded)
            raise SearchCancelledError(st.expanded)

        st.expanded += 1
        g_cur = st.g[cur]
        hooks.node_expanded(
            node=cur, g=g_cur, f=st.f[cur], open_size=st.open_size(), expanded=st.expanded
        )

        if cur == goal:
            path = Path(st.reconstruct(goal), g_cur)
            hooks.search_end(
                found=True,
                expanded=st.expanded,
                cost=g_cur,
                wall_ms=(time.perf_counter() - t0) * 1000,
            )
            return path

        for e in network.neighbors(cur):
            nb = e.target
            if st.state_of(nb) is NodeStatus.CLOSED:
                continue
            tentative = g_cur + e.length
            if st.state_of(nb) is NodeStatus.UNVISITED or tentative < st.g[nb]:
                st.push(nb, tentative, network.distance(nb, goal), parent=cur)

    hooks.search_end(
        found=False, expanded=st.expanded, cost=None, wall_ms=(time.perf_counter() - t0) * 1000
    )
    raise NoPathFoundError(start, goal, st.expanded)
