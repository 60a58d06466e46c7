from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np

from road_router.domain.entities.geography import Point, Route


# ------------- Network --------------------
@runtime_checkable
class DistanceMetric(Protocol):
    """
    Responsibilities:
      • Measure edge lengths at build time and the A* heuristic at search time.
      • Embed positions into a space where Euclidean nearest == metric nearest.
    Must satisfy the triangle inequality so the heuristic stays consistent.
    """

    name: str
    units: str

    def distance(self, a: Point, b: Point) -> float: ...
    def embed(self, points: Sequence[Point]) -> np.ndarray: ...


@runtime_checkable
class NearestLocator(Protocol):
    def nearest(self, p: Point) -> int: ...
    def nearest_with_distance(self, p: Point) -> tuple[int, float]: ...


# ------------- Search --------------------
@runtime_checkable
class RoutePlanner(Protocol):
    """
    Responsibilities:
      • Snap free points to network nodes.
      • Compute the shortest drivable route and its length.
    """

    def route(self, a: Point, b: Point) -> Route: ...
    def distance(self, a: Point, b: Point) -> float: ...


# ------------- Collaborators --------------------
@runtime_checkable
class RouteRenderer(Protocol):
    """Draws the network and a highlighted route. Must not mutate either."""

    def render(self, network, route: Route) -> None: ...
