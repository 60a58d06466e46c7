from dataclasses import dataclass, field
from enum import Enum


# Core geometry types used by the network and the planner
@dataclass(frozen=True)
class Point:
    x: float  # lon for OSM input, or planar x
    y: float  # lat for OSM input, or planar y


class RoadCategory(Enum):
    MOTORWAY = "motorway"
    TRUNK = "trunk"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    UNCLASSIFIED = "unclassified"
    RESIDENTIAL = "residential"
    LIVING_STREET = "living_street"
    SERVICE = "service"
    ROAD = "road"

    @classmethod
    def from_highway(cls, value: str) -> "RoadCategory":
        # motorway_link -> motorway, etc.
        base = value.removesuffix("_link")
        try:
            return cls(base)
        except ValueError:
            return cls.ROAD


class Direction(Enum):
    BOTH = "both"
    FORWARD = "forward"  # along the way's node order only
    BACKWARD = "backward"  # against the way's node order only


@dataclass(frozen=True)
class Edge:
    target: int
    length: float
    category: RoadCategory


@dataclass(frozen=True)
class Node:
    index: int
    osm_id: int
    position: Point
    edges: tuple[Edge, ...] = ()


@dataclass(frozen=True)
class RoadSegment:
    """A way as read from the map; only lives for the duration of a build."""

    osm_id: int
    refs: tuple[int, ...]
    category: RoadCategory
    direction: Direction = Direction.BOTH


@dataclass(frozen=True)
class Path:
    nodes: tuple[int, ...]
    total_length: float


@dataclass(frozen=True)
class Segment:
    start: Point
    end: Point
    length: float
    u: int
    v: int


@dataclass(frozen=True)
class Route:
    path: Path
    segments: tuple[Segment, ...] = field(default_factory=tuple)
    points: tuple[Point, ...] = field(default_factory=tuple)

    @property
    def total_length(self) -> float:
        return self.path.total_length
