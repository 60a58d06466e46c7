import io
import logging
import math
from collections.abc import Iterable, Mapping

from lxml import etree

from road_router.app.protocols import DistanceMetric
from road_router.domain.entities.geography import (
    Direction,
    Edge,
    Node,
    Point,
    RoadCategory,
    RoadSegment,
)
from road_router.domain.errors import EmptyNetworkError, ParseError
from road_router.domain.network.road_network import RoadNetwork

log = logging.getLogger("road_router.network")

DEFAULT_DRIVABLE = frozenset(
    {
        "motorway",
        "motorway_link",
        "trunk",
        "trunk_link",
        "primary",
        "primary_link",
        "secondary",
        "secondary_link",
        "tertiary",
        "tertiary_link",
        "unclassified",
        "residential",
        "living_street",
        "service",
        "road",
    }
)

_ONEWAY_FORWARD = {"yes", "true", "1"}
_ONEWAY_BACKWARD = {"-1", "reverse"}
_ONEWAY_NONE = {"no", "false", "0"}


def classify_way(
    osm_id: int, refs: Iterable[int | None], tags: Mapping[str, str], drivable=DEFAULT_DRIVABLE
) -> RoadSegment | None:
    """Resolve raw tags into a RoadSegment, or None for anything not drivable."""
    highway = tags.get("highway")
    if highway not in drivable or tags.get("area") == "yes":
        return None

    oneway = tags.get("oneway", "").strip().lower()
    if oneway in _ONEWAY_FORWARD:
        direction = Direction.FORWARD
    elif oneway in _ONEWAY_BACKWARD:
        direction = Direction.BACKWARD
    elif oneway in _ONEWAY_NONE:
        direction = Direction.BOTH
    elif tags.get("junction") == "roundabout" or highway == "motorway":
        # implied one-way when untagged
        direction = Direction.FORWARD
    else:
        direction = Direction.BOTH

    return RoadSegment(
        osm_id=osm_id,
        refs=tuple(refs),
        category=RoadCategory.from_highway(highway),
        direction=direction,
    )


def _skip(kind: str, elem, reason: str):
    log.debug(
        "record_skipped",
        extra={
            "extra": {
                "kind": kind,
                "osm_id": elem.get("id"),
                "reason": reason,
                "line": elem.sourceline,
            }
        },
    )


def _read_node(elem) -> tuple[int, Point]:
    osm_id = int(elem.get("id"))
    lat, lon = float(elem.get("lat")), float(elem.get("lon"))
    if not (math.isfinite(lat) and math.isfinite(lon) and -90 <= lat <= 90 and -180 <= lon <= 180):
        raise ValueError(f"location out of range: lat={lat} lon={lon}")
    return osm_id, Point(lon, lat)


def _read_ref(nd) -> int | None:
    # an unreadable ref behaves like an unknown node: the way splits there
    try:
        return int(nd.get("ref"))
    except (TypeError, ValueError):
        return None


def _read_way(elem) -> tuple[int, list[int | None], dict[str, str]]:
    osm_id = int(elem.get("id"))
    refs = [_read_ref(nd) for nd in elem.iterfind("nd")]
    tags = {t.get("k"): t.get("v", "") for t in elem.iterfind("tag") if t.get("k") is not None}
    return osm_id, refs, tags


class OSMRecords:
    """
    Node positions and raw ways read from an OSM XML buffer, record by record.

    A record that fails to convert is skipped and counted; a truncated or
    partly broken document keeps everything read before the damage.
    """

    def __init__(self):
        self.positions: dict[int, Point] = {}
        self.ways: list[tuple[int, list[int | None], dict[str, str]]] = []
        self.skipped_nodes = 0
        self.skipped_ways = 0
        self.root: str | None = None

    @classmethod
    def parse(cls, raw: bytes) -> "OSMRecords":
        recs = cls()
        context = etree.iterparse(io.BytesIO(raw), events=("start", "end"), recover=True, huge_tree=True)
        try:
            for event, elem in context:
                if event == "start":
                    if recs.root is None:
                        recs.root = elem.tag
                    continue
                if elem.tag == "node":
                    recs._add_node(elem)
                elif elem.tag == "way":
                    recs._add_way(elem)
                else:
                    continue
                elem.clear()
        except etree.LxmlError as exc:
            if recs.root is None:
                raise ParseError(f"could not read map data: {exc}") from exc
            log.warning("map_truncated", extra={"extra": {"error": str(exc)}})

        if recs.root is None:
            raise ParseError("could not read map data: no XML elements found")
        if recs.root != "osm":
            raise ParseError(f"could not read map data: root element is <{recs.root}>, not <osm>")
        return recs

    def _add_node(self, elem):
        try:
            osm_id, p = _read_node(elem)
        except (TypeError, ValueError) as exc:
            self.skipped_nodes += 1
            _skip("node", elem, str(exc) or "missing attribute")
            return
        self.positions[osm_id] = p

    def _add_way(self, elem):
        try:
            self.ways.append(_read_way(elem))
        except (TypeError, ValueError) as exc:
            self.skipped_ways += 1
            _skip("way", elem, str(exc) or "missing attribute")


class RoadNetworkBuilder:
    def __init__(
        self,
        metric: DistanceMetric,
        *,
        drivable: Iterable[str] = DEFAULT_DRIVABLE,
        max_snap_distance: float | None = None,
    ):
        self.metric = metric
        self.drivable = frozenset(drivable)
        self.max_snap_distance = max_snap_distance

    def build(self, raw: bytes) -> RoadNetwork:
        """Parse OSM XML bytes into a RoadNetwork."""
        if not raw or not bytes(raw).strip():
            raise ParseError("map buffer is empty")

        recs = OSMRecords.parse(bytes(raw))

        segments = []
        for osm_id, refs, tags in recs.ways:
            seg = classify_way(osm_id, refs, tags, self.drivable)
            if seg is not None:
                segments.append(seg)

        network = self.assemble(recs.positions, segments)
        log.info(
            "network_built",
            extra={
                "extra": {
                    "nodes": len(network),
                    "edges": network.edge_count,
                    "ways_read": len(recs.ways),
                    "ways_kept": len(segments),
                    "nodes_skipped": recs.skipped_nodes,
                    "ways_skipped": recs.skipped_ways,
                    "metric": self.metric.name,
                }
            },
        )
        return network

    def assemble(self, positions: Mapping[int, Point], segments: Iterable[RoadSegment]) -> RoadNetwork:
        """Turn node positions plus classified segments into a RoadNetwork."""
        adjacency: dict[int, dict[int, tuple[float, RoadCategory]]] = {}

        def link(a: int, b: int, category: RoadCategory):
            out = adjacency.setdefault(a, {})
            adjacency.setdefault(b, {})
            # parallel ways between one pair collapse into one edge; the first way read sets its category
            if b not in out:
                out[b] = (self.metric.distance(positions[a], positions[b]), category)

        for seg in segments:
            dropped = 0
            for a, b in zip(seg.refs, seg.refs[1:]):
                if a not in positions or b not in positions:
                    dropped += 1
                    continue
                if a == b:
                    continue
                if seg.direction is not Direction.BACKWARD:
                    link(a, b, seg.category)
                if seg.direction is not Direction.FORWARD:
                    link(b, a, seg.category)
            if dropped:
                log.debug(
                    "record_skipped",
                    extra={
                        "extra": {
                            "kind": "way_pair",
                            "osm_id": seg.osm_id,
                            "reason": "unknown node ref",
                            "count": dropped,
                        }
                    },
                )

        if not adjacency:
            raise EmptyNetworkError("no drivable road edges found in map data")

        order = sorted(adjacency)
        index = {osm_id: i for i, osm_id in enumerate(order)}
        nodes = [
            Node(
                index=i,
                osm_id=osm_id,
                position=positions[osm_id],
                edges=tuple(
                    Edge(index[target], length, category)
                    for target, (length, category) in adjacency[osm_id].items()
                ),
            )
            for i, osm_id in enumerate(order)
        ]
        return RoadNetwork(nodes, self.metric, max_snap_distance=self.max_snap_distance)
