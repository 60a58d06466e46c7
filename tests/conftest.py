import pytest


def _osm_xml(nodes, ways) -> bytes:
    """
    nodes: {id: (lon, lat) | None}  (None => node without a location)
    ways:  {id: ([refs...], {k: v})}
    """
    out = ['<?xml version="1.0" encoding="UTF-8"?>', '<osm version="0.6" generator="tests">']
    for nid, pos in nodes.items():
        if pos is None:
            out.append(f'  <node id="{nid}" version="1"/>')
        else:
            lon, lat = pos
            out.append(f'  <node id="{nid}" version="1" lat="{lat}" lon="{lon}"/>')
    for wid, (refs, tags) in ways.items():
        out.append(f'  <way id="{wid}" version="1">')
        out.extend(f'    <nd ref="{r}"/>' for r in refs)
        out.extend(f'    <tag k="{k}" v="{v}"/>' for k, v in tags.items())
        out.append("  </way>")
    out.append("</osm>")
    return "\n".join(out).encode("utf-8")


@pytest.fixture
def make_osm():
    return _osm_xml


@pytest.fixture
def square_osm(make_osm):
    # (0,0) (10,0) (10,10) (0,10) joined into a ring of residential roads
    nodes = {1: (0, 0), 2: (10, 0), 3: (10, 10), 4: (0, 10)}
    ways = {
        100: ([1, 2], {"highway": "residential"}),
        101: ([2, 3], {"highway": "residential"}),
        102: ([3, 4], {"highway": "residential"}),
        103: ([4, 1], {"highway": "residential"}),
    }
    return make_osm(nodes, ways)
