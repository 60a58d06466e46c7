"""Command-line front end: read an OSM file, route between two points, print the distance."""

import argparse
import sys

from road_router.app.build import build
from road_router.config.models import RouterModel
from road_router.domain.entities.geography import Point
from road_router.domain.errors import RoutingError
from road_router.io.inputs import read_map_file
from road_router.io.search_logging import configure_logging

EPILOG = "Example: road-router -f map.osm -r 10 10 90 90"


def _positive_float(value: str) -> float:
    try:
        v = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid float value: {value!r}") from None
    if not v > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return v


class _Parser(argparse.ArgumentParser):
    # usage errors (e.g. an option missing its values) exit 1, not argparse's 2
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = _Parser(
        prog="road-router",
        description="Shortest drivable route between two points of an OpenStreetMap extract.",
        epilog=EPILOG,
    )
    parser.add_argument("-f", "--file", default="map.osm", help="input map filename [default: map.osm]")
    parser.add_argument(
        "-r",
        "--route",
        nargs=4,
        type=float,
        metavar=("START_X", "START_Y", "END_X", "END_Y"),
        default=[10.0, 10.0, 90.0, 90.0],
        help="four floating point values start_x start_y end_x end_y [default: 10 10 90 90]",
    )
    parser.add_argument(
        "--frame",
        choices=("relative", "absolute"),
        default="relative",
        help="relative: percent of the map extent (x=lon, y=lat); absolute: map coordinates",
    )
    parser.add_argument("--metric", choices=("planar", "geographic"), default="geographic")
    parser.add_argument(
        "--max-snap",
        type=_positive_float,
        default=None,
        help="fail if a point is farther than this from every road node",
    )
    parser.add_argument(
        "--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR"), default="WARNING"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level, stream=sys.stderr)

    cfg = RouterModel.model_validate(
        {
            "network": {"metric": args.metric, "max_snap_distance": args.max_snap},
            "log": {"level": args.log_level},
        }
    )

    print(f"Reading OpenStreetMap data from the following file: {args.file}")
    try:
        app = build(cfg, read_map_file(args.file))
        sx, sy, ex, ey = args.route
        if args.frame == "relative":
            a, b = app.planner.relative_point(sx, sy), app.planner.relative_point(ex, ey)
        else:
            a, b = Point(sx, sy), Point(ex, ey)
        route = app.planner.route(a, b)
    except RoutingError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Distance: {route.total_length:.2f} {app.network.metric.units}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
