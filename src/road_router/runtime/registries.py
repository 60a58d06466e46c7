# runtime/registries.py
from collections.abc import Callable

from road_router.app.protocols import DistanceMetric
from road_router.config.models import NetworkModel
from road_router.domain.network.builder import RoadNetworkBuilder
from road_router.domain.network.metrics import GeographicMetric, PlanarMetric

MetricFactory = Callable[[], DistanceMetric]

_metric_registry: dict[str, MetricFactory] = {}


# ------------------- Distance metrics ---------------------------


def register_metric(kind: str):
    def deco(fn: MetricFactory):
        _metric_registry[kind] = fn
        return fn

    return deco


def make_metric(kind: str) -> DistanceMetric:
    try:
        return _metric_registry[kind]()
    except KeyError:
        raise ValueError(f"Unknown metric kind {kind!r}") from None


@register_metric("planar")
def _make_planar():
    return PlanarMetric()


@register_metric("geographic")
def _make_geographic():
    return GeographicMetric()


# ------------------- Network builder ---------------------------


def make_builder(cfg: NetworkModel) -> RoadNetworkBuilder:
    return RoadNetworkBuilder(
        make_metric(cfg.metric),
        drivable=cfg.drivable_highways,
        max_snap_distance=cfg.max_snap_distance,
    )
