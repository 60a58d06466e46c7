# road_router/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from road_router.app.planner import NetworkRoutePlanner
from road_router.config.models import RouterModel
from road_router.domain.network.road_network import RoadNetwork
from road_router.domain.search.hooks import NoopHooks, SearchHooks
from road_router.io.search_logging import SearchLogging, configure_logging  # JSON logs
from road_router.runtime.registries import make_builder


@dataclass
class App:
    config: RouterModel
    network: RoadNetwork
    planner: NetworkRoutePlanner
    hooks: SearchHooks


def build(cfg: RouterModel | Mapping, raw: bytes, *, use_logging: bool = True) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, RouterModel) else RouterModel.model_validate(cfg)

    # 1) Logging (builder logs through the same package logger)
    if use_logging:
        log = configure_logging(level=model.log.level)
        hooks = SearchLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug or model.search.log_expansions,
            sample_every=model.search.sample_every,
            logger=log.getChild("search"),
        )
    else:
        hooks = NoopHooks()

    # 2) Network
    network = make_builder(model.network).build(raw)

    # 3) Planner
    planner = NetworkRoutePlanner(network, hooks=hooks)
    return App(model, network, planner, hooks)
