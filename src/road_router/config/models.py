from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from road_router.domain.network.builder import DEFAULT_DRIVABLE


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


class NetworkModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    metric: Literal["planar", "geographic"] = "geographic"
    drivable_highways: list[str] = Field(default_factory=lambda: sorted(DEFAULT_DRIVABLE))
    max_snap_distance: float | None = Field(default=None, gt=0)

    @field_validator("drivable_highways")
    @classmethod
    def _non_empty(cls, v: list[str]) -> list[str]:
        v = [s.strip() for s in v if s and s.strip()]
        if not v:
            raise ValueError("drivable_highways must name at least one highway value")
        return v


class SearchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    log_expansions: bool = False
    sample_every: int = Field(default=100, ge=1)


class RouterModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "road-router"
    run_id: str = "local"
    network: NetworkModel = NetworkModel()
    search: SearchModel = SearchModel()
    log: LogModel = LogModel()
