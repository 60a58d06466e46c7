# io/search_logging.py
import json
import logging
import sys

from road_router.domain.search.hooks import NoopHooks


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload)


def configure_logging(name="road_router", level="INFO", stream=None) -> logging.Logger:
    """Attach one JSON-lines handler to the package logger (idempotent)."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(stream or sys.stdout)
        h.setFormatter(JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class SearchLogging(NoopHooks):
    """
    Structured logs for the A* engine, one record per lifecycle step.
    Per-node expansions are only emitted in debug mode, every ``sample_every``.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 100,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or configure_logging(level=level).getChild("search")

    def _emit(self, level: str, msg: str, **extra):
        self.log.log(getattr(logging, level), msg, extra={"extra": {"run_id": self.run_id, **extra}})

    def search_start(self, *, start: int, goal: int, h0: float):
        self._emit("INFO", "search_start", start=start, goal=goal, h0=h0)

    def node_expanded(self, *, node: int, g: float, f: float, open_size: int, expanded: int):
        if self.debug and (expanded % self.sample_every) == 0:
            self._emit("DEBUG", "node_expanded", node=node, g=g, f=f, open_size=open_size, expanded=expanded)

    def search_end(self, *, found: bool, expanded: int, cost: float | None, wall_ms: float):
        self._emit("INFO", "search_end", found=found, expanded=expanded, cost=cost, wall_ms=wall_ms)

    def error(self, *, reason: str, **kw):
        self._emit("ERROR", "search_error", reason=reason, **kw)
