# domain/search/hooks.py
from typing import Protocol


class SearchHooks(Protocol):
    def search_start(self, *, start: int, goal: int, h0: float): ...
    def node_expanded(self, *, node: int, g: float, f: float, open_size: int, expanded: int): ...
    def search_end(self, *, found: bool, expanded: int, cost: float | None, wall_ms: float): ...
    def error(self, *, reason: str, **kw): ...


class NoopHooks:
    def search_start(self, **_):
        pass

    def node_expanded(self, **_):
        pass

    def search_end(self, **_):
        pass

    def error(self, **_):
        pass
