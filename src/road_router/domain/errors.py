class RoutingError(Exception):
    """Base class for every failure surfaced by the routing core."""


class ParseError(RoutingError):
    """The raw map buffer could not be read at all."""


class EmptyNetworkError(RoutingError):
    """No drivable edge survived filtering."""


class InvalidCoordinateError(RoutingError):
    """A query point (or node index) cannot be located in the network."""


class NoPathFoundError(RoutingError):
    def __init__(self, start: int, goal: int, expanded: int = 0):
        super().__init__(f"no path from node {start} to node {goal} ({expanded} nodes expanded)")
        self.start, self.goal, self.expanded = start, goal, expanded


class SearchCancelledError(RoutingError):
    def __init__(self, expanded: int):
        super().__init__(f"search cancelled after {expanded} expansions")
        self.expanded = expanded
