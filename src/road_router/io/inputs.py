from pathlib import Path

from road_router.domain.errors import ParseError


def read_map_file(path: str | Path) -> bytes:
    """Read a map file whole. Missing, unreadable or empty files raise ParseError."""
    p = Path(path).expanduser()
    try:
        data = p.read_bytes()
    except OSError as exc:
        raise ParseError(f"failed to read {p}: {exc.strerror or exc}") from exc
    if not data:
        raise ParseError(f"{p} is empty")
    return data
