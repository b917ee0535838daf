# Purpose: Pure functions mapping a path string to and from a structured Route.
# Paths follow the grammar "#section[/subsection][/id]"; the leading "#" is optional.
# No I/O, no logging side effects beyond debug traces.

from dataclasses import dataclass
from typing import Optional, Tuple

from core.errors import RouteError

SEPARATOR = "/"
HASH_PREFIX = "#"
MAX_SEGMENTS = 3


@dataclass(frozen=True)
class Route:
    """A parsed address. ``section`` is never empty."""

    section: str
    subsection: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.section:
            raise RouteError("Route section must not be empty")

    def segments(self) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        return (self.section, self.subsection, self.id)


def _strip_prefix(path: str) -> str:
    if path.startswith(HASH_PREFIX):
        path = path[len(HASH_PREFIX):]
    if path.startswith(SEPARATOR):
        path = path[len(SEPARATOR):]
    return path


def is_empty_path(path: Optional[str]) -> bool:
    """True when ``path`` carries no route at all ("", "#", "/", "#/" or None)."""
    if path is None:
        return True
    return _strip_prefix(path) == ""


def parse_path(path: Optional[str], default_section: str) -> Route:
    """Parse ``path`` into a Route.

    Up to three segments are assigned positionally; extra segments are
    ignored and empty segments become ``None``. An empty section segment
    falls back to ``default_section``. Never raises for malformed input.
    """
    stripped = _strip_prefix(path or "")
    if not stripped:
        return Route(default_section)

    parts = stripped.split(SEPARATOR)[:MAX_SEGMENTS]
    parts += [""] * (MAX_SEGMENTS - len(parts))
    section, subsection, report_id = parts
    return Route(
        section=section or default_section,
        subsection=subsection or None,
        id=report_id or None,
    )


def encode_route(route: Route, prefix: str = "") -> str:
    """Inverse of :func:`parse_path`.

    Trailing ``None`` segments are omitted; an interior ``None`` (a route with
    an id but no subsection) is written as an empty segment so that the
    result parses back to the same route.
    """
    segments = [route.section, route.subsection or "", route.id or ""]
    while segments and not segments[-1]:
        segments.pop()
    return prefix + SEPARATOR.join(segments)


def to_hash(route: Route) -> str:
    """Encode ``route`` in its "#section/sub/id" form."""
    return encode_route(route, prefix=HASH_PREFIX)
