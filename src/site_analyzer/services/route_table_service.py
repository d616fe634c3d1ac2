# src/site_analyzer/services/route_table_service.py
import logging
from typing import Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)


def route_for_path(relative_path: str, extension: str = ".astro", index_name: str = "index") -> str:
    """
    Maps a page file path (relative to the pages root) to its route.

    'index.astro' -> '/', 'blog/index.astro' -> '/blog',
    'blog/[slug].astro' -> '/blog/[slug]'.
    """
    route = relative_path.replace("\\", "/")
    if extension and route.endswith(extension):
        route = route[:-len(extension)]

    segments = route.split("/")
    if segments and segments[-1] == index_name:
        segments = segments[:-1]
    route = "/".join(segments)

    if not route.startswith("/"):
        route = "/" + route
    if route != "/" and route.endswith("/"):
        route = route.rstrip("/") or "/"
    return route


def normalize_link_target(href: str) -> str:
    """Strips query string, fragment and a trailing slash (except for the root)."""
    target = href.split("?")[0].split("#")[0]
    if target != "/" and target.endswith("/"):
        target = target.rstrip("/") or "/"
    return target


def is_catch_all(segment: str) -> bool:
    return segment.startswith("[...") and segment.endswith("]")


def is_placeholder(segment: str) -> bool:
    return segment.startswith("[") and segment.endswith("]") and not is_catch_all(segment)


def is_dynamic_route(route: str) -> bool:
    return "[" in route or "]" in route


def _segment_matches(pattern: str, value: Optional[str]) -> bool:
    if value is None:
        return False
    return is_placeholder(pattern) or pattern == value


def match_dynamic_route(target: str, route: str) -> bool:
    """
    Checks a normalized link target against one parameterized route.

    - Catch-all (`/shop/[...rest]`): the segments before the catch-all must
      match, any number of trailing target segments (zero included) is accepted.
      Unlike a purely literal prefix comparison, a `[name]` placeholder in that
      prefix deliberately matches any one segment, so `/en/docs/x` matches
      `/[lang]/docs/[...path]`.
    - Otherwise segment counts must be equal and each route segment must be
      equal to the target segment or be a `[name]` placeholder.
    """
    t_segments = [s for s in target.split("/") if s]
    r_segments = [s for s in route.split("/") if s]

    for index, segment in enumerate(r_segments):
        if is_catch_all(segment):
            prefix = r_segments[:index]
            if len(t_segments) < len(prefix):
                return False
            return all(_segment_matches(p, t) for p, t in zip(prefix, t_segments))

    if len(t_segments) != len(r_segments):
        return False
    return all(_segment_matches(r, t) for r, t in zip(r_segments, t_segments))


class RouteTable:
    """
    Read-only set of site routes built once per run.

    Dynamic routes are kept in a stable (sorted) order; when several patterns
    match a target the first one wins.
    """

    def __init__(self, routes: Iterable[str]):
        self._routes = frozenset(routes)
        self._dynamic: List[str] = sorted(r for r in self._routes if is_dynamic_route(r))

    def __contains__(self, route: object) -> bool:
        return route in self._routes

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._routes))

    def __len__(self) -> int:
        return len(self._routes)

    @property
    def dynamic_routes(self) -> List[str]:
        return list(self._dynamic)

    def resolve(self, target: str) -> Optional[str]:
        """
        Returns the route serving `target` (exact match first, then the first
        matching dynamic pattern) or None when no route serves it.
        """
        if target in self._routes:
            return target
        for route in self._dynamic:
            if match_dynamic_route(target, route):
                return route
        return None

    def to_list(self) -> List[str]:
        return sorted(self._routes)


class RouteTableService:
    """Derives the route table from the page files of a project."""

    def __init__(self, extension: str = ".astro", index_name: str = "index"):
        self.extension = extension
        self.index_name = index_name

    def build(self, relative_paths: Iterable[str]) -> RouteTable:
        routes = {route_for_path(p, self.extension, self.index_name) for p in relative_paths}
        logger.debug(f"Mapped {len(routes)} routes")
        return RouteTable(routes)
