# Purpose: Registry of view renderers and the dispatcher that picks one for a route.
# Renderers are looked up by name at dispatch time; a name with no registered renderer
# shows a "module not available" placeholder instead of failing the route.

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple

from markupsafe import Markup

from core.config import (
    ARCHIVE_CATEGORY,
    BLOODWORK_RENDERER,
    BP_WEIGHT_RENDERER,
    DEFAULT_SECTION,
    MEDICATION_RENDERER,
    OVERVIEW_RENDERER,
    REPORT_RENDERER,
)
from core.route_codec import Route

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """A view that paints itself into a content area. Must be safe to call repeatedly."""

    def render(self, target: "ContentArea", params: Any = None) -> None:
        ...


class ContentArea:
    """The region a renderer owns while its route is displayed."""

    def __init__(self) -> None:
        self.html: Markup = Markup("")

    def replace(self, markup: str) -> None:
        self.html = Markup(markup)

    def clear(self) -> None:
        self.html = Markup("")


class ViewRegistry:
    """Name -> renderer mapping, filled at startup by the view modules that are available."""

    def __init__(self) -> None:
        self._renderers: Dict[str, Renderer] = {}

    def register(self, name: str, renderer: Renderer) -> None:
        if name in self._renderers:
            logger.warning(f"Renderer '{name}' registered twice; replacing the previous one")
        self._renderers[name] = renderer
        logger.debug(f"Registered renderer '{name}'")

    def get(self, name: str) -> Optional[Renderer]:
        return self._renderers.get(name)

    def names(self) -> List[str]:
        return list(self._renderers)

    def __contains__(self, name: str) -> bool:
        return name in self._renderers


@dataclass(frozen=True)
class DispatchRule:
    """Which renderer a section uses and what it needs from the route.

    ``requires`` names route fields that must all be set; otherwise the
    ``fallback`` renderer is used without parameters. ``param`` names the
    route field passed to the renderer.
    """

    renderer: str
    requires: Tuple[str, ...] = ()
    param: Optional[str] = None
    fallback: str = OVERVIEW_RENDERER


def default_dispatch_table(home_section: str = DEFAULT_SECTION) -> Dict[str, DispatchRule]:
    report_rule = DispatchRule(REPORT_RENDERER, requires=("subsection", "id"), param="id")
    return {
        home_section: DispatchRule(OVERVIEW_RENDERER),
        "imaging": report_rule,
        "pathology": report_rule,
        "bloodwork": DispatchRule(BLOODWORK_RENDERER),
        "bp": DispatchRule(BP_WEIGHT_RENDERER),
        "medications": DispatchRule(MEDICATION_RENDERER),
        # The second segment of an archive route is the report id itself
        ARCHIVE_CATEGORY: DispatchRule(REPORT_RENDERER, requires=("subsection",), param="subsection"),
    }


@dataclass(frozen=True)
class DispatchOutcome:
    renderer: Optional[str]
    params: Any = None
    rendered: bool = False
    redirect: Optional[str] = None
    error: Optional[str] = None


def placeholder_markup(renderer_name: str) -> Markup:
    return Markup(
        '<div class="placeholder-message"><p>Module <strong>{}</strong> is not available.</p></div>'
    ).format(renderer_name)


def render_error_markup(renderer_name: str, error: Exception) -> Markup:
    return Markup(
        '<div class="error-message"><h2>This view could not be displayed</h2>'
        "<p>Module <strong>{}</strong> failed: {}</p></div>"
    ).format(renderer_name, str(error))


def route_error_markup(path: str, error: Exception) -> Markup:
    return Markup(
        '<div class="error-message"><h2>This page could not be displayed</h2>'
        "<p>Route <strong>{}</strong> failed: {}</p></div>"
    ).format(path, str(error))


class Dispatcher:
    """Maps a route's section to a renderer and invokes it on the content area."""

    def __init__(
        self,
        registry: ViewRegistry,
        content: ContentArea,
        request_route_change: Callable[[str], None],
        home_section: str = DEFAULT_SECTION,
        table: Optional[Mapping[str, DispatchRule]] = None,
    ):
        self.registry = registry
        self.content = content
        self.request_route_change = request_route_change
        self.home_section = home_section
        self.table = dict(table) if table is not None else default_dispatch_table(home_section)

    def resolve(self, route: Route) -> Optional[Tuple[str, Any]]:
        """(renderer name, parameter) for ``route``, or None for an unknown section."""
        rule = self.table.get(route.section)
        if rule is None:
            return None
        if all(getattr(route, field_name) for field_name in rule.requires):
            params = getattr(route, rule.param) if rule.param else None
            return rule.renderer, params
        return rule.fallback, None

    def dispatch(self, route: Route) -> DispatchOutcome:
        resolved = self.resolve(route)
        if resolved is None:
            logger.info(f"Unknown section '{route.section}', redirecting to '{self.home_section}'")
            self.request_route_change(self.home_section)
            return DispatchOutcome(renderer=None, redirect=self.home_section)

        name, params = resolved
        renderer = self.registry.get(name)
        if renderer is None:
            logger.warning(f"Renderer '{name}' is not available for route {route}")
            self.content.replace(placeholder_markup(name))
            return DispatchOutcome(renderer=name, params=params)

        try:
            renderer.render(self.content, params)
        except Exception as e:
            logger.error(f"Renderer '{name}' failed for route {route}: {e}", exc_info=True)
            self.content.replace(render_error_markup(name, e))
            return DispatchOutcome(renderer=name, params=params, error=str(e))
        return DispatchOutcome(renderer=name, params=params, rendered=True)
