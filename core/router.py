# Purpose: Route-change handling. A Location emits route-change notifications; the Router
# queues them and consumes them strictly one at a time, running parse -> nav sync ->
# dispatch to completion before taking the next. Route changes requested while an event
# is being handled (redirects) are queued behind it.

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

from markupsafe import Markup

from core.config import LOCATION_HISTORY_SIZE
from core.errors import RouteError
from core.nav_sync import NavState, NavSyncer
from core.route_codec import Route, encode_route, is_empty_path, parse_path
from core.view_registry import Dispatcher, DispatchOutcome, route_error_markup

logger = logging.getLogger(__name__)

# Redirects followed while draining a single navigation before giving up
MAX_REDIRECTS = 5

RouteListener = Callable[[str], None]


class Location:
    """The current path plus its history; notifies subscribers on every assignment."""

    def __init__(self, path: str = "", history_size: int = LOCATION_HISTORY_SIZE):
        self.path = path
        self.history: Deque[str] = deque(maxlen=history_size)
        self._listeners: List[RouteListener] = []

    def subscribe(self, listener: RouteListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def assign(self, path: str) -> None:
        self.path = path
        self.history.append(path)
        for listener in list(self._listeners):
            listener(path)


@dataclass(frozen=True)
class RouteResolution:
    """What the router settled on after handling a navigation."""

    path: str
    route: Optional[Route]
    nav_state: NavState
    html: Markup
    renderer: Optional[str]
    redirected: bool = False
    error: Optional[str] = None


class Router:
    def __init__(
        self,
        location: Location,
        syncer: NavSyncer,
        dispatcher: Dispatcher,
        home_section: str,
    ):
        self.location = location
        self.syncer = syncer
        self.dispatcher = dispatcher
        self.home_section = home_section
        self.home_path = encode_route(Route(home_section))
        self.last_route: Optional[Route] = None
        self.last_outcome: Optional[DispatchOutcome] = None
        self._queue: Deque[str] = deque()
        self._draining = False
        self._lock = threading.RLock()
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def started(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        """Subscribe to route changes and resolve the current route (or set the home route)."""
        with self._lock:
            if self.started:
                logger.warning("Router already started")
                return
            self._unsubscribe = self.location.subscribe(self._on_route_change)
            logger.info("Router started")
            if is_empty_path(self.location.path):
                self.location.assign(self.home_path)
            else:
                self._on_route_change(self.location.path)

    def stop(self) -> None:
        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
                logger.info("Router stopped")

    def navigate(self, path: str) -> RouteResolution:
        """Change the route to ``path`` and return the settled result.

        Concurrent callers are serialized; each sees the result of its own
        navigation including any redirect it triggered.
        """
        with self._lock:
            if not self.started:
                raise RuntimeError("Router has not been started")
            self.location.assign(path)
            return self.snapshot(requested=path)

    def snapshot(self, requested: Optional[str] = None) -> RouteResolution:
        outcome = self.last_outcome
        return RouteResolution(
            path=self.location.path,
            route=self.last_route,
            nav_state=self.syncer.state,
            html=self.dispatcher.content.html,
            renderer=outcome.renderer if outcome else None,
            redirected=requested is not None and self.location.path != requested,
            error=outcome.error if outcome else None,
        )

    def _on_route_change(self, path: str) -> None:
        self._queue.append(path)
        if not self._draining:
            self._drain()

    def _drain(self) -> None:
        self._draining = True
        handled = 0
        try:
            while self._queue:
                if handled > MAX_REDIRECTS:
                    logger.error(f"Too many redirects, dropping {len(self._queue)} queued route(s)")
                    self._queue.clear()
                    break
                path = self._queue.popleft()
                handled += 1
                try:
                    self._handle(path)
                except Exception as e:
                    logger.error(f"Abandoned route '{path}': {e}", exc_info=True)
                    self._abandon(path, e)
        finally:
            self._draining = False

    def _abandon(self, path: str, error: Exception) -> None:
        """Drop whatever the previous route left behind and show the failure instead."""
        try:
            self.last_route = parse_path(path, self.home_section)
        except RouteError:
            self.last_route = None
        self.last_outcome = DispatchOutcome(renderer=None, error=str(error))
        self.syncer.reset()
        self.dispatcher.content.replace(route_error_markup(path, error))

    def _handle(self, path: str) -> None:
        if is_empty_path(path):
            self.location.assign(self.home_path)
            return

        route = parse_path(path, self.home_section)
        self.syncer.sync(route)
        outcome = self.dispatcher.dispatch(route)
        self.last_route = route
        self.last_outcome = outcome
        logger.debug(f"Resolved '{path}' -> {outcome.renderer or 'redirect'}")
