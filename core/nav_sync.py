# Purpose: Keep the navigation state (active node, expanded ancestors) in step with the route.
# The state is a frozen value keyed by node path; each sync computes a fresh one from
# scratch and publishes it in a single assignment, so stale flags never carry over.

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from core.nav_tree import STATIC, NavTree, NodePath
from core.route_codec import Route

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavState:
    active: Optional[NodePath] = None
    expanded: FrozenSet[NodePath] = field(default_factory=frozenset)

    def is_active(self, path: NodePath) -> bool:
        return self.active == path

    def is_expanded(self, path: NodePath) -> bool:
        return path in self.expanded


EMPTY_STATE = NavState()


class NavSyncer:
    """Owns the live NavState of one navigation tree; the only writer of those flags."""

    def __init__(self, tree: NavTree):
        self.tree = tree
        self.state: NavState = EMPTY_STATE

    def match(self, route: Route) -> Optional[NodePath]:
        """Find the node a route addresses, or None.

        1. the report leaf whose id is ``route.id``;
        2. without an id, the report leaf whose id is ``route.subsection``
           (archive routes put the report id in the second segment);
        3. when neither finds a report, the top-level static entry keyed by
           ``route.section``. Group entries are never matched themselves.
        """
        if route.id:
            path = self.tree.find_report(route.id)
        else:
            path = self.tree.find_report(route.subsection)
        if path is not None:
            return path
        node = self.tree.find_section(route.section)
        if node is not None and node.kind == STATIC:
            return node.path
        return None

    def sync(self, route: Route) -> NavState:
        active = self.match(route)
        if active is None:
            new_state = EMPTY_STATE
            logger.debug(f"No navigation entry for route {route}")
        else:
            new_state = NavState(active=active, expanded=frozenset(self.tree.ancestors(active)))
        self.state = new_state
        return new_state

    def reset(self) -> NavState:
        """Clear the active and expanded flags."""
        self.state = EMPTY_STATE
        return self.state
