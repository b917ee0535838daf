# Purpose: Build the sidebar navigation tree from the static section definitions and the
# grouped reports. The tree is an immutable arena: every node records its position as a
# path of child indices from the root list, and lookups by report id or section key are
# indexed once at build time. Active/expanded flags live outside the tree (see nav_sync).

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from core.config import ARCHIVE_CATEGORY, BLOODWORK_CATEGORY, DEFAULT_SECTION
from core.report_grouper import GroupIndex, flatten_category
from core.utils import format_date_short

logger = logging.getLogger(__name__)

NodePath = Tuple[int, ...]

STATIC = "static"
GROUP = "group"
SUBGROUP = "subgroup"
REPORT = "report"

SECTION_TYPES = (STATIC, GROUP)


@dataclass(frozen=True)
class Subcategory:
    key: str
    label: str


@dataclass(frozen=True)
class NavSection:
    """A static sidebar definition: a plain link or a report group."""

    key: str
    label: str
    type: str
    icon: Optional[str] = None
    path: Optional[str] = None
    subcategories: Tuple[Subcategory, ...] = ()

    @property
    def is_group(self) -> bool:
        return self.type == GROUP


@dataclass(frozen=True)
class NavNode:
    kind: str
    key: str
    label: str
    path: NodePath
    icon: Optional[str] = None
    href: Optional[str] = None
    date_label: str = ""
    children: Tuple["NavNode", ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children


def load_nav_sections(raw_sections: Sequence[Mapping[str, Any]]) -> Tuple[NavSection, ...]:
    """Convert NAV_SECTIONS-style dicts into NavSection objects, keeping their order.

    Raises:
        ValueError: for an entry without a key or with an unknown type.
    """
    sections = []
    for entry in raw_sections:
        key = entry.get("key")
        section_type = entry.get("type", STATIC)
        if not key:
            raise ValueError(f"Navigation section without a key: {entry}")
        if section_type not in SECTION_TYPES:
            raise ValueError(f"Navigation section '{key}' has unknown type '{section_type}'")
        subcategories = tuple(
            Subcategory(key=sub["key"], label=sub.get("label", sub["key"]))
            for sub in entry.get("subcategories") or []
        )
        sections.append(
            NavSection(
                key=key,
                label=entry.get("label", key),
                type=section_type,
                icon=entry.get("icon"),
                path=entry.get("path") or (key if section_type == STATIC else None),
                subcategories=subcategories,
            )
        )
    return tuple(sections)


def report_route_path(category: str, subcategory: Optional[str], report_id: str) -> str:
    """Route path of a report leaf.

    Archive reports are addressed by id directly under the section
    ("archive/<id>"); others as "<category>/<subcategory>/<id>", or
    "<category>/<id>" when the report has no subcategory.
    """
    if category == ARCHIVE_CATEGORY:
        return f"{category}/{report_id}"
    if subcategory:
        return f"{category}/{subcategory}/{report_id}"
    return f"{category}/{report_id}"


def link_for_report(report: Optional[Mapping[str, Any]], default_section: str = DEFAULT_SECTION) -> str:
    """Route path that displays ``report``; blood work reports open the blood work table."""
    if not report:
        return default_section
    category = report.get("category")
    if category == BLOODWORK_CATEGORY:
        return BLOODWORK_CATEGORY
    if not category:
        return default_section
    return report_route_path(category, report.get("subcategory"), report.get("id"))


def _report_leaf(category: str, subcategory: Optional[str], report: Mapping[str, Any], path: NodePath) -> NavNode:
    date_label = format_date_short(report.get("date"))
    title = report.get("title") or report.get("id")
    return NavNode(
        kind=REPORT,
        key=report["id"],
        label=f"{date_label} {title}".strip(),
        path=path,
        href=report_route_path(category, subcategory, report["id"]),
        date_label=date_label,
    )


def _report_leaves(category, subcategory, reports, parent_path: NodePath) -> Tuple[NavNode, ...]:
    return tuple(
        _report_leaf(category, subcategory, report, parent_path + (index,))
        for index, report in enumerate(reports)
    )


def build_nav_tree(sections: Sequence[NavSection], groups: GroupIndex) -> "NavTree":
    """
    Build the navigation tree in the declared section order.

    - static sections become leaf nodes;
    - groups with declared subcategories get one subgroup per subcategory
      that has reports (empty subcategories are omitted), in declared order;
    - groups without subcategories list every report of the category
      directly, newest first.
    """
    roots: List[NavNode] = []
    for index, section in enumerate(sections):
        path: NodePath = (index,)
        if not section.is_group:
            roots.append(NavNode(STATIC, section.key, section.label, path, icon=section.icon, href=section.path))
            continue

        if section.subcategories:
            category_reports = groups.get(section.key, {})
            children: List[NavNode] = []
            for sub in section.subcategories:
                reports = category_reports.get(sub.key, [])
                if not reports:
                    continue
                sub_path = path + (len(children),)
                children.append(
                    NavNode(
                        SUBGROUP,
                        sub.key,
                        sub.label,
                        sub_path,
                        children=_report_leaves(section.key, sub.key, reports, sub_path),
                    )
                )
            node_children = tuple(children)
        else:
            node_children = _report_leaves(section.key, None, flatten_category(groups, section.key), path)

        roots.append(NavNode(GROUP, section.key, section.label, path, icon=section.icon, children=node_children))

    tree = NavTree(roots)
    logger.info(f"Built navigation tree: {len(roots)} sections, {len(tree.report_index)} report entries")
    return tree


class NavTree:
    """Immutable navigation tree with lookups computed once at construction."""

    def __init__(self, roots: Sequence[NavNode]):
        self.roots: Tuple[NavNode, ...] = tuple(roots)
        self.report_index: Dict[str, NodePath] = {}
        self.section_index: Dict[str, NodePath] = {}
        for node in self.roots:
            self.section_index.setdefault(node.key, node.path)
        for node in self.iter_nodes():
            if node.kind != REPORT:
                continue
            if node.key in self.report_index:
                logger.warning(f"Duplicate report id '{node.key}' in navigation tree; keeping the first entry")
                continue
            self.report_index[node.key] = node.path

    def iter_nodes(self) -> Iterator[NavNode]:
        """Depth-first, in display order."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def node_at(self, path: NodePath) -> NavNode:
        nodes = self.roots
        node = None
        for index in path:
            node = nodes[index]
            nodes = node.children
        if node is None:
            raise IndexError("Empty node path")
        return node

    @staticmethod
    def ancestors(path: NodePath) -> List[NodePath]:
        """Paths of every ancestor of ``path``, root first."""
        return [path[:depth] for depth in range(1, len(path))]

    def find_report(self, report_id: Optional[str]) -> Optional[NodePath]:
        if not report_id:
            return None
        return self.report_index.get(report_id)

    def find_section(self, key: Optional[str]) -> Optional[NavNode]:
        path = self.section_index.get(key) if key else None
        return self.node_at(path) if path is not None else None

    def to_dict(self, state=None) -> List[Dict[str, Any]]:
        """JSON-ready view of the tree, annotated with ``state`` flags when given."""

        def convert(node: NavNode) -> Dict[str, Any]:
            return {
                "kind": node.kind,
                "key": node.key,
                "label": node.label,
                "icon": node.icon,
                "href": node.href,
                "active": bool(state and state.is_active(node.path)),
                "expanded": bool(state and state.is_expanded(node.path)),
                "children": [convert(child) for child in node.children],
            }

        return [convert(node) for node in self.roots]
