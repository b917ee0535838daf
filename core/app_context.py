# Purpose: The context object created once at boot and handed to every component.
# It bundles the loaded collections with everything derived from them (report index,
# group index, navigation tree) so no component reaches for global state.

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from core.collection_loader import AppData, extract_records
from core.config import DEFAULT_SECTION, REPORTS_KEY
from core.nav_tree import NavSection, NavTree, build_nav_tree
from core.report_grouper import GroupIndex, group_reports

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContext:
    data: AppData
    reports: Tuple[Mapping[str, Any], ...]
    report_index: Mapping[str, Mapping[str, Any]]
    groups: GroupIndex
    nav_tree: NavTree
    home_section: str = DEFAULT_SECTION

    @classmethod
    def build(
        cls,
        data: AppData,
        sections: Sequence[NavSection],
        home_section: str = DEFAULT_SECTION,
    ) -> "AppContext":
        """Derive the report index, groups and navigation tree from loaded data."""
        reports = tuple(
            report
            for report in extract_records(data.get(REPORTS_KEY), "reports")
            if isinstance(report, Mapping) and report.get("id")
        )
        report_index: Dict[str, Mapping[str, Any]] = {}
        for report in reports:
            if report["id"] in report_index:
                logger.warning(f"Duplicate report id '{report['id']}'; keeping the first occurrence")
                continue
            report_index[report["id"]] = report

        groups = group_reports(reports)
        tree = build_nav_tree(sections, groups)
        return cls(
            data=data,
            reports=reports,
            report_index=report_index,
            groups=groups,
            nav_tree=tree,
            home_section=home_section,
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Payload of a loaded collection; ``default`` when it failed or is unknown."""
        value = self.data.get(key)
        return default if value is None else value

    def get_report(self, report_id: Optional[str]) -> Optional[Mapping[str, Any]]:
        if not report_id:
            return None
        return self.report_index.get(report_id)
