# Purpose: Partition the flat report list into category -> subcategory -> reports,
# newest first. The result is a cache derived entirely from the loaded reports index.

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Tuple

logger = logging.getLogger(__name__)

# Bucket for reports that carry no subcategory
DEFAULT_SUBCATEGORY = "_default"

GroupIndex = Dict[str, Dict[str, List[Mapping[str, Any]]]]

_DATE_RE = re.compile(r"^(\d{4})(?:-(\d{1,2}))?(?:-(\d{1,2}))?$")


def date_sort_key(date_str: Any) -> Tuple[int, Tuple[int, int, int]]:
    """
    Build a sort key for a partial ISO date ("YYYY", "YYYY-MM" or "YYYY-MM-DD").

    Missing month/day parts count as 0, so with the same prefix a coarser date
    ranks below a finer one ("2025" < "2025-09" < "2025-09-01"). Missing or
    unparseable dates get the lowest key of all and therefore sort last when
    ordering newest first.
    """
    if not isinstance(date_str, str) or not date_str.strip():
        return (0, (0, 0, 0))
    match = _DATE_RE.match(date_str.strip())
    if not match:
        logger.debug(f"Unrecognized report date '{date_str}', sorting it last")
        return (0, (0, 0, 0))
    year, month, day = (int(part) if part else 0 for part in match.groups())
    return (1, (year, month, day))


def sort_newest_first(reports: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """Stable sort by date descending; ties keep their input order."""
    return sorted(reports, key=lambda r: date_sort_key(r.get("date")), reverse=True)


def group_reports(reports: Iterable[Mapping[str, Any]]) -> GroupIndex:
    """
    Group reports by category and subcategory, each list sorted newest first.

    Args:
        reports: Report dicts with at least ``category``; ``subcategory`` and
            ``date`` are optional.

    Returns:
        GroupIndex: {category: {subcategory or "_default": [report, ...]}}.
        Categories and subcategories appear in first-seen order.
    """
    groups: GroupIndex = {}
    for report in reports:
        category = report.get("category")
        if not category:
            logger.warning(f"Skipping report without a category: {report.get('id')}")
            continue
        subcategory = report.get("subcategory") or DEFAULT_SUBCATEGORY
        groups.setdefault(category, {}).setdefault(subcategory, []).append(report)

    for category, subgroups in groups.items():
        for subcategory in subgroups:
            subgroups[subcategory] = sort_newest_first(subgroups[subcategory])

    return groups


def flatten_category(groups: GroupIndex, category: str) -> List[Mapping[str, Any]]:
    """All reports of ``category`` across its subcategories, newest first."""
    merged: List[Mapping[str, Any]] = []
    for reports in groups.get(category, {}).values():
        merged.extend(reports)
    return sort_newest_first(merged)
