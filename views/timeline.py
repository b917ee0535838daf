# views/timeline.py
# Purpose: Timeline renderer. Draws a vertical list of medical events, oldest first,
# with tag chips and links to the reports each event refers to. Used on its own
# (registered as "Timeline") and embedded by the overview page.

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from flask import render_template

from core.app_context import AppContext
from core.config import TIMELINE_RENDERER
from core.nav_tree import link_for_report
from core.utils import view_url

logger = logging.getLogger(__name__)

# Tag -> CSS modifier; the first known tag of an event colours its dot
TAG_STYLES: Dict[str, str] = {
    "CT": "ct",
    "B超": "ultrasound",
    "ultrasound": "ultrasound",
    "X光": "xray",
    "xray": "xray",
    "手术": "surgery",
    "surgery": "surgery",
    "血检": "bloodwork",
    "bloodwork": "bloodwork",
    "腹水": "ascites",
    "体检": "checkup",
    "checkup": "checkup",
    "症状": "symptom",
    "symptom": "symptom",
    "术后": "postop",
    "病理": "pathology",
    "pathology": "pathology",
}
DEFAULT_TAG_STYLE = "default"


def event_sort_value(date_str: Optional[str]) -> int:
    """Numeric y*10000 + m*100 + d for ordering events; missing month/day count as 1."""
    if not date_str:
        return 0
    parts = str(date_str).split("-")

    def part(index: int, missing: int) -> int:
        try:
            return int(parts[index]) or missing
        except (IndexError, ValueError):
            return missing

    return part(0, 0) * 10000 + part(1, 1) * 100 + part(2, 1)


def format_event_date(date_str: Optional[str]) -> str:
    """"2025-09-03" -> "Sep 3, 2025"; coarser dates keep only what they have."""
    if not date_str:
        return ""
    parts = str(date_str).split("-")
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    try:
        if len(parts) >= 2:
            month = int(parts[1])
            if not 1 <= month <= 12:
                raise ValueError(f"month {month} out of range")
            if len(parts) >= 3:
                return f"{months[month - 1]} {int(parts[2])}, {parts[0]}"
            return f"{months[month - 1]} {parts[0]}"
    except ValueError:
        logger.debug(f"Unrecognized event date '{date_str}'")
        return str(date_str)
    return parts[0]


def dot_style(tags: Optional[Sequence[str]]) -> str:
    for tag in tags or []:
        if tag in TAG_STYLES:
            return TAG_STYLES[tag]
    return DEFAULT_TAG_STYLE


def sort_events(events: Sequence[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """Oldest first; events on the same date keep their input order."""
    return sorted(events, key=lambda evt: event_sort_value(evt.get("date")))


class TimelineRenderer:
    def __init__(self, context: AppContext):
        self.context = context

    def report_link(self, report_id: str) -> str:
        report = self.context.get_report(report_id)
        if report is None:
            logger.debug(f"Timeline links unknown report '{report_id}'")
        return view_url(link_for_report(report, self.context.home_section))

    def build_events(self, events: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        rows = []
        for evt in sort_events(events):
            tags = list(evt.get("tags") or [])
            rows.append(
                {
                    "date": format_event_date(evt.get("date")),
                    "title": evt.get("title") or "",
                    "description": evt.get("description") or "",
                    "tags": [{"text": tag, "style": TAG_STYLES.get(tag, DEFAULT_TAG_STYLE)} for tag in tags],
                    "dot": dot_style(tags),
                    "links": [self.report_link(rid) for rid in evt.get("linkedReports") or []],
                }
            )
        return rows

    def render(self, target, params=None) -> None:
        """Render ``params`` (a list of timeline events) into ``target``."""
        events = params or []
        target.replace(render_template("views/timeline.html", events=self.build_events(events)))


def register(registry, context: AppContext) -> None:
    registry.register(TIMELINE_RENDERER, TimelineRenderer(context))
