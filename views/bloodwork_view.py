# views/bloodwork_view.py
# Purpose: Blood work comparison renderer. Pivots lab results into one table per test
# category: one row per indicator, one column per (date, report) pair, oldest first.
# Cells carry a status (normal/high/low/critical_*) and the reference range, which is
# printed under the value only when an indicator's ranges differ between reports.

import logging
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd
from flask import render_template

from core.app_context import AppContext
from core.collection_loader import extract_records
from core.config import BLOOD_WORK_KEY, BLOODWORK_RENDERER
from core.utils import file_url, format_date
from views.timeline import event_sort_value

logger = logging.getLogger(__name__)

# Status -> CSS modifier of the value cell
STATUS_STYLES: Dict[str, str] = {
    "normal": "normal",
    "high": "abnormal",
    "low": "abnormal",
    "critical_high": "critical",
    "critical_low": "critical",
}

RESULT_COLUMNS = ["item", "date", "reportId", "institution", "value", "status", "refRange"]


def build_result_frame(items: List[Mapping[str, Any]]) -> pd.DataFrame:
    """One row per result; ``item`` is the position of the indicator in ``items``."""
    rows = []
    for item_pos, item in enumerate(items):
        for result in item.get("results") or []:
            rows.append(
                {
                    "item": item_pos,
                    "date": result.get("date") or "",
                    "reportId": result.get("reportId") or "",
                    "institution": result.get("institution") or "",
                    "value": result.get("value"),
                    "status": result.get("status") or "normal",
                    "refRange": result.get("refRange") or "",
                }
            )
    return pd.DataFrame(rows, columns=RESULT_COLUMNS, dtype=object)


def collect_date_columns(frame: pd.DataFrame) -> pd.DataFrame:
    """Unique (date, reportId) columns, oldest first; the first institution seen is kept."""
    if frame.empty:
        return frame[["date", "reportId", "institution"]]
    columns = frame.drop_duplicates(subset=["date", "reportId"], keep="first")[["date", "reportId", "institution"]]
    order = columns["date"].map(event_sort_value)
    columns = columns.assign(_order=order).sort_values("_order", kind="mergesort").drop(columns="_order")
    return columns.reset_index(drop=True)


def has_multiple_ref_ranges(item_results: pd.DataFrame) -> bool:
    ranges = item_results["refRange"]
    return ranges[ranges != ""].nunique() > 1


class BloodWorkRenderer:
    def __init__(self, context: AppContext):
        self.context = context

    def column_header(self, column: Mapping[str, Any]) -> Dict[str, Any]:
        report = self.context.get_report(column["reportId"])
        return {
            "date": format_date(column["date"]),
            "institution": column["institution"],
            "report_url": file_url(report.get("filePath")) if report else None,
            "report_title": (report.get("title") if report else None) or "Report",
        }

    def build_category_table(self, category: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Header and rows of one category, or None when it has nothing to compare."""
        items = list(category.get("items") or [])
        if not items:
            return None
        frame = build_result_frame(items)
        columns = collect_date_columns(frame)
        if columns.empty:
            return None

        rows = []
        for item_pos, item in enumerate(items):
            item_results = frame[frame["item"] == item_pos].drop_duplicates(
                subset=["date", "reportId"], keep="first"
            )
            multi_ref = has_multiple_ref_ranges(item_results)
            lookup = {(r["date"], r["reportId"]): r for r in item_results.to_dict("records")}
            cells = []
            for column in columns.to_dict("records"):
                result = lookup.get((column["date"], column["reportId"]))
                if result is None or pd.isna(result["value"]):
                    cells.append(None)
                    continue
                cells.append(
                    {
                        "value": result["value"],
                        "status": result["status"],
                        "style": STATUS_STYLES.get(result["status"], "normal"),
                        "ref_range": result["refRange"],
                        "show_ref": multi_ref and bool(result["refRange"]),
                    }
                )
            rows.append({"name": item.get("name") or "", "unit": item.get("unit") or "", "cells": cells})

        return {
            "columns": [self.column_header(column) for column in columns.to_dict("records")],
            "rows": rows,
        }

    def render(self, target, params=None) -> None:
        payload = self.context.get(BLOOD_WORK_KEY)
        if payload is None:
            logger.error("Blood work collection unavailable")
        categories = []
        for category in extract_records(payload, "categories"):
            if not isinstance(category, Mapping):
                logger.warning(f"Skipping malformed blood work category: {category!r}")
                continue
            categories.append(
                {
                    "name": category.get("name") or "",
                    "table": self.build_category_table(category),
                }
            )
        target.replace(
            render_template("views/bloodwork.html", categories=categories, unavailable=payload is None)
        )


def register(registry, context: AppContext) -> None:
    registry.register(BLOODWORK_RENDERER, BloodWorkRenderer(context))
