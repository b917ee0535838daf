# views/bp_weight_view.py
# Purpose: Blood pressure / weight renderer. Builds the blood pressure table (newest first,
# grouped by day, systolic readings flagged at warn/alert levels) with a summary for each
# range filter (last 7 days, last 30 days, all), and the weight table.

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pandas as pd
from flask import render_template

from core.app_context import AppContext
from core.collection_loader import extract_records
from core.config import (
    BLOOD_PRESSURE_KEY,
    BP_RANGE_OPTIONS,
    BP_WEIGHT_RENDERER,
    SYSTOLIC_ALERT,
    SYSTOLIC_WARN,
    WEIGHT_KEY,
)

logger = logging.getLogger(__name__)

BP_COLUMNS = ["date", "time", "period", "medicated", "systolic", "diastolic", "heartRate", "note"]
WEIGHT_COLUMNS = ["date", "weight", "unit", "note"]

RANGE_LABELS = {"7": "Last 7 days", "30": "Last 30 days", "all": "All"}


def systolic_level(value: Any) -> Optional[str]:
    """"alert" from SYSTOLIC_ALERT mmHg, "warn" from SYSTOLIC_WARN, otherwise None."""
    if value is None or pd.isna(value):
        return None
    if value >= SYSTOLIC_ALERT:
        return "alert"
    if value >= SYSTOLIC_WARN:
        return "warn"
    return None


def bp_frame(records: List[Dict[str, Any]]) -> pd.DataFrame:
    """Blood pressure records as a frame sorted newest first, with a parsed ``timestamp``."""
    df = pd.DataFrame(records, columns=BP_COLUMNS)
    if df.empty:
        return df.assign(timestamp=pd.Series(dtype="datetime64[ns]"))
    df["time"] = df["time"].fillna("00:00")
    df["timestamp"] = pd.to_datetime(df["date"].astype(str) + " " + df["time"].astype(str), errors="coerce")
    dropped = int(df["timestamp"].isna().sum())
    if dropped:
        logger.warning(f"Dropping {dropped} blood pressure record(s) with an unreadable date/time")
        df = df.dropna(subset=["timestamp"])
    for col in ("systolic", "diastolic", "heartRate"):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df.sort_values("timestamp", ascending=False, kind="mergesort").reset_index(drop=True)


def filter_range(frame: pd.DataFrame, days: str, now: Optional[datetime] = None) -> pd.DataFrame:
    """Records of the last ``days`` days ("all" keeps everything)."""
    if days == "all" or frame.empty:
        return frame
    now = now or datetime.now()
    cutoff = now - timedelta(days=int(days))
    return frame[frame["timestamp"] >= cutoff]


def summarize(frame: pd.DataFrame) -> Dict[str, Any]:
    if frame.empty:
        return {"count": 0}

    def rounded(series: pd.Series) -> Optional[float]:
        value = series.mean()
        return None if pd.isna(value) else round(float(value), 1)

    return {
        "count": int(len(frame)),
        "systolic_mean": rounded(frame["systolic"]),
        "diastolic_mean": rounded(frame["diastolic"]),
        "heart_rate_mean": rounded(frame["heartRate"]),
        "systolic_max": None if frame["systolic"].isna().all() else int(frame["systolic"].max()),
        "warn_count": int((frame["systolic"] >= SYSTOLIC_WARN).sum()),
        "alert_count": int((frame["systolic"] >= SYSTOLIC_ALERT).sum()),
    }


def _number(value: Any) -> Any:
    if value is None or pd.isna(value):
        return None
    return int(value) if float(value).is_integer() else value


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def medicated_label(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return "—"
    return "Yes" if bool(value) else "No"


def bp_rows(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    """Table rows; the date is shown only on the first row of each day."""
    rows = []
    last_date = None
    for record in frame.to_dict("records"):
        new_day = record["date"] != last_date
        last_date = record["date"]
        rows.append(
            {
                "date": record["date"] if new_day else "",
                "day_start": new_day,
                "time": record["time"],
                "period": _text(record.get("period")),
                "medicated": medicated_label(record.get("medicated")),
                "systolic": _number(record["systolic"]),
                "level": systolic_level(record["systolic"]),
                "diastolic": _number(record["diastolic"]),
                "heart_rate": _number(record["heartRate"]),
                "note": _text(record.get("note")),
            }
        )
    return rows


def weight_rows(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    df = pd.DataFrame(records, columns=WEIGHT_COLUMNS)
    if df.empty:
        return []
    df["_ts"] = pd.to_datetime(df["date"], errors="coerce")
    df = df.sort_values("_ts", ascending=False, kind="mergesort", na_position="last")
    return [
        {
            "date": r["date"],
            "weight": r["weight"],
            "unit": _text(r["unit"]) or "kg",
            "note": _text(r["note"]),
        }
        for r in df.drop(columns="_ts").to_dict("records")
    ]


class BPWeightRenderer:
    def __init__(self, context: AppContext):
        self.context = context

    def render(self, target, params=None) -> None:
        bp_payload = self.context.get(BLOOD_PRESSURE_KEY)
        weight_payload = self.context.get(WEIGHT_KEY)
        if bp_payload is None:
            logger.warning("Blood pressure collection unavailable; showing an empty table")

        frame = bp_frame(extract_records(bp_payload, "records"))
        now = datetime.now()
        ranges = []
        for option in BP_RANGE_OPTIONS:
            subset = filter_range(frame, option, now)
            ranges.append(
                {
                    "key": option,
                    "label": RANGE_LABELS.get(option, option),
                    "summary": summarize(subset),
                    "rows": bp_rows(subset),
                }
            )

        target.replace(
            render_template(
                "views/bp_weight.html",
                ranges=ranges,
                weights=weight_rows(extract_records(weight_payload, "records")),
                systolic_warn=SYSTOLIC_WARN,
                systolic_alert=SYSTOLIC_ALERT,
            )
        )


def register(registry, context: AppContext) -> None:
    registry.register(BP_WEIGHT_RENDERER, BPWeightRenderer(context))
