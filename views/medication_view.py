# views/medication_view.py
# Purpose: Medication renderer: current medication cards, the dosage change log
# (newest first) and the table of past medications.

import logging
from typing import Any, Dict, List, Mapping

from flask import render_template

from core.app_context import AppContext
from core.config import MEDICATIONS_KEY, MEDICATION_RENDERER
from core.report_grouper import date_sort_key
from core.utils import format_date

logger = logging.getLogger(__name__)


def sorted_dosage_changes(changes: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    ordered = sorted(changes, key=lambda dc: date_sort_key(dc.get("date")), reverse=True)
    return [dict(dc, date_label=format_date(dc.get("date"))) for dc in ordered]


class MedicationRenderer:
    def __init__(self, context: AppContext):
        self.context = context

    def render(self, target, params=None) -> None:
        payload = self.context.get(MEDICATIONS_KEY)
        if not isinstance(payload, Mapping):
            logger.warning("Medications collection unavailable; showing empty lists")
            payload = {}
        target.replace(
            render_template(
                "views/medication.html",
                current=list(payload.get("current") or []),
                dosage_changes=sorted_dosage_changes(list(payload.get("dosageChanges") or [])),
                history=list(payload.get("history") or []),
            )
        )


def register(registry, context: AppContext) -> None:
    registry.register(MEDICATION_RENDERER, MedicationRenderer(context))
