# views/overview_view.py
# Purpose: Overview (home) renderer. Shows the patient's basic information, condition
# summary, past history and main symptoms, with the treatment timeline at the bottom.

import logging
import re
from typing import Any, Dict, List, Mapping

from flask import render_template
from markupsafe import Markup

from core.app_context import AppContext
from core.config import BASIC_INFO_KEY, OVERVIEW_RENDERER, SYMPTOM_TAGS, TIMELINE_RENDERER
from core.utils import calc_age, text_to_html
from core.view_registry import ContentArea

logger = logging.getLogger(__name__)

_SENTENCE_SPLIT = re.compile(r"[。；;]")


def extract_symptoms(info: Mapping[str, Any]) -> List[str]:
    """
    Symptom lines for the overview card.

    Timeline events tagged as symptoms give "title - description" lines. When
    there are none, the condition summary is split into sentences instead.
    """
    symptoms = []
    for evt in info.get("timeline") or []:
        if any(tag in SYMPTOM_TAGS for tag in evt.get("tags") or []):
            text = evt.get("title") or ""
            if evt.get("description"):
                text = f"{text} - {evt['description']}"
            symptoms.append(text)

    if not symptoms and info.get("conditionSummary"):
        symptoms = [s.strip() for s in _SENTENCE_SPLIT.split(info["conditionSummary"]) if s.strip()]
    return symptoms


def neutered_label(info: Mapping[str, Any]) -> str:
    if not info.get("neutered"):
        return "Not neutered"
    if info.get("neuteredDate"):
        return f"Neutered ({info['neuteredDate']})"
    return "Neutered"


def basic_fields(info: Mapping[str, Any]) -> List[Dict[str, str]]:
    return [
        {"label": "Breed", "value": info.get("breed") or "--"},
        {"label": "Age", "value": calc_age(info.get("birthDate"))},
        {"label": "Sex", "value": info.get("sex") or "--"},
        {"label": "Neutered", "value": neutered_label(info)},
    ]


class OverviewRenderer:
    def __init__(self, context: AppContext, registry):
        self.context = context
        self.registry = registry

    def render_timeline(self, events) -> Markup:
        timeline = self.registry.get(TIMELINE_RENDERER)
        if timeline is None:
            logger.warning("Timeline renderer not registered; overview shows it as not loaded")
            return Markup('<p class="muted">Timeline module not loaded.</p>')
        area = ContentArea()
        timeline.render(area, events)
        return area.html

    def render(self, target, params=None) -> None:
        info = self.context.get(BASIC_INFO_KEY)
        if not isinstance(info, Mapping):
            logger.error("Basic info collection unavailable; overview cannot be rendered")
            target.replace(render_template("views/overview.html", info=None))
            return

        target.replace(
            render_template(
                "views/overview.html",
                info=info,
                age=calc_age(info.get("birthDate")),
                fields=basic_fields(info),
                condition_summary=text_to_html(info.get("conditionSummary")),
                current_status=text_to_html(info.get("currentStatus")),
                past_history=list(info.get("pastHistory") or []),
                symptoms=extract_symptoms(info),
                timeline_html=self.render_timeline(info.get("timeline") or []),
            )
        )


def register(registry, context: AppContext) -> None:
    registry.register(OVERVIEW_RENDERER, OverviewRenderer(context, registry))
