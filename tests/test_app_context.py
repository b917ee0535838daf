# Purpose: Tests for the boot-time context derived from the loaded collections.

from core.app_context import AppContext
from core.collection_loader import AppData
from tests.conftest import SAMPLE_DATA


def test_build_indexes_reports(sample_data, nav_sections):
    context = AppContext.build(sample_data, nav_sections)
    assert len(context.reports) == 6
    assert context.get_report("arch-1")["title"] == "Annual check-up"
    assert context.get_report("missing") is None
    assert context.get_report(None) is None
    assert set(context.groups) == {"imaging", "pathology", "bloodwork", "archive"}


def test_duplicate_ids_first_wins(nav_sections):
    payload = dict(SAMPLE_DATA)
    payload["reports_index"] = {
        "reports": [
            {"id": "x", "category": "archive", "date": "2024-01-01", "title": "first"},
            {"id": "x", "category": "archive", "date": "2025-01-01", "title": "second"},
            {"category": "archive", "title": "no id"},
        ]
    }
    context = AppContext.build(AppData(payload), nav_sections)
    assert context.get_report("x")["title"] == "first"
    assert len(context.reports) == 2


def test_get_falls_back_for_failed_collections(nav_sections):
    payload = dict(SAMPLE_DATA, weight=None)
    context = AppContext.build(AppData(payload), nav_sections)
    assert context.get("weight", {}) == {}
    assert context.get("unknown") is None
