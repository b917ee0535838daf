# Purpose: Tests for the overview renderer (views/overview_view.py).

from freezegun import freeze_time

from views.overview_view import OverviewRenderer, extract_symptoms, neutered_label
from views.timeline import register as register_timeline


def test_symptoms_from_tagged_events():
    info = {"timeline": [{"title": "Thirst", "description": "more", "tags": ["症状"]}, {"title": "CT", "tags": ["CT"]}]}
    assert extract_symptoms(info) == ["Thirst - more"]


def test_symptoms_fall_back_to_summary_sentences():
    info = {"timeline": [], "conditionSummary": "食欲下降。呕吐；腹水; "}
    assert extract_symptoms(info) == ["食欲下降", "呕吐", "腹水"]


def test_neutered_label():
    assert neutered_label({"neutered": True, "neuteredDate": "2017-03"}) == "Neutered (2017-03)"
    assert neutered_label({"neutered": False}) == "Not neutered"


@freeze_time("2026-10-18")
def test_render_full_page(app_ctx, context, registry, target):
    register_timeline(registry, context)
    OverviewRenderer(context, registry).render(target)
    html = str(target.html)
    assert "Toby" in html
    assert "10 years 4 months" in html
    assert "Stable.<br>Eating well." in html
    assert "Pancreatitis (2021)" in html
    assert "Increased thirst - Drinking more" in html
    assert "tl-container" in html


def test_render_without_timeline_renderer(app_ctx, context, registry, target):
    OverviewRenderer(context, registry).render(target)
    assert "Timeline module not loaded." in target.html


def test_render_without_basic_info(app_ctx, make_context, registry, target):
    OverviewRenderer(make_context(basic_info=None), registry).render(target)
    assert "Basic information could not be loaded." in target.html
