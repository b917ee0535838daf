# Purpose: Tests for the renderer registry and the route dispatcher.

import pytest

from core.config import BLOODWORK_RENDERER, OVERVIEW_RENDERER, REPORT_RENDERER
from core.route_codec import Route
from core.view_registry import ContentArea, Dispatcher, ViewRegistry


class RecordingRenderer:
    def __init__(self, name):
        self.name = name
        self.calls = []

    def render(self, target, params=None):
        self.calls.append(params)
        target.replace(f"<p>{self.name}:{params}</p>")


class BrokenRenderer:
    def render(self, target, params=None):
        raise ValueError("bad data")


@pytest.fixture
def registry():
    reg = ViewRegistry()
    for name in (OVERVIEW_RENDERER, REPORT_RENDERER, BLOODWORK_RENDERER):
        reg.register(name, RecordingRenderer(name))
    return reg


@pytest.fixture
def redirects():
    return []


@pytest.fixture
def dispatcher(registry, redirects):
    return Dispatcher(registry, ContentArea(), redirects.append, home_section="overview")


@pytest.mark.parametrize(
    "route, expected",
    [
        (Route("overview"), (OVERVIEW_RENDERER, None)),
        (Route("imaging", "ct", "ct-1"), (REPORT_RENDERER, "ct-1")),
        (Route("pathology", "photos", "photo-1"), (REPORT_RENDERER, "photo-1")),
        (Route("imaging", "ct"), (OVERVIEW_RENDERER, None)),
        (Route("imaging"), (OVERVIEW_RENDERER, None)),
        (Route("archive", "arch-1"), (REPORT_RENDERER, "arch-1")),
        (Route("archive"), (OVERVIEW_RENDERER, None)),
        (Route("bloodwork"), (BLOODWORK_RENDERER, None)),
        (Route("bp"), ("BPWeightTracker", None)),
        (Route("medications"), ("Medication", None)),
        (Route("elsewhere"), None),
    ],
)
def test_resolve(dispatcher, route, expected):
    assert dispatcher.resolve(route) == expected


def test_dispatch_invokes_renderer_with_param(dispatcher, registry):
    outcome = dispatcher.dispatch(Route("imaging", "ct", "ct-1"))
    assert outcome.rendered
    assert registry.get(REPORT_RENDERER).calls == ["ct-1"]
    assert "ReportViewer:ct-1" in dispatcher.content.html


def test_unknown_section_requests_home(dispatcher, redirects, registry):
    outcome = dispatcher.dispatch(Route("elsewhere"))
    assert redirects == ["overview"]
    assert outcome.redirect == "overview"
    assert registry.get(OVERVIEW_RENDERER).calls == []


def test_missing_renderer_shows_placeholder(dispatcher, redirects):
    outcome = dispatcher.dispatch(Route("medications"))
    assert not outcome.rendered
    assert "Module <strong>Medication</strong> is not available." in dispatcher.content.html
    assert redirects == []


def test_renderer_error_is_contained(registry, redirects):
    registry.register(BLOODWORK_RENDERER, BrokenRenderer())
    dispatcher = Dispatcher(registry, ContentArea(), redirects.append)
    outcome = dispatcher.dispatch(Route("bloodwork"))
    assert outcome.error == "bad data"
    assert "could not be displayed" in dispatcher.content.html


def test_register_replaces_and_lists(registry):
    replacement = RecordingRenderer("new")
    registry.register(OVERVIEW_RENDERER, replacement)
    assert registry.get(OVERVIEW_RENDERER) is replacement
    assert OVERVIEW_RENDERER in registry
    assert registry.names() == [OVERVIEW_RENDERER, REPORT_RENDERER, BLOODWORK_RENDERER]


def test_content_area_escaping_is_callers_job():
    area = ContentArea()
    area.replace("<b>x</b>")
    assert str(area.html) == "<b>x</b>"
    area.clear()
    assert str(area.html) == ""
