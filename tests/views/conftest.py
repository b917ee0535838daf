# Purpose: Pytest fixtures shared across view tests.

import pytest

from core.app_context import AppContext
from core.collection_loader import AppData
from core.view_registry import ContentArea, ViewRegistry
from tests.conftest import SAMPLE_DATA


@pytest.fixture
def app_ctx(app):
    """Push an application context so renderers can use render_template."""
    with app.app_context():
        yield app


@pytest.fixture
def context(nav_sections):
    return AppContext.build(AppData(SAMPLE_DATA), nav_sections)


@pytest.fixture
def make_context(nav_sections):
    def _make(**overrides):
        return AppContext.build(AppData(dict(SAMPLE_DATA, **overrides)), nav_sections)

    return _make


@pytest.fixture
def registry():
    return ViewRegistry()


@pytest.fixture
def target():
    return ContentArea()
