# Purpose: Smoke test to ensure NAV_SECTIONS structure is importable and well-formed.

from core.nav_tree import load_nav_sections
from core.navigation_config import NAV_SECTIONS


def test_nav_sections_non_empty_and_valid():
    assert isinstance(NAV_SECTIONS, list) and len(NAV_SECTIONS) > 0
    sections = load_nav_sections(NAV_SECTIONS)
    keys = [s.key for s in sections]
    assert len(keys) == len(set(keys))
    assert keys[0] == "overview"
    assert [s.key for s in sections if s.is_group] == ["imaging", "pathology", "archive"]
