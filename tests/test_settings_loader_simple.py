# Purpose: Simple tests for settings_loader to ensure safe defaults.

from core import settings_loader
from core.settings_loader import get_app_config, get_collections, load_settings, reload_settings


def test_project_settings_name_every_collection():
    reload_settings()
    settings = load_settings()
    assert isinstance(settings, dict)
    assert get_app_config().get("default_section") == "overview"
    assert {c["key"] for c in get_collections()} >= {"basic_info", "reports_index"}


def test_missing_settings_file_returns_empty(monkeypatch, tmp_path):
    monkeypatch.setattr(settings_loader, "SETTINGS_FILE", tmp_path / "missing.yaml")
    reload_settings()
    try:
        assert load_settings() == {}
        assert get_app_config() == {}
        assert get_collections() == []
    finally:
        reload_settings()


def test_malformed_settings_file_returns_empty(monkeypatch, tmp_path):
    bad = tmp_path / "settings.yaml"
    bad.write_text("app_config: [unclosed\n", encoding="utf-8")
    monkeypatch.setattr(settings_loader, "SETTINGS_FILE", bad)
    reload_settings()
    try:
        assert load_settings() == {}
    finally:
        reload_settings()


def test_collection_entries_are_normalized(monkeypatch, tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "collections:\n  - name: blood-work\n  - name: weight\n    key: wt\n  - key: orphan\n  - just-a-string\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(settings_loader, "SETTINGS_FILE", path)
    reload_settings()
    try:
        assert get_collections() == [
            {"name": "blood-work", "key": "blood_work"},
            {"name": "weight", "key": "wt"},
        ]
    finally:
        reload_settings()
