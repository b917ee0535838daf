"""
Settings loader module for the records viewer.
Provides centralized access to the configuration stored in settings.yaml.
"""

import yaml
from pathlib import Path
import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

# Path to the settings file
# Always resolve relative to the project root (parent of core/)
_CORE_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _CORE_DIR.parent
SETTINGS_FILE = _PROJECT_ROOT / 'settings.yaml'

# Cache for loaded settings to avoid repeated file reads
_settings_cache = None
_cache_mtime = None


def load_settings() -> Dict[str, Any]:
    """
    Load settings from the YAML file with caching.
    Returns the full settings dictionary, or an empty dict when the file is
    missing or unreadable.
    """
    global _settings_cache, _cache_mtime

    try:
        settings_path = Path(SETTINGS_FILE)

        # Check if we need to reload (file changed or not cached)
        if settings_path.exists():
            current_mtime = settings_path.stat().st_mtime
            if _settings_cache is None or _cache_mtime != current_mtime:
                with open(settings_path, 'r', encoding='utf-8') as f:
                    _settings_cache = yaml.safe_load(f) or {}
                _cache_mtime = current_mtime
                logger.info("Loaded settings from settings.yaml")
            return _settings_cache
        else:
            logger.warning(f"Settings file {SETTINGS_FILE} not found, using defaults")
            return {}
    except yaml.YAMLError as e:
        logger.error(f"Error parsing settings file {SETTINGS_FILE}: {e}")
        return {}
    except OSError as e:
        logger.error(f"Error loading settings: {e}")
        return {}


def get_app_config() -> Dict[str, Any]:
    """Get application configuration settings."""
    settings = load_settings()
    return settings.get('app_config', {}) or {}


def get_collections() -> List[Dict[str, str]]:
    """
    Get the configured data collections as a list of {name, key} dicts.

    Entries without a name are skipped; a missing key defaults to the name with
    dashes turned into underscores ("blood-work" -> "blood_work").
    """
    settings = load_settings()
    collections = []
    for entry in settings.get('collections', []) or []:
        if not isinstance(entry, dict) or not entry.get('name'):
            logger.warning(f"Ignoring malformed collection entry in settings.yaml: {entry!r}")
            continue
        name = str(entry['name'])
        collections.append({'name': name, 'key': str(entry.get('key') or name.replace('-', '_'))})
    return collections


def reload_settings() -> None:
    """Force reload of settings from disk."""
    global _settings_cache, _cache_mtime
    _settings_cache = None
    _cache_mtime = None
    logger.info("Settings cache cleared, will reload on next access")
