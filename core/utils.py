# Purpose: Utility functions for the records viewer: data source resolution and
# the date/text display helpers shared by the navigation tree and the view renderers.

"""
Utility functions for the Flask application.
"""
import os
import logging
from datetime import date
from typing import Optional

from markupsafe import Markup, escape

from core.config import BASE_DIR, DEFAULT_DATA_FOLDER, FILES_PREFIX, VIEW_PREFIX

logger = logging.getLogger(__name__)  # Get logger for this module


def _split_date(date_str: str):
    parts = date_str.split("-")
    year = parts[0] if parts else ""
    month = parts[1].zfill(2) if len(parts) > 1 and parts[1] else None
    day = parts[2].zfill(2) if len(parts) > 2 and parts[2] else None
    return year, month, day


def format_date(date_str: Optional[str]) -> str:
    """Format a partial ISO date for headings.

    "2026-02-12" -> "2026/02/12", "2025-09" -> "2025/09"; anything else is returned unchanged.
    """
    if not date_str:
        return ""
    year, month, day = _split_date(date_str)
    if year and month and day:
        return f"{year}/{month}/{day}"
    if year and month:
        return f"{year}/{month}"
    return date_str


def format_date_short(date_str: Optional[str]) -> str:
    """Compact date for navigation entries: "MM/DD", or "YYYY/MM" when the day is unknown."""
    if not date_str:
        return ""
    year, month, day = _split_date(date_str)
    if month and day:
        return f"{month}/{day}"
    if month:
        return f"{year}/{month}"
    return date_str


def calc_age(birth_date: Optional[str], today: Optional[date] = None) -> str:
    """Age in years and months from a "YYYY-MM-DD" birth date, e.g. "9 years 3 months"."""
    if not birth_date:
        return "unknown"
    try:
        year, month, day = (int(part) for part in birth_date.split("-")[:3])
    except ValueError:
        logger.warning(f"Could not parse birth date '{birth_date}'")
        return "unknown"

    today = today or date.today()
    years = today.year - year
    months = today.month - month
    if today.day < day:
        months -= 1
    if months < 0:
        years -= 1
        months += 12

    if years <= 0 and months <= 0:
        return "less than 1 month"
    parts = []
    if years > 0:
        parts.append(f"{years} year{'s' if years != 1 else ''}")
    if months > 0:
        parts.append(f"{months} month{'s' if months != 1 else ''}")
    return " ".join(parts)


def text_to_html(text: Optional[str]) -> Markup:
    """Escape plain text and keep its line breaks as <br>."""
    if not text:
        return Markup("")
    return Markup("<br>").join(escape(line) for line in text.split("\n"))


def get_data_source(app_config: dict, app_root_path: Optional[str] = None) -> str:
    """
    Resolve where the JSON collections are read from.

    A configured ``data_url`` wins; otherwise ``data_folder`` (default "Data")
    is resolved to an absolute path relative to ``app_root_path`` or the
    project root. Existence is checked by the collection loader, which turns
    a missing folder into a fatal bootstrap error.

    Args:
        app_config (dict): The ``app_config`` section of settings.yaml.
        app_root_path (str, optional): Base for relative folders.

    Returns:
        str: An http(s) base URL or an absolute folder path.
    """
    data_url = (app_config.get("data_url") or "").strip()
    if data_url:
        logger.info(f"Using remote data source: {data_url}")
        return data_url

    chosen_path = (app_config.get("data_folder") or DEFAULT_DATA_FOLDER).strip()
    base_path = app_root_path or str(BASE_DIR)
    if os.path.isabs(chosen_path):
        absolute_path = chosen_path
    else:
        absolute_path = os.path.abspath(os.path.join(base_path, chosen_path))
    logger.info(f"Resolved data folder '{chosen_path}' relative to '{base_path}': {absolute_path}")
    return absolute_path


def view_url(route_path: Optional[str]) -> str:
    """Page URL of a route path; the empty path maps to the bare viewer prefix."""
    route_path = (route_path or "").strip("/")
    return f"{VIEW_PREFIX}/{route_path}" if route_path else f"{VIEW_PREFIX}/"


def file_url(file_path: Optional[str]) -> Optional[str]:
    """URL of a report file: absolute URLs pass through, relative paths go under FILES_PREFIX."""
    if not file_path:
        return None
    if file_path.startswith(("http://", "https://", "/")):
        return file_path
    return f"{FILES_PREFIX}/{file_path}"
