# Purpose: This file defines configuration variables for the records viewer.
# It centralizes defaults like the home section, the collection list, renderer names
# and log formatting so they can be adjusted without touching the core modules.

"""
Configuration settings for the Flask application.
"""

from pathlib import Path
from typing import Dict, List

# Base directory of the application (project root, parent of core/)
BASE_DIR = Path(__file__).resolve().parent.parent

# Section shown when the path is empty or addresses an unknown section
DEFAULT_SECTION = "overview"

# Relative data folder used when settings.yaml does not name one
DEFAULT_DATA_FOLDER = "Data"

# Seconds before a single remote collection fetch gives up
DEFAULT_FETCH_TIMEOUT: float = 10.0

# Collections loaded at boot, in order: file <name>.json -> AppData[<key>]
DEFAULT_COLLECTIONS: List[Dict[str, str]] = [
    {"name": "basic-info", "key": "basic_info"},
    {"name": "reports-index", "key": "reports_index"},
    {"name": "blood-pressure", "key": "blood_pressure"},
    {"name": "weight", "key": "weight"},
    {"name": "medications", "key": "medications"},
    {"name": "blood-work", "key": "blood_work"},
]

# AppData keys the core reads directly
REPORTS_KEY = "reports_index"
BASIC_INFO_KEY = "basic_info"
BLOOD_PRESSURE_KEY = "blood_pressure"
WEIGHT_KEY = "weight"
MEDICATIONS_KEY = "medications"
BLOOD_WORK_KEY = "blood_work"

# Renderer names used by the dispatch table
OVERVIEW_RENDERER = "Overview"
REPORT_RENDERER = "ReportViewer"
BLOODWORK_RENDERER = "BloodWork"
BP_WEIGHT_RENDERER = "BPWeightTracker"
MEDICATION_RENDERER = "Medication"
TIMELINE_RENDERER = "Timeline"

# Category whose second path segment is a report id rather than a subcategory
ARCHIVE_CATEGORY = "archive"
BLOODWORK_CATEGORY = "bloodwork"

# Timeline tags that mark an event as a symptom on the overview page
SYMPTOM_TAGS = ("症状", "symptom")

# Systolic thresholds (mmHg) for the blood pressure table
SYSTOLIC_WARN = 160
SYSTOLIC_ALERT = 180

# Range filters offered by the blood pressure view ("all" keeps everything)
BP_RANGE_OPTIONS = ("7", "30", "all")

# View modules imported at startup; each registers its renderers. A module that
# fails to import is skipped and its routes show the "not available" placeholder.
VIEW_MODULES: List[str] = [
    "views.timeline",
    "views.overview_view",
    "views.report_view",
    "views.bloodwork_view",
    "views.bp_weight_view",
    "views.medication_view",
]

# Number of routes remembered by the router's location history
LOCATION_HISTORY_SIZE = 100

# Logging
LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"
LOG_FILE_NAME = "app.log"
LOG_MAX_BYTES = 1024 * 1024 * 10  # 10 MB
LOG_BACKUP_COUNT = 5

# URL prefix of the viewer pages; a route path "imaging/ct/r1" is served at /view/imaging/ct/r1
VIEW_PREFIX = "/view"

# URL prefix under which report files (PDFs, images, videos) are served
FILES_PREFIX = "/files"
