# Add project root to sys.path for module imports
import json
import os
import sys
from typing import Any, Dict

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.collection_loader import AppData  # noqa: E402
from core.navigation_config import NAV_SECTIONS  # noqa: E402
from core.nav_tree import load_nav_sections  # noqa: E402


BASIC_INFO = {
    "name": "Toby",
    "breed": "Miniature Schnauzer",
    "birthDate": "2016-05-20",
    "sex": "Male",
    "neutered": True,
    "neuteredDate": "2017-03",
    "conditionSummary": "Kidney values raised; blood pressure high. Mild ascites",
    "currentStatus": "Stable.\nEating well.",
    "pastHistory": ["Pancreatitis (2021)"],
    "timeline": [
        {"date": "2025-09-03", "title": "Ultrasound", "tags": ["B超"], "linkedReports": ["us-1"]},
        {"date": "2025-08", "title": "Increased thirst", "description": "Drinking more", "tags": ["症状"]},
        {"date": "2026-01-15", "title": "CT scan", "tags": ["CT"], "linkedReports": ["ct-1", "bw-1"]},
    ],
}

REPORTS_INDEX = {
    "reports": [
        {"id": "ct-1", "category": "imaging", "subcategory": "ct", "date": "2026-01-15",
         "title": "Abdominal CT", "institution": "City Vet", "fileType": "pdf",
         "filePath": "reports/ct-1.pdf", "summary": "No masses.", "highlights": ["Small kidneys"]},
        {"id": "ct-0", "category": "imaging", "subcategory": "ct", "date": "2025-11-02",
         "title": "Chest CT", "fileType": "image", "filePath": "reports/ct-0.jpg"},
        {"id": "us-1", "category": "imaging", "subcategory": "ultrasound", "date": "2025-09-03",
         "title": "Abdominal ultrasound", "fileType": "video", "filePath": "reports/us-1.mp4"},
        {"id": "photo-1", "category": "pathology", "subcategory": "photos", "date": "2025-10",
         "title": "Surgical photos", "fileType": "gallery",
         "files": [{"path": "reports/p1.jpg", "caption": "Incision"}, {"path": "reports/p2.jpg"}]},
        {"id": "bw-1", "category": "bloodwork", "date": "2025-09-10", "title": "Chemistry panel",
         "fileType": "pdf", "filePath": "reports/bw-1.pdf"},
        {"id": "arch-1", "category": "archive", "date": "2024-06-12", "title": "Annual check-up",
         "fileType": "docx", "filePath": "reports/arch-1.docx"},
    ]
}

BLOOD_PRESSURE = {
    "records": [
        {"date": "2026-01-20", "time": "08:30", "period": "morning", "medicated": True,
         "systolic": 152, "diastolic": 90, "heartRate": 110, "note": ""},
        {"date": "2026-01-20", "time": "20:10", "period": "evening", "medicated": True,
         "systolic": 165, "diastolic": 95, "heartRate": 115, "note": "after walk"},
        {"date": "2026-01-02", "time": "09:00", "period": "morning", "medicated": False,
         "systolic": 184, "diastolic": 102, "heartRate": 120, "note": "missed dose"},
    ]
}

WEIGHT = {
    "records": [
        {"date": "2025-12-01", "weight": 8.4, "unit": "kg", "note": ""},
        {"date": "2026-01-10", "weight": 8.3, "unit": "kg", "note": "fasted"},
    ]
}

MEDICATIONS = {
    "current": [
        {"name": "Amlodipine", "dosage": "0.625 mg", "frequency": "twice daily",
         "purpose": "Blood pressure", "startDate": "2025-09-12", "notes": "With food"}
    ],
    "dosageChanges": [
        {"date": "2025-09-12", "medication": "Amlodipine", "from": "none", "to": "0.3125 mg", "reason": "Started"},
        {"date": "2026-01-19", "medication": "Amlodipine", "from": "0.3125 mg", "to": "0.625 mg", "reason": "Raised"},
    ],
    "history": [
        {"name": "Maropitant", "dosage": "8 mg", "frequency": "daily", "purpose": "Nausea",
         "startDate": "2021-04-01", "endDate": "2021-04-10", "stopReason": "Resolved"}
    ],
}

BLOOD_WORK = {
    "categories": [
        {
            "name": "Chemistry",
            "items": [
                {"name": "CREA", "unit": "umol/L", "results": [
                    {"date": "2025-09-10", "reportId": "bw-1", "institution": "City Vet",
                     "value": 168, "status": "high", "refRange": "44-159"},
                    {"date": "2025-06-02", "reportId": "bw-0", "institution": "River Vet",
                     "value": 140, "status": "normal", "refRange": "27-124"},
                ]},
                {"name": "BUN", "unit": "mmol/L", "results": [
                    {"date": "2025-09-10", "reportId": "bw-1", "value": 9.8, "status": "normal", "refRange": "2.5-9.6"},
                ]},
            ],
        },
        {"name": "Urinalysis", "items": []},
    ]
}

# file name -> payload, matching DEFAULT_COLLECTIONS
SAMPLE_COLLECTIONS: Dict[str, Any] = {
    "basic-info": BASIC_INFO,
    "reports-index": REPORTS_INDEX,
    "blood-pressure": BLOOD_PRESSURE,
    "weight": WEIGHT,
    "medications": MEDICATIONS,
    "blood-work": BLOOD_WORK,
}

# AppData key -> payload
SAMPLE_DATA: Dict[str, Any] = {
    "basic_info": BASIC_INFO,
    "reports_index": REPORTS_INDEX,
    "blood_pressure": BLOOD_PRESSURE,
    "weight": WEIGHT,
    "medications": MEDICATIONS,
    "blood_work": BLOOD_WORK,
}


def write_collections(folder, collections: Dict[str, Any]) -> str:
    """Utility to materialize <name>.json files for the collection loader."""
    os.makedirs(folder, exist_ok=True)
    for name, payload in collections.items():
        with open(os.path.join(folder, f"{name}.json"), "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)
    return str(folder)


@pytest.fixture
def data_folder(tmp_path):
    """A data folder holding every sample collection."""
    return write_collections(tmp_path / "Data", SAMPLE_COLLECTIONS)


@pytest.fixture
def sample_data():
    return AppData(SAMPLE_DATA)


@pytest.fixture
def nav_sections():
    return load_nav_sections(NAV_SECTIONS)


@pytest.fixture
def app_config(monkeypatch, data_folder):
    """Monkeypatch core.settings_loader.load_settings to point at the sample data folder."""

    def mock_load_settings():
        return {"app_config": {"data_folder": data_folder}}

    monkeypatch.setattr("core.settings_loader.load_settings", mock_load_settings)
    return data_folder


@pytest.fixture
def app(app_config):
    """Flask app booted against the sample data folder."""
    import app as app_module

    test_app = app_module.create_app()
    test_app.config["TESTING"] = True
    return test_app


@pytest.fixture
def client(app):
    """Flask test client fixture."""
    with app.test_client() as client:
        yield client
