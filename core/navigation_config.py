# Purpose: Central configuration for the sidebar navigation menu.
# This file defines the NAV_SECTIONS list used to build the navigation tree rendered in viewer.html.
#
# The list order is the permanent sidebar order. Two kinds of entries exist:
# - "static": a single link to a section view (path is the route it opens)
# - "group": a collapsible entry filled with reports of the category named by "key".
#   Declared "subcategories" become sub-headings in that order (empty ones are hidden);
#   an empty list means the group lists its reports directly, newest first (archive).

NAV_SECTIONS = [
    {
        "key": "overview",
        "label": "Overview",
        "icon": "overview",
        "type": "static",
        "path": "overview",
    },
    {
        "key": "imaging",
        "label": "Imaging Reports",
        "icon": "imaging",
        "type": "group",
        "subcategories": [
            {"key": "ct", "label": "CT"},
            {"key": "ultrasound", "label": "Ultrasound"},
            {"key": "xray", "label": "X-ray"},
        ],
    },
    {
        "key": "pathology",
        "label": "Pathology Reports",
        "icon": "pathology",
        "type": "group",
        "subcategories": [
            {"key": "biopsy", "label": "Biopsy / Pathology"},
            {"key": "cytology", "label": "Cytology"},
            {"key": "culture", "label": "Culture / Sensitivity"},
            {"key": "photos", "label": "Surgical Photos"},
        ],
    },
    {
        "key": "bloodwork",
        "label": "Blood Work",
        "icon": "bloodwork",
        "type": "static",
        "path": "bloodwork",
    },
    {
        "key": "bp",
        "label": "Blood Pressure / Weight",
        "icon": "bp",
        "type": "static",
        "path": "bp",
    },
    {
        "key": "medications",
        "label": "Medications",
        "icon": "medications",
        "type": "static",
        "path": "medications",
    },
    {
        "key": "archive",
        "label": "Past Check-ups",
        "icon": "archive",
        "type": "group",
        "subcategories": [],
    },
]
