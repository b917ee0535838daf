# Purpose: Tests for grouping reports by category/subcategory and date ordering.

from core.report_grouper import (
    DEFAULT_SUBCATEGORY,
    date_sort_key,
    flatten_category,
    group_reports,
    sort_newest_first,
)


def test_date_sort_key_orders_mixed_granularity():
    dates = ["2025-09-01", None, "2025", "2025-09", "garbage", "2024-12-31"]
    ordered = sorted(dates, key=date_sort_key, reverse=True)
    assert ordered[:4] == ["2025-09-01", "2025-09", "2025", "2024-12-31"]
    assert set(ordered[4:]) == {None, "garbage"}


def test_sort_newest_first_is_stable_for_equal_dates():
    reports = [{"id": "a", "date": "2025-01"}, {"id": "b", "date": "2025-01"}, {"id": "c", "date": "2025-02"}]
    assert [r["id"] for r in sort_newest_first(reports)] == ["c", "a", "b"]


def test_group_reports_partitions_and_sorts():
    reports = [
        {"id": "ct-old", "category": "imaging", "subcategory": "ct", "date": "2025-01-01"},
        {"id": "ct-new", "category": "imaging", "subcategory": "ct", "date": "2026-01-01"},
        {"id": "us", "category": "imaging", "subcategory": "ultrasound", "date": "2025-06"},
        {"id": "arch", "category": "archive", "date": "2024-06-12"},
        {"id": "lost", "date": "2024-01-01"},
    ]
    groups = group_reports(reports)

    assert list(groups) == ["imaging", "archive"]
    assert [r["id"] for r in groups["imaging"]["ct"]] == ["ct-new", "ct-old"]
    assert [r["id"] for r in groups["archive"][DEFAULT_SUBCATEGORY]] == ["arch"]
    assert all(r["id"] != "lost" for subs in groups.values() for rs in subs.values() for r in rs)


def test_flatten_category_merges_subcategories_newest_first():
    groups = group_reports(
        [
            {"id": "a", "category": "pathology", "subcategory": "biopsy", "date": "2025-01"},
            {"id": "b", "category": "pathology", "subcategory": "photos", "date": "2025-03"},
            {"id": "c", "category": "pathology", "date": "2025-02"},
        ]
    )
    assert [r["id"] for r in flatten_category(groups, "pathology")] == ["b", "c", "a"]
    assert flatten_category(groups, "unknown") == []
