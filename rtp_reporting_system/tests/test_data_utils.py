from datetime import date, datetime, timedelta

from rtp_reporting_system.backend.data_utils import (
    calculate_percentage,
    calculate_stats,
    cap_percentage,
    format_date,
    format_date_short,
    group_submissions_by_entity,
    parse_datetime,
    relative_time,
    sort_by_date,
    survey_type_name,
)


def test_survey_type_name():
    assert survey_type_name("school_output") == "School Output"
    assert survey_type_name("partners_in_play") == "Partners in Play"
    assert survey_type_name("lesson_notes") == "Lesson Notes"
    assert survey_type_name(None) == "Unknown"


def test_parse_datetime():
    assert parse_datetime("2025-03-05T14:30:00") == datetime(2025, 3, 5, 14, 30)
    assert parse_datetime("2025-03-05T14:30:00Z").utcoffset() == timedelta(0)
    assert parse_datetime(date(2025, 3, 5)) == datetime(2025, 3, 5)
    assert parse_datetime("yesterday") is None
    assert parse_datetime("") is None


def test_format_date():
    assert format_date("2025-03-05T14:30:00") == "Mar 5, 2025, 02:30 PM"
    assert format_date(None) == "N/A"
    assert format_date("garbage") == "N/A"
    # Accra is on UTC all year
    assert format_date("2025-03-05T14:30:00+01:00") == "Mar 5, 2025, 01:30 PM"


def test_format_date_short():
    assert format_date_short("2025-03-05T14:30:00") == "05 03 2025"
    assert format_date_short("2025-03-05T14:30:00", include_day=True) == "Wed 05 03 2025"
    assert format_date_short(None) == ""


def test_relative_time():
    now = datetime(2025, 3, 10, 12, 0)
    assert relative_time(now - timedelta(seconds=30), now) == "just now"
    assert relative_time(now - timedelta(minutes=1), now) == "1 minute ago"
    assert relative_time(now - timedelta(hours=5), now) == "5 hours ago"
    assert relative_time(now - timedelta(days=2), now) == "2 days ago"
    assert relative_time(datetime(2025, 2, 1, 9, 0), now) == "01 02 2025"
    assert relative_time(None, now) == ""


def test_sort_by_date_prefers_date_field():
    submissions = [
        {"id": 1, "submitted_at": "2025-01-01T00:00:00"},
        {"id": 2, "date": "2025-03-01T00:00:00", "submitted_at": "2024-01-01T00:00:00"},
        {"id": 3},
        {"id": 4, "submitted_at": "2025-02-01T00:00:00Z"},
    ]
    assert [s["id"] for s in sort_by_date(submissions)] == [2, 4, 1, 3]
    assert [s["id"] for s in sort_by_date(submissions, newest_first=False)] == [3, 1, 4, 2]


def test_percentages():
    assert calculate_percentage(1, 3, 1) == 33.3
    assert calculate_percentage(5, 0) == 0
    assert calculate_percentage(150, 100, 0) == 100
    assert calculate_percentage(150, 100) == 150
    assert cap_percentage(None) == 0
    assert cap_percentage(float("nan")) == 0
    assert cap_percentage(120.456) == 100


def test_group_submissions_by_entity():
    submissions = [
        {"id": 1, "district": "D1"},
        {"id": 2, "district": "D2"},
        {"id": 3, "district": "D1"},
        {"id": 4},
    ]
    groups = group_submissions_by_entity(submissions, "district")
    assert {name: [s["id"] for s in members] for name, members in groups.items()} == {"D1": [1, 3], "D2": [2]}
    assert group_submissions_by_entity(None, "district") == {}


def test_calculate_stats():
    submissions = [
        {"id": 1, "score": 4, "completed": True, "submitted_at": "2025-01-01T00:00:00"},
        {"id": 2, "score": 2, "submitted_at": "2025-02-01T00:00:00"},
        {"id": 3, "completed": True, "submitted_at": "2024-12-01T00:00:00"},
        {"id": 4, "completed": True},
    ]
    stats = calculate_stats(submissions)
    assert stats["count"] == 4
    assert stats["average_score"] == 3
    assert stats["completion_rate"] == 75
    assert stats["latest_submission"]["id"] == 2

    empty = calculate_stats([])
    assert empty == {"count": 0, "average_score": 0, "completion_rate": 0, "latest_submission": None}
