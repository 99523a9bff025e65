from rtp_reporting_system.backend.mock_database import get_mock_database
from rtp_reporting_system.backend.school_report import (
    ReportPeriod,
    aggregate_enrollment,
    aggregate_student_attendance,
    aggregate_teacher_attendance,
    build_school_summary,
    generate_school_records,
    group_periods,
    latest_for_period,
    lesson_plan_quality,
    rows_for_period,
    summarize_enrolment,
    summarize_student_attendance,
    summarize_teacher_attendance,
)


def weekly(school, term, week, boys, girls, special_boys=0, special_girls=0, year="2025"):
    return {
        "school": school,
        "year": year,
        "term": term,
        "week_number": week,
        "normal_boys_total": boys,
        "normal_girls_total": girls,
        "special_boys_total": special_boys,
        "special_girls_total": special_girls,
        "total_population": boys + girls + special_boys + special_girls,
    }


def teacher_week(school, week, present, punctual, given, marked, rating=None, session_days=5):
    return {
        "school": school,
        "year": "2025",
        "term": "1",
        "week_number": week,
        "school_session_days": session_days,
        "days_present": present,
        "days_punctual": punctual,
        "days_absent": session_days - present,
        "excises_given": given,
        "excises_marked": marked,
        "lesson_plan_ratings": rating,
    }


def test_aggregates_return_none_without_rows():
    assert aggregate_enrollment([]) is None
    assert aggregate_student_attendance(None) is None
    assert aggregate_teacher_attendance([]) is None


def test_aggregate_enrollment():
    rows = [weekly("A", "1", 1, 40, 38, 2, 1), weekly("B", "1", 1, 10, 12)]
    assert aggregate_enrollment(rows) == {
        "total_students": 103,
        "gender_distribution": {"boys": 52, "girls": 51},
    }


def test_aggregate_student_attendance():
    present = weekly("A", "1", 1, 30, 30)
    present["total_population"] = 80
    result = aggregate_student_attendance([present])
    assert result == {"total_enrolled": 80, "total_present": 60, "attendance_rate": 75.0}


def test_aggregate_teacher_attendance_is_pooled():
    rows = [teacher_week("A", 1, 5, 5, 10, 5), teacher_week("A", 1, 0, 0, 0, 0)]
    result = aggregate_teacher_attendance(rows)
    assert result == {"total_teachers": 2, "attendance_rate": 50.0, "exercise_completion_rate": 50.0}


def test_summarize_enrolment():
    summary = summarize_enrolment(weekly("A", "2", 3, 40, 38, 2, 1))
    assert summary["total_students"] == 81
    assert summary["gender_distribution"] == {"boys": 42, "girls": 39}
    assert summary["special_needs"] == {"boys": 2, "girls": 1, "total": 3}
    assert summary["period"] == {"year": "2025", "term": "2", "week": 3}
    assert summarize_enrolment(None) is None


def test_summarize_student_attendance_uses_first_row():
    latest = weekly("A", "1", 4, 20, 20)
    latest["total_population"] = 50
    summary = summarize_student_attendance([latest, weekly("A", "1", 3, 1, 1)])
    assert summary["total_present"] == 40
    assert summary["attendance_rate"] == 80.0
    assert summary["period"]["week"] == 4


def test_summarize_teacher_attendance_averages_per_teacher():
    rows = [
        teacher_week("A", 2, 4, 2, 10, 5, "good"),
        teacher_week("A", 2, 0, 0, 0, 0, None, session_days=0),
    ]
    summary = summarize_teacher_attendance(rows)
    assert summary["total_teachers"] == 2
    # (4/5 + 0/1) / 2
    assert summary["attendance_rate"] == 40.0
    # (2/4 + 0/1) / 2
    assert summary["punctuality_rate"] == 25.0
    assert summary["exercise_completion_rate"] == 25.0
    assert summary["total_days_present"] == 4
    assert summary["lesson_plan_quality"]["good"] == {"count": 1, "percentage": 50.0}
    assert summary["lesson_plan_quality"]["not_rated"]["count"] == 1


def test_lesson_plan_quality_covers_every_rating():
    quality = lesson_plan_quality([teacher_week("A", 1, 5, 5, 1, 1, "excellent")])
    assert list(quality) == ["excellent", "good", "fair", "poor", "not_rated"]
    assert quality["excellent"]["percentage"] == 100.0
    assert lesson_plan_quality([]) is None


def test_latest_for_period():
    rows = [weekly("A", "1", 1, 1, 1), weekly("A", "1", 3, 1, 1), weekly("B", "1", 3, 2, 2), weekly("A", "2", 5, 1, 1)]
    latest = latest_for_period(rows, "2025", "1")
    assert [(r["school"], r["week_number"]) for r in latest] == [("A", 3), ("B", 3)]
    assert latest_for_period(rows, "2024", "1") == []


def test_group_periods_orders_newest_first():
    rows = [
        weekly("A", "1", 2, 1, 1, year="2024"),
        weekly("A", "2", 1, 1, 1, year="2025"),
        weekly("A", "1", 3, 1, 1, year="2025"),
        weekly("A", "1", 1, 1, 1, year="2025"),
    ]
    assert group_periods(rows) == [
        {"year": "2025", "terms": [{"term": "2", "weeks": [1]}, {"term": "1", "weeks": [1, 3]}]},
        {"year": "2024", "terms": [{"term": "1", "weeks": [2]}]},
    ]


def test_report_period_matches():
    row = weekly("A", "1", 2, 1, 1)
    assert ReportPeriod().matches(row)
    assert ReportPeriod(year=2025, term=1).matches(row)
    assert not ReportPeriod(week=3).matches(row)


def test_build_school_summary_defaults_to_latest_period():
    rows = {
        "enrolment": [weekly("A", "1", 1, 10, 10), weekly("A", "2", 2, 20, 20), weekly("B", "3", 1, 5, 5)],
        "student_attendance": [weekly("A", "2", 2, 15, 15)],
        "teacher_attendance": [],
    }
    summary = build_school_summary(rows, "A")
    assert summary["school"] == "A"
    assert summary["enrolment"]["total_students"] == 40
    assert summary["student_attendance"]["total_present"] == 30
    assert summary["teacher_attendance"] is None

    week_one = build_school_summary(rows, "A", ReportPeriod("2025", "1", 1))
    assert week_one["enrolment"]["total_students"] == 20
    assert week_one["student_attendance"] is None


def test_generate_school_records_covers_every_school():
    database = get_mock_database()
    records = generate_school_records(database, terms=("1",), weeks=2)
    schools = {r["school"] for r in records["enrolment"]}
    assert schools == set(database.schools)
    assert len(records["enrolment"]) == len(schools) * 2
    assert len(records["teacher_attendance"]) == len(database.teachers) * 2
    for row in records["teacher_attendance"]:
        assert row["days_punctual"] <= row["days_present"] <= row["school_session_days"]
        assert row["excises_marked"] <= row["excises_given"]
    assert generate_school_records(database) == generate_school_records(database)


def test_lesson_plan_quality_counts_unknown_ratings_as_not_rated():
    rows = [
        teacher_week("A", 1, 5, 5, 1, 1, "good"),
        teacher_week("A", 1, 5, 5, 1, 1, "outstanding"),
    ]
    quality = lesson_plan_quality(rows)
    assert quality["good"]["percentage"] == 50.0
    assert quality["not_rated"] == {"count": 1, "percentage": 50.0}
    assert sum(q["count"] for q in quality.values()) == 2


def test_rows_for_period_never_mixes_terms():
    rows = [weekly("A", "1", 4, 1, 1), weekly("A", "2", 4, 2, 2), weekly("A", "2", 3, 3, 3)]
    assert rows_for_period(rows, ReportPeriod()) == [rows[1]]
    assert rows_for_period(rows, ReportPeriod(year="2025")) == [rows[1]]
    assert rows_for_period(rows, ReportPeriod(term="1")) == [rows[0]]
    assert rows_for_period(rows, ReportPeriod(week=3)) == [rows[2]]
    assert rows_for_period([], ReportPeriod()) == []
