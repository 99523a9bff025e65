import random

from rtp_reporting_system.backend.indicators import (
    LTP_ENVIRONMENT_QUESTIONS,
    calculate_outcome_indicators,
    calculate_output_indicators,
    calculate_supplementary_indicators,
    filter_indicators,
    get_indicator,
    pct,
    score_teachers,
    to_number,
)
from rtp_reporting_system.backend.mock_database import Q45_OPTIONS, SurveyDataset

TEACHERS = [
    {"id": 1, "name": "Ama Owusu", "gender": "Male", "region": "R1", "district": "D1", "circuit": "C1", "school": "S1"},
    {"id": 2, "name": "Kofi Mensah", "gender": "Female", "region": "R1", "district": "D1", "circuit": "C1", "school": "S2"},
    {"id": 3, "name": "Efua Boateng", "gender": "Female", "region": "R2", "district": "D2", "circuit": "C2", "school": "S3"},
]


def answer(teacher_id, question_id, value, **extra):
    teacher = next(t for t in TEACHERS if t["id"] == teacher_id)
    record = {
        "id": teacher_id * 100 + question_id,
        "question_id": question_id,
        "teacher_id": teacher_id,
        "school": teacher["school"],
        "district": teacher["district"],
        "region": teacher["region"],
        "circuit": teacher["circuit"],
        "answer": value,
    }
    record.update(extra)
    return record


def make_dataset():
    return SurveyDataset(
        TEACHERS,
        answers_school_output=[
            answer(1, 1, "2"),
            answer(1, 12, "10"),
            answer(1, 13, "20"),
            answer(2, 12, "5"),
            answer(2, 13, "5"),
        ],
        answers_district_output=[
            {"id": 1, "question_id": 1, "teacher_id": None, "district": "D1", "region": "R1", "answer": "4"},
            {"id": 2, "question_id": 1, "teacher_id": None, "district": "D2", "region": "R2", "answer": "6"},
        ],
        answers_consolidated_checklist=[
            answer(1, 17, "Yes"),
            answer(1, 17, "No"),
            answer(2, 17, "No"),
            answer(1, 18, "Yes", has_upload=True, upload_file_path="/uploads/s1.pdf"),
            answer(2, 18, "No"),
            answer(1, 19, "Yes"),
            answer(2, 19, "No"),
            answer(3, 19, "Yes"),
        ],
        answers_pip=[
            answer(1, 40, "Frequently"),
            answer(1, 41, "Not at all"),
            answer(1, 42, "Both"),
            answer(1, 43, "Frequently"),
            answer(1, 44, "Frequently"),
            answer(1, 45, Q45_OPTIONS[4]),
            answer(1, 52, "Yes"),
            answer(1, 53, "Yes"),
            answer(1, 54, "Yes"),
            answer(2, 43, "Not at all"),
            answer(2, 44, "Not at all"),
            answer(2, 45, Q45_OPTIONS[0]),
            answer(2, 52, "Yes"),
        ],
        school_dropouts={"S1": 3, "S2": 0},
    )


def by_level(indicator, level):
    return {entry[level]: entry["value"] for entry in indicator["breakdown"][f"by_{level}"]}


def outcome(indicator_id):
    return get_indicator(calculate_outcome_indicators(make_dataset()), indicator_id)


def test_helpers():
    assert pct(1, 3) == 33.3
    assert pct(5, 0) == 0
    assert to_number("3.0") == 3
    assert to_number("2.5") == 2.5
    assert to_number("abc") == 0
    assert to_number(None) == 0


def test_outcome_indicator_ids():
    ids = [i["id"] for i in calculate_outcome_indicators(make_dataset())]
    assert ids == [f"oi{n}" for n in range(1, 10)]


def test_enrollment():
    oi1 = outcome("oi1")
    assert oi1["value"] == 40
    assert by_level(oi1, "region") == {"R1": 40, "R2": 0}
    r1 = oi1["breakdown"]["by_region"][0]
    assert r1["details"] == "Boys: 15, Girls: 25"


def test_dropout_rate():
    oi2 = outcome("oi2")
    assert oi2["value"] == 7.5
    assert by_level(oi2, "region") == {"R1": 7.5, "R2": 0}
    # S3 has no enrolment and is left out
    assert by_level(oi2, "school") == {"S1": 10.0, "S2": 0.0}


def test_implementation_plans_count_each_school_once():
    oi3 = outcome("oi3")
    assert oi3["value"] == 50.0
    assert by_level(oi3, "school") == {"S1": 100, "S2": 0}
    assert by_level(oi3, "district") == {"D1": 50.0}


def test_development_plans_over_roster_schools():
    oi4 = outcome("oi4")
    assert oi4["value"] == 33.3
    assert by_level(oi4, "region") == {"R1": 50.0, "R2": 0}


def test_schools_reached_and_placeholder():
    oi5 = outcome("oi5")
    assert oi5["value"] == 3
    assert by_level(oi5, "region") == {"R1": 2, "R2": 1}

    oi6 = outcome("oi6")
    assert oi6["value"] == "N/A"
    assert oi6["breakdown"] == {}


def test_teacher_lesson_plans():
    oi7 = outcome("oi7")
    assert oi7["value"] == 66.7
    assert by_level(oi7, "school") == {"S1": 100.0, "S2": 0.0, "S3": 100.0}


def test_learning_environments_above_average():
    oi8 = outcome("oi8")
    assert oi8["value"] == 50.0
    genders = {g["gender"]: g for g in oi8["breakdown"]["by_gender"]}
    assert genders["Male"]["value"] == 100.0
    assert genders["Female"]["observed"] == 1
    assert genders["Female"]["value"] == 0
    teachers = {t["teacher"]: t for t in oi8["breakdown"]["by_teacher"]}
    assert teachers["Ama Owusu"]["score"] == 15
    assert teachers["Kofi Mensah"]["above_average"] is False
    # R2 teacher was never observed
    assert "R2" not in by_level(oi8, "region")


def test_score_teachers_only_returns_observed():
    observed = score_teachers(make_dataset(), LTP_ENVIRONMENT_QUESTIONS)
    assert [t["teacher"] for t in observed] == ["Ama Owusu", "Kofi Mensah"]
    assert observed[1]["total_score"] == 1


def test_score_teachers_keeps_matched_score_over_unknown_answer():
    dataset = SurveyDataset(
        TEACHERS,
        answers_pip=[answer(1, 43, "Frequently"), answer(1, 43, "Unsure"), answer(2, 44, "Unsure")],
    )
    observed = score_teachers(dataset, LTP_ENVIRONMENT_QUESTIONS)
    assert [t["teacher"] for t in observed] == ["Ama Owusu", "Kofi Mensah"]
    assert observed[0]["question_scores"][43] == 5
    assert observed[0]["total_score"] == 5
    assert observed[1]["total_score"] == 0


def test_teachers_with_ltp_skills_breakdown_levels():
    oi9 = outcome("oi9")
    assert set(oi9["breakdown"]) == {"by_region", "by_district", "by_school", "by_gender", "by_teacher"}
    assert 0 <= oi9["value"] <= 100


def test_output_indicators():
    indicators = calculate_output_indicators(make_dataset(), random.Random(1))
    out12 = get_indicator(indicators, "out12")
    assert out12["value"] == 15
    assert out12["category"] == "school_output"
    assert by_level(out12, "teacher") == {"Ama Owusu": 10, "Kofi Mensah": 5, "Efua Boateng": 0}

    district = get_indicator(indicators, "out_district_1")
    assert district["value"] == 10
    assert by_level(district, "district") == {"D1": 4, "D2": 6}
    assert all(i["trend"] in ("up", "down") for i in indicators)


def test_output_trend_is_reproducible():
    first = calculate_output_indicators(make_dataset(), random.Random(7))
    second = calculate_output_indicators(make_dataset(), random.Random(7))
    assert [i["trend"] for i in first] == [i["trend"] for i in second]


def test_supplementary_indicators():
    si1, si2, si3 = calculate_supplementary_indicators(make_dataset())
    assert si1["value"] == 33.3
    assert si2["value"] == 50.0
    assert si3["value"] == 50.0
    assert si3["breakdown"]["by_teacher"] == [
        {"teacher": "Ama Owusu", "value": True},
        {"teacher": "Kofi Mensah", "value": False},
    ]


def test_filter_and_lookup():
    indicators = calculate_output_indicators(make_dataset())
    district = filter_indicators(indicators, category="district_output")
    assert district and all(i["category"] == "district_output" for i in district)
    monitoring = filter_indicators(indicators, "district_output", "monitoring")
    assert all(i["subcategory"] == "monitoring" for i in monitoring)
    assert filter_indicators(indicators) == indicators
    assert get_indicator(indicators, "missing") is None
