"""
RTP indicator calculations.

Rolls survey answers up into output and outcome indicators with breakdowns
by region, district, school and teacher. Every indicator has the shape::

    {
        "id": "oi3",
        "name": "...",
        "value": 66.7,
        "trend": "up",
        "breakdown": {"by_region": [{"region": "BONO", "value": 50.0}, ...]},
        "calculation_trace": [{"step": "...", "value": ...}, ...],
    }

Percentages are rounded to one decimal place.
"""

import logging
import random
from typing import Any, Callable, Dict, Iterable, List, Optional

from rtp_reporting_system.backend.mock_database import (
    Q29_OPTIONS,
    Q30_OPTIONS,
    Q31_OPTIONS,
    Q32_OPTIONS,
    Q33_OPTIONS,
    Q39_OPTIONS,
    Q45_OPTIONS,
    Q49_OPTIONS,
    SurveyDataset,
)

logger = logging.getLogger(__name__)

LEVELS = ("region", "district", "school")

# ============================================================================
# SCORING TABLES
# ============================================================================

# Q43 friendly tone / Q44 acknowledging effort
TONE_SCORES = {
    "Frequently": 5,
    "Sometimes, but not regularly": 4,
    "Only with boys": 3,
    "Only with girls": 3,
    "Not at all": 0,
}

# Q45 pupil participation, 1 (teacher keeps talking) to 5 (mutual learning)
PARTICIPATION_SCORES = dict(zip(Q45_OPTIONS, range(1, 6)))

LTP_ENVIRONMENT_QUESTIONS = {
    43: TONE_SCORES,
    44: TONE_SCORES,
    45: PARTICIPATION_SCORES,
}

LTP_SKILL_QUESTIONS = {
    29: dict(zip(Q29_OPTIONS, (2, 1, 0))),
    30: dict(zip(Q30_OPTIONS, range(1, 6))),
    31: dict(zip(Q31_OPTIONS, (2, 1, 0))),
    32: dict(zip(Q32_OPTIONS, range(1, 5))),
    33: {option: (0 if option == "No" else 1) for option in Q33_OPTIONS},
    39: dict(zip(Q39_OPTIONS, range(1, 6))),
    45: PARTICIPATION_SCORES,
    46: {"Yes, mixed group": 4, "Yes, Boys only": 3, "Yes, Girls only": 3, "Not at all": 0},
    48: {"Frequently": 2, "Sometimes, but not regularly": 1, "Not at all": 0},
    49: dict(zip(Q49_OPTIONS, range(1, 6))),
}

SCHOOL_OUTPUT_SUBCATEGORIES = [
    ("teacher_capacity", ("training", "trained", "capacity", "workshop")),
    ("curriculum", ("curriculum", "lesson plan", "teaching material", "syllabus")),
    ("student_engagement", ("student", "learner", "participation", "attendance")),
]

DISTRICT_OUTPUT_SUBCATEGORIES = [
    ("district_support", ("support", "resource", "funding", "assistance")),
    ("monitoring", ("monitor", "evaluation", "assessment", "visit", "report")),
]


def categorize_question(text: str, categories, default: str) -> str:
    """First category whose keywords appear in the question text (case-sensitive)."""
    for name, keywords in categories:
        if any(keyword in text for keyword in keywords):
            return name
    return default


# ============================================================================
# HELPERS
# ============================================================================

def to_number(value: Any) -> float:
    """Numeric answer value; empty and non-numeric answers count as 0."""
    if value is None or value == "":
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return int(number) if number.is_integer() else number


def pct(part: float, whole: float) -> float:
    if not whole:
        return 0
    return round(part / whole * 100, 1)


def _entries(groups: Dict[str, Any], key: str, value_fn: Callable[[Any], Any],
             include: Optional[Callable[[Any], bool]] = None) -> List[Dict[str, Any]]:
    return [
        {key: name, "value": value_fn(data)}
        for name, data in groups.items()
        if include is None or include(data)
    ]


def _first_answer(answers: Iterable[Dict[str, Any]], teacher_id, question_id):
    for answer in answers:
        if answer.get("teacher_id") == teacher_id and answer["question_id"] == question_id:
            return answer
    return None


def _sum_answers(answers: Iterable[Dict[str, Any]], question_id: int) -> float:
    return sum(to_number(a["answer"]) for a in answers if a["question_id"] == question_id)


def _trace_ratio(part, whole) -> Dict[str, Any]:
    return {"step": "Calculation", "formula": f"{part}/{whole}*100", "result": pct(part, whole)}


# ============================================================================
# OUTPUT INDICATORS
# ============================================================================

def calculate_output_indicators(dataset: SurveyDataset, rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """One indicator per school output and district output question."""
    rng = rng or random.Random(0)
    indicators = []

    for question in dataset.questions_school_output:
        relevant = [a for a in dataset.answers_school_output if a["question_id"] == question["id"]]
        by_region: Dict[str, float] = {}
        by_district: Dict[str, float] = {}
        by_school: Dict[str, float] = {}
        by_teacher: Dict[str, float] = {}

        for teacher in dataset.teachers:
            by_region.setdefault(teacher["region"], 0)
            by_district.setdefault(teacher["district"], 0)
            by_school.setdefault(teacher["school"], 0)
            by_teacher[teacher["name"]] = 0

            answer = _first_answer(relevant, teacher["id"], question["id"])
            if answer:
                value = to_number(answer["answer"])
                by_region[teacher["region"]] += value
                by_district[teacher["district"]] += value
                by_school[teacher["school"]] += value
                by_teacher[teacher["name"]] = value

        total = sum(by_region.values())
        indicators.append({
            "id": f"out{question['id']}",
            "name": question["question"],
            "value": total,
            "category": "school_output",
            "subcategory": categorize_question(
                question["question"], SCHOOL_OUTPUT_SUBCATEGORIES, "teacher_capacity"
            ),
            "trend": "up" if rng.random() > 0.3 else "down",
            "breakdown": {
                "by_region": _entries(by_region, "region", lambda v: v),
                "by_district": _entries(by_district, "district", lambda v: v),
                "by_school": _entries(by_school, "school", lambda v: v),
                "by_teacher": _entries(by_teacher, "teacher", lambda v: v),
            },
            "calculation_trace": [
                {"step": "Total responses", "value": len(relevant)},
                {"step": "Sum of all values", "value": total},
                {"step": "Calculation", "formula": "Sum of all reported values", "result": total},
            ],
        })

    for question in dataset.questions_district_output:
        relevant = [a for a in dataset.answers_district_output if a["question_id"] == question["id"]]
        by_region = {}
        by_district = {}
        for answer in relevant:
            value = to_number(answer["answer"])
            by_region[answer.get("region")] = by_region.get(answer.get("region"), 0) + value
            by_district[answer.get("district")] = by_district.get(answer.get("district"), 0) + value

        total = sum(by_region.values())
        indicators.append({
            "id": f"out_district_{question['id']}",
            "name": question["question"],
            "value": total,
            "category": "district_output",
            "subcategory": categorize_question(
                question["question"], DISTRICT_OUTPUT_SUBCATEGORIES, "district_support"
            ),
            "trend": "up" if rng.random() > 0.3 else "down",
            "breakdown": {
                "by_region": _entries(by_region, "region", lambda v: v),
                "by_district": _entries(by_district, "district", lambda v: v),
            },
            "calculation_trace": [
                {"step": "Total responses", "value": len(relevant)},
                {"step": "Sum of all values", "value": total},
                {"step": "Calculation", "formula": "Sum of all reported values", "result": total},
            ],
        })

    return indicators


# ============================================================================
# OUTCOME INDICATORS
# ============================================================================

def calculate_enrollment(dataset: SurveyDataset) -> Dict[str, Any]:
    answers = dataset.answers_school_output
    boys_enrolled = _sum_answers(answers, 12)
    girls_enrolled = _sum_answers(answers, 13)
    total = boys_enrolled + girls_enrolled

    groups = {level: {} for level in LEVELS}
    for teacher in dataset.teachers:
        boys = _first_answer(answers, teacher["id"], 12)
        girls = _first_answer(answers, teacher["id"], 13)
        for level in LEVELS:
            bucket = groups[level].setdefault(teacher[level], {"boys": 0, "girls": 0})
            if boys:
                bucket["boys"] += to_number(boys["answer"])
            if girls:
                bucket["girls"] += to_number(girls["answer"])

    def entries(level):
        return [
            {
                level: name,
                "value": data["boys"] + data["girls"],
                "details": f"Boys: {data['boys']}, Girls: {data['girls']}",
            }
            for name, data in groups[level].items()
        ]

    return {
        "id": "oi1",
        "name": "Total Primary School Enrollment",
        "value": total,
        "trend": "up",
        "breakdown": {f"by_{level}": entries(level) for level in LEVELS},
        "calculation_trace": [
            {"step": "Boys enrolled", "value": boys_enrolled},
            {"step": "Girls enrolled", "value": girls_enrolled},
            {"step": "Total enrollment", "formula": f"{boys_enrolled} + {girls_enrolled}", "result": total},
        ],
    }


def calculate_dropout_rate(dataset: SurveyDataset) -> Dict[str, Any]:
    """Dropouts over enrolment; per-school dropout counts roll up to districts and regions."""
    groups = {level: {} for level in LEVELS}
    school_location = {}
    for teacher in dataset.teachers:
        school_location.setdefault(teacher["school"], teacher)
        for level in LEVELS:
            groups[level].setdefault(teacher[level], {"enrolled": 0, "dropout": 0})

    for answer in dataset.answers_school_output:
        if answer["question_id"] not in (12, 13):
            continue
        teacher = dataset.teacher_by_id(answer.get("teacher_id"))
        if not teacher:
            continue
        value = to_number(answer["answer"])
        for level in LEVELS:
            groups[level][teacher[level]]["enrolled"] += value

    for school, dropouts in dataset.school_dropouts.items():
        location = school_location.get(school)
        if not location:
            continue
        for level in LEVELS:
            groups[level][location[level]]["dropout"] += dropouts

    total_enrolled = sum(d["enrolled"] for d in groups["region"].values())
    total_dropout = sum(d["dropout"] for d in groups["region"].values())
    rate = pct(total_dropout, total_enrolled)

    def rate_of(data):
        return pct(data["dropout"], data["enrolled"])

    return {
        "id": "oi2",
        "name": "Primary School dropout rate",
        "value": rate,
        "trend": "down",
        "breakdown": {
            "by_region": _entries(groups["region"], "region", rate_of),
            "by_district": _entries(groups["district"], "district", rate_of),
            "by_school": _entries(groups["school"], "school", rate_of, lambda d: d["enrolled"] > 0),
        },
        "calculation_trace": [
            {"step": "Total enrollment", "value": total_enrolled},
            {"step": "Total dropouts", "value": total_dropout},
            _trace_ratio(total_dropout, total_enrolled),
        ],
    }


def calculate_implementation_plans(dataset: SurveyDataset) -> Dict[str, Any]:
    """Checklist Q17: each school counts once, as soon as one answer says Yes."""
    schools = {}
    with_plans = {}
    by_region = {}
    by_district = {}

    for answer in dataset.answers_consolidated_checklist:
        if answer["question_id"] != 17:
            continue
        school = answer.get("school")
        region = by_region.setdefault(answer.get("region"), {"total": 0, "with_plans": 0})
        district = by_district.setdefault(answer.get("district"), {"total": 0, "with_plans": 0})

        if school not in schools:
            schools[school] = True
            region["total"] += 1
            district["total"] += 1
        if answer["answer"] == "Yes" and school not in with_plans:
            with_plans[school] = True
            region["with_plans"] += 1
            district["with_plans"] += 1

    def rate_of(data):
        return pct(data["with_plans"], data["total"])

    return {
        "id": "oi3",
        "name": "Percentage of Schools with Implementation Plans",
        "value": pct(len(with_plans), len(schools)),
        "trend": "up",
        "breakdown": {
            "by_region": _entries(by_region, "region", rate_of),
            "by_district": _entries(by_district, "district", rate_of),
            "by_school": [
                {"school": school, "value": 100 if school in with_plans else 0}
                for school in schools
            ],
        },
        "calculation_trace": [
            {"step": "Total schools", "value": len(schools)},
            {"step": "Schools with implementation plans", "value": len(with_plans)},
            _trace_ratio(len(with_plans), len(schools)),
        ],
    }


def calculate_development_plans(dataset: SurveyDataset) -> Dict[str, Any]:
    """Checklist Q18 answers carrying an uploaded plan, over all schools reached."""
    schools = {}
    for teacher in dataset.teachers:
        schools.setdefault(teacher["school"], teacher)

    with_plans = set()
    for answer in dataset.answers_consolidated_checklist:
        if answer["question_id"] == 18 and (answer.get("has_upload") or answer.get("upload_file_path")):
            with_plans.add(answer.get("school"))
    with_plans &= set(schools)

    by_region = {}
    by_district = {}
    for school, location in schools.items():
        for groups, level in ((by_region, "region"), (by_district, "district")):
            bucket = groups.setdefault(location[level], {"total": 0, "with_plans": 0})
            bucket["total"] += 1
            if school in with_plans:
                bucket["with_plans"] += 1

    def rate_of(data):
        return pct(data["with_plans"], data["total"])

    return {
        "id": "oi4",
        "name": "Percentage of schools that have school development plans that include LtP and/or holistic skills assessment",
        "value": pct(len(with_plans), len(schools)),
        "trend": "up",
        "breakdown": {
            "by_region": _entries(by_region, "region", rate_of),
            "by_district": _entries(by_district, "district", rate_of),
        },
        "calculation_trace": [
            {"step": "Total schools reached", "value": len(schools)},
            {"step": "Schools with development plans that include LtP or holistic skills", "value": len(with_plans)},
            _trace_ratio(len(with_plans), len(schools)),
        ],
    }


def calculate_schools_reached(dataset: SurveyDataset) -> Dict[str, Any]:
    by_region: Dict[str, set] = {}
    by_district: Dict[str, set] = {}
    schools = set()
    for teacher in dataset.teachers:
        by_region.setdefault(teacher["region"], set()).add(teacher["school"])
        by_district.setdefault(teacher["district"], set()).add(teacher["school"])
        schools.add(teacher["school"])

    return {
        "id": "oi5",
        "name": "Number of Schools reached",
        "value": len(schools),
        "trend": "up",
        "breakdown": {
            "by_region": _entries(by_region, "region", len),
            "by_district": _entries(by_district, "district", len),
        },
        "calculation_trace": [
            {"step": "Total unique schools reached", "value": len(schools)},
            {"step": "Calculation method", "formula": "Count of unique schools visited", "result": len(schools)},
        ],
    }


def district_officials_indicator() -> Dict[str, Any]:
    return {
        "id": "oi6",
        "name": "Percentage of district officials that score satisfactorily (70% or higher) on tests of knowledge and skills of coaching and mentoring on PBL (M/F)",
        "value": "N/A",
        "trend": None,
        "breakdown": {},
        "calculation_trace": [
            {"step": "Note", "value": "This indicator is displayed for reference only and is not calculated"},
        ],
    }


def calculate_teacher_lesson_plans(dataset: SurveyDataset) -> Dict[str, Any]:
    """Checklist Q19: lesson plans assessed as including LtP over lesson plans assessed."""
    groups = {level: {} for level in LEVELS}
    for teacher in dataset.teachers:
        for level in LEVELS:
            groups[level].setdefault(teacher[level], {"assessed": 0, "including_ltp": 0})

    total_assessed = 0
    total_including = 0
    for answer in dataset.answers_consolidated_checklist:
        if answer["question_id"] != 19:
            continue
        total_assessed += 1
        included = answer["answer"] == "Yes"
        if included:
            total_including += 1
        for level in LEVELS:
            bucket = groups[level].setdefault(answer.get(level), {"assessed": 0, "including_ltp": 0})
            bucket["assessed"] += 1
            if included:
                bucket["including_ltp"] += 1

    def rate_of(data):
        return pct(data["including_ltp"], data["assessed"])

    def assessed(data):
        return data["assessed"] > 0

    return {
        "id": "oi7",
        "name": "Percentage of teachers with lessons plans that include LtP",
        "value": pct(total_including, total_assessed),
        "trend": "up",
        "breakdown": {
            f"by_{level}": _entries(groups[level], level, rate_of, assessed) for level in LEVELS
        },
        "calculation_trace": [
            {"step": "Total teachers' lesson plans assessed", "value": total_assessed},
            {"step": "Teachers' lesson plans that include LtP", "value": total_including},
            _trace_ratio(total_including, total_assessed),
        ],
    }


def score_teachers(dataset: SurveyDataset, scoring: Dict[int, Dict[str, int]]) -> List[Dict[str, Any]]:
    """
    Score every roster teacher on the given Partners in Play questions.

    A teacher counts as observed once any of the questions was answered;
    answers outside the scoring table leave the score unchanged.
    """
    scores = {}
    for teacher in dataset.teachers:
        scores[teacher["id"]] = {
            "teacher": teacher["name"],
            "gender": teacher.get("gender") or "Unknown",
            "region": teacher["region"],
            "district": teacher["district"],
            "school": teacher["school"],
            "observed": False,
            "question_scores": {question_id: 0 for question_id in scoring},
        }

    for answer in dataset.answers_pip:
        record = scores.get(answer.get("teacher_id"))
        table = scoring.get(answer["question_id"])
        if record is None or table is None:
            continue
        record["observed"] = True
        if answer["answer"] in table:
            record["question_scores"][answer["question_id"]] = table[answer["answer"]]

    observed = []
    for record in scores.values():
        if record["observed"]:
            record["total_score"] = sum(record["question_scores"].values())
            observed.append(record)
    return observed


def _above_average_indicator(dataset, scoring, indicator_id, name):
    observed = score_teachers(dataset, scoring)
    average = sum(t["total_score"] for t in observed) / len(observed) if observed else 0
    for teacher in observed:
        teacher["above_average"] = teacher["total_score"] > average
    above = [t for t in observed if t["above_average"]]

    groups = {level: {} for level in LEVELS}
    for teacher in dataset.teachers:
        for level in LEVELS:
            groups[level].setdefault(teacher[level], {"observed": 0, "above_average": 0})
    for teacher in observed:
        for level in LEVELS:
            bucket = groups[level][teacher[level]]
            bucket["observed"] += 1
            if teacher["above_average"]:
                bucket["above_average"] += 1

    by_gender = []
    gender_trace = []
    for gender in ("Male", "Female"):
        gender_observed = [t for t in observed if t["gender"] == gender]
        gender_above = [t for t in gender_observed if t["above_average"]]
        value = pct(len(gender_above), len(gender_observed))
        by_gender.append({
            "gender": gender,
            "observed": len(gender_observed),
            "above_average": len(gender_above),
            "value": value,
        })
        gender_trace.append({
            "step": f"{gender} teachers above average",
            "value": f"{len(gender_above)}/{len(gender_observed)} ({value:.1f}%)",
        })

    def rate_of(data):
        return pct(data["above_average"], data["observed"])

    def was_observed(data):
        return data["observed"] > 0

    breakdown = {
        f"by_{level}": _entries(groups[level], level, rate_of, was_observed) for level in LEVELS
    }
    breakdown["by_gender"] = by_gender
    breakdown["by_teacher"] = [
        {
            "teacher": t["teacher"],
            "gender": t["gender"],
            "score": t["total_score"],
            "above_average": t["above_average"],
            "value": t["total_score"],
        }
        for t in observed
    ]

    return {
        "id": indicator_id,
        "name": name,
        "value": pct(len(above), len(observed)),
        "trend": "up",
        "breakdown": breakdown,
        "calculation_trace": [
            {"step": "Total teachers observed", "value": len(observed)},
            {"step": "Average score across all teachers", "value": round(average, 2)},
            {"step": "Teachers scoring above average", "value": len(above)},
            *gender_trace,
            _trace_ratio(len(above), len(observed)),
        ],
    }


def calculate_ltp_learning_environments(dataset: SurveyDataset) -> Dict[str, Any]:
    return _above_average_indicator(
        dataset,
        LTP_ENVIRONMENT_QUESTIONS,
        "oi8",
        "Percentage learning environments that show evidence of LtP methods or manipulative",
    )


def calculate_teachers_with_ltp_skills(dataset: SurveyDataset) -> Dict[str, Any]:
    return _above_average_indicator(
        dataset,
        LTP_SKILL_QUESTIONS,
        "oi9",
        "Percentage of Teachers who have the skills to facilitate LtP in their learning environments with their children in accordance with the LtP Principles (M/F)",
    )


def calculate_outcome_indicators(dataset: SurveyDataset) -> List[Dict[str, Any]]:
    logger.debug(
        "Calculating outcome indicators for %d teachers, %d checklist and %d PiP answers",
        len(dataset.teachers),
        len(dataset.answers_consolidated_checklist),
        len(dataset.answers_pip),
    )
    return [
        calculate_enrollment(dataset),
        calculate_dropout_rate(dataset),
        calculate_implementation_plans(dataset),
        calculate_development_plans(dataset),
        calculate_schools_reached(dataset),
        district_officials_indicator(),
        calculate_teacher_lesson_plans(dataset),
        calculate_ltp_learning_environments(dataset),
        calculate_teachers_with_ltp_skills(dataset),
    ]


# ============================================================================
# SUPPLEMENTARY INDICATORS
# ============================================================================

def _teacher_flag_indicator(dataset, indicator_id, name, is_observed, is_positive, labels):
    groups = {level: {} for level in LEVELS}
    by_teacher = {}
    observed_count = 0
    positive_count = 0

    for teacher in dataset.teachers:
        for level in LEVELS:
            groups[level].setdefault(teacher[level], {"observed": 0, "positive": 0})
        if not is_observed(teacher):
            continue
        observed_count += 1
        positive = is_positive(teacher)
        by_teacher[teacher["name"]] = positive
        for level in LEVELS:
            groups[level][teacher[level]]["observed"] += 1
        if positive:
            positive_count += 1
            for level in LEVELS:
                groups[level][teacher[level]]["positive"] += 1

    def rate_of(data):
        return pct(data["positive"], data["observed"])

    return {
        "id": indicator_id,
        "name": name,
        "value": pct(positive_count, observed_count),
        "trend": "up",
        "breakdown": {
            "by_region": _entries(groups["region"], "region", rate_of),
            "by_district": _entries(groups["district"], "district", rate_of),
            "by_school": _entries(groups["school"], "school", rate_of, lambda d: d["observed"] > 0),
            "by_teacher": _entries(by_teacher, "teacher", lambda v: v),
        },
        "calculation_trace": [
            {"step": labels[0], "value": observed_count},
            {"step": labels[1], "value": positive_count},
            _trace_ratio(positive_count, observed_count),
        ],
    }


def _pip_answers(dataset, teacher_id):
    return [a for a in dataset.answers_pip if a.get("teacher_id") == teacher_id]


def calculate_teacher_training_percentage(dataset: SurveyDataset) -> Dict[str, Any]:
    """Teachers whose school reports at least one trained champion (Q1 or Q2)."""
    def is_trained(teacher):
        for question_id in (1, 2):
            answer = _first_answer(dataset.answers_school_output, teacher["id"], question_id)
            if answer and to_number(answer["answer"]) > 0:
                return True
        return False

    return _teacher_flag_indicator(
        dataset, "si1", "Percentage of Teachers Trained",
        lambda teacher: True, is_trained,
        ("Total teachers", "Teachers trained"),
    )


def calculate_gender_responsive_teaching(dataset: SurveyDataset) -> Dict[str, Any]:
    """Responsive when at least two of Q40, Q41 (encouraging) and Q42 (Both) hold."""
    encouraging = ("Frequently", "Sometimes, but not regularly")

    def is_responsive(teacher):
        answers = {a["question_id"]: a["answer"] for a in _pip_answers(dataset, teacher["id"])}
        checks = [
            answers.get(40) in encouraging,
            answers.get(41) in encouraging,
            answers.get(42) == "Both",
        ]
        return sum(checks) >= 2

    return _teacher_flag_indicator(
        dataset, "si2", "Percentage of Teachers Using Gender-Responsive Practices",
        lambda teacher: bool(_pip_answers(dataset, teacher["id"])), is_responsive,
        ("Teachers observed", "Teachers using gender-responsive practices"),
    )


def calculate_play_based_learning(dataset: SurveyDataset) -> Dict[str, Any]:
    """Implementing when at least three play-based items (Q52-Q60) were observed."""
    def is_implementing(teacher):
        yes_answers = [
            a for a in _pip_answers(dataset, teacher["id"])
            if 52 <= a["question_id"] <= 60 and a["answer"] == "Yes"
        ]
        return len(yes_answers) >= 3

    return _teacher_flag_indicator(
        dataset, "si3", "Percentage of Teachers Implementing Play-Based Learning",
        lambda teacher: bool(_pip_answers(dataset, teacher["id"])), is_implementing,
        ("Teachers observed", "Teachers implementing play-based learning"),
    )


def calculate_supplementary_indicators(dataset: SurveyDataset) -> List[Dict[str, Any]]:
    return [
        calculate_teacher_training_percentage(dataset),
        calculate_gender_responsive_teaching(dataset),
        calculate_play_based_learning(dataset),
    ]


# ============================================================================
# LOOKUPS
# ============================================================================

def filter_indicators(indicators: List[Dict[str, Any]], category: Optional[str] = None,
                      subcategory: Optional[str] = None) -> List[Dict[str, Any]]:
    result = indicators
    if category:
        result = [i for i in result if i.get("category") == category]
    if subcategory:
        result = [i for i in result if i.get("subcategory") == subcategory]
    return result


def get_indicator(indicators: List[Dict[str, Any]], indicator_id: str) -> Optional[Dict[str, Any]]:
    return next((i for i in indicators if i.get("id") == indicator_id), None)
