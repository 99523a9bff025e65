"""
School Report aggregation.

Rolls weekly enrolment, student attendance and teacher attendance rows up
into the summaries shown on the School Report page. Rows are plain dicts
with the column names of the statistics tables, e.g.::

    {"school": "...", "year": "2025", "term": "1", "week_number": 4,
     "normal_boys_total": 40, "normal_girls_total": 38,
     "special_boys_total": 2, "special_girls_total": 1,
     "total_population": 81}
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

LESSON_PLAN_RATINGS = ["excellent", "good", "fair", "poor", "not_rated"]

REPORT_KINDS = ("enrolment", "student_attendance", "teacher_attendance")


@dataclass(frozen=True)
class ReportPeriod:
    year: Optional[str] = None
    term: Optional[str] = None
    week: Optional[int] = None

    def matches(self, row: Dict[str, Any]) -> bool:
        if self.year is not None and str(row.get("year")) != str(self.year):
            return False
        if self.term is not None and str(row.get("term")) != str(self.term):
            return False
        if self.week is not None and row.get("week_number") != self.week:
            return False
        return True


def _value(row: Dict[str, Any], key: str) -> float:
    return row.get(key) or 0


def _boys(row: Dict[str, Any]) -> float:
    return _value(row, "normal_boys_total") + _value(row, "special_boys_total")


def _girls(row: Dict[str, Any]) -> float:
    return _value(row, "normal_girls_total") + _value(row, "special_girls_total")


def _rate(part: float, whole: float) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0


def _period_of(row: Dict[str, Any]) -> Dict[str, Any]:
    return {"year": row.get("year"), "term": row.get("term"), "week": row.get("week_number")}


# ============================================================================
# MULTI-ROW AGGREGATES
# ============================================================================

def aggregate_enrollment(rows: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    if not rows:
        return None
    return {
        "total_students": sum(_value(r, "total_population") for r in rows),
        "gender_distribution": {
            "boys": sum(_boys(r) for r in rows),
            "girls": sum(_girls(r) for r in rows),
        },
    }


def aggregate_student_attendance(rows: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    if not rows:
        return None
    total_enrolled = sum(_value(r, "total_population") for r in rows)
    total_present = sum(_boys(r) + _girls(r) for r in rows)
    return {
        "total_enrolled": total_enrolled,
        "total_present": total_present,
        "attendance_rate": _rate(total_present, total_enrolled),
    }


def aggregate_teacher_attendance(rows: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """Pooled rates: total days present over total session days, marked over given exercises."""
    if not rows:
        return None
    session_days = sum(_value(r, "school_session_days") for r in rows)
    present = sum(_value(r, "days_present") for r in rows)
    given = sum(_value(r, "excises_given") for r in rows)
    marked = sum(_value(r, "excises_marked") for r in rows)
    return {
        "total_teachers": len(rows),
        "attendance_rate": _rate(present, session_days),
        "exercise_completion_rate": _rate(marked, given),
    }


# ============================================================================
# SINGLE-SCHOOL SUMMARIES
# ============================================================================

def summarize_enrolment(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not row:
        return None
    special_boys = _value(row, "special_boys_total")
    special_girls = _value(row, "special_girls_total")
    return {
        "total_students": _value(row, "total_population"),
        "gender_distribution": {"boys": _boys(row), "girls": _girls(row)},
        "special_needs": {
            "boys": special_boys,
            "girls": special_girls,
            "total": special_boys + special_girls,
        },
        "period": _period_of(row),
    }


def summarize_student_attendance(rows: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """Summary of the first (most recent) attendance row."""
    if not rows:
        return None
    latest = rows[0]
    total_present = _boys(latest) + _girls(latest)
    total_enrolled = _value(latest, "total_population")
    return {
        "total_present": total_present,
        "total_enrolled": total_enrolled,
        "attendance_rate": _rate(total_present, total_enrolled),
        "gender_distribution": {"boys": _boys(latest), "girls": _girls(latest)},
        "period": _period_of(latest),
    }


def lesson_plan_quality(rows: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Dict[str, float]]]:
    if not rows:
        return None
    counts = {rating: 0 for rating in LESSON_PLAN_RATINGS}
    for row in rows:
        rating = row.get("lesson_plan_ratings")
        counts[rating if rating in counts else "not_rated"] += 1
    total = len(rows)
    return {
        rating: {"count": counts[rating], "percentage": round(counts[rating] / total * 100, 2)}
        for rating in LESSON_PLAN_RATINGS
    }


def summarize_teacher_attendance(rows: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """
    Average per-teacher rates for one school.

    Each rate is computed per teacher first. Zero denominators count as 1,
    so a teacher with no recorded session days contributes a 0% rate.
    """
    if not rows:
        return None
    count = len(rows)
    attendance = sum(_value(r, "days_present") / (r.get("school_session_days") or 1) for r in rows)
    punctuality = sum(_value(r, "days_punctual") / (r.get("days_present") or 1) for r in rows)
    completion = sum(_value(r, "excises_marked") / (r.get("excises_given") or 1) for r in rows)
    return {
        "total_teachers": count,
        "total_days_present": sum(_value(r, "days_present") for r in rows),
        "total_days_punctual": sum(_value(r, "days_punctual") for r in rows),
        "total_days_absent": sum(_value(r, "days_absent") for r in rows),
        "total_exercises_given": sum(_value(r, "excises_given") for r in rows),
        "total_exercises_marked": sum(_value(r, "excises_marked") for r in rows),
        "attendance_rate": round(attendance / count * 100, 2),
        "punctuality_rate": round(punctuality / count * 100, 2),
        "exercise_completion_rate": round(completion / count * 100, 2),
        "lesson_plan_quality": lesson_plan_quality(rows),
        "period": _period_of(rows[0]),
    }


# ============================================================================
# PERIODS
# ============================================================================

def latest_for_period(rows: Iterable[Dict[str, Any]], year: Optional[str] = None,
                      term: Optional[str] = None) -> List[Dict[str, Any]]:
    """Rows of the highest week within the year/term (all of them, one per teacher for attendance)."""
    period = ReportPeriod(year, term)
    candidates = [r for r in rows if period.matches(r)]
    if not candidates:
        return []
    week = max(r.get("week_number") or 0 for r in candidates)
    return [r for r in candidates if (r.get("week_number") or 0) == week]


def _sort_key(value: Any):
    text = str(value)
    return (0, int(text)) if text.isdigit() else (1, text)


def group_periods(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Available reporting periods.

    Returns:
        ``[{"year": ..., "terms": [{"term": ..., "weeks": [1, 2, ...]}]}]`` with
        years and terms newest first and weeks ascending
    """
    tree: Dict[Any, Dict[Any, set]] = {}
    for row in rows:
        if row.get("year") is None or row.get("term") is None:
            continue
        weeks = tree.setdefault(row["year"], {}).setdefault(row["term"], set())
        if row.get("week_number") is not None:
            weeks.add(row["week_number"])

    periods = []
    for year in sorted(tree, key=_sort_key, reverse=True):
        terms = [
            {"term": term, "weeks": sorted(tree[year][term])}
            for term in sorted(tree[year], key=_sort_key, reverse=True)
        ]
        periods.append({"year": year, "terms": terms})
    return periods


def rows_for_period(rows: List[Dict[str, Any]], period: ReportPeriod) -> List[Dict[str, Any]]:
    """
    Rows reported for a period.

    A missing year or term resolves to the newest one available, so rows
    from different terms are never pooled together.
    """
    if period.week is not None:
        return [r for r in rows if period.matches(r)]
    if period.year is None or period.term is None:
        available = group_periods(rows)
        if not available:
            return []
        year = period.year if period.year is not None else available[0]["year"]
        terms = next((p["terms"] for p in available if str(p["year"]) == str(year)), [])
        if period.term is None and not terms:
            return []
        term = period.term if period.term is not None else terms[0]["term"]
        return latest_for_period(rows, year, term)
    return latest_for_period(rows, period.year, period.term)


def _select(rows: List[Dict[str, Any]], school: str, period: ReportPeriod) -> List[Dict[str, Any]]:
    return rows_for_period([r for r in rows if r.get("school") == school], period)


def build_school_summary(rows_by_kind: Dict[str, List[Dict[str, Any]]], school: str,
                         period: Optional[ReportPeriod] = None) -> Dict[str, Any]:
    """
    Combined School Report for one school.

    Without a week the latest week of the year/term is used; without a
    year or term the newest available one is used.

    Args:
        rows_by_kind: Rows keyed by ``enrolment``, ``student_attendance`` and
            ``teacher_attendance``
        school: School name
        period: Requested period

    Returns:
        Dictionary with ``enrolment``, ``student_attendance`` and
        ``teacher_attendance`` summaries (None when there is no data)
    """
    period = period or ReportPeriod()
    enrolment = _select(rows_by_kind.get("enrolment", []), school, period)
    student_attendance = _select(rows_by_kind.get("student_attendance", []), school, period)
    teacher_attendance = _select(rows_by_kind.get("teacher_attendance", []), school, period)
    logger.debug(
        "School report for %s: %d enrolment, %d student and %d teacher attendance rows",
        school, len(enrolment), len(student_attendance), len(teacher_attendance),
    )
    return {
        "school": school,
        "enrolment": summarize_enrolment(enrolment[0] if enrolment else None),
        "student_attendance": summarize_student_attendance(student_attendance),
        "teacher_attendance": summarize_teacher_attendance(teacher_attendance),
    }


# ============================================================================
# SAMPLE DATA
# ============================================================================

def generate_school_records(dataset, year: str = "2025", terms=("1", "2"), weeks: int = 4,
                            seed: Optional[int] = None) -> Dict[str, List[Dict[str, Any]]]:
    """Weekly School Report rows for every school of a dataset's teacher roster."""
    rng = random.Random(getattr(dataset, "seed", 0) + 2 if seed is None else seed)
    records = {kind: [] for kind in REPORT_KINDS}

    schools: Dict[str, List[Dict[str, Any]]] = {}
    for teacher in dataset.teachers:
        schools.setdefault(teacher["school"], []).append(teacher)

    for school, staff in schools.items():
        context = {
            "school": school,
            "circuit": staff[0].get("circuit"),
            "district": staff[0].get("district"),
            "region": staff[0].get("region"),
        }
        boys = rng.randint(80, 200)
        girls = rng.randint(80, 200)
        special_boys = rng.randint(0, 5)
        special_girls = rng.randint(0, 5)
        for term in terms:
            for week in range(1, weeks + 1):
                period = {"year": year, "term": term, "week_number": week}
                records["enrolment"].append({
                    **context, **period,
                    "normal_boys_total": boys,
                    "normal_girls_total": girls,
                    "special_boys_total": special_boys,
                    "special_girls_total": special_girls,
                    "total_population": boys + girls + special_boys + special_girls,
                })
                records["student_attendance"].append({
                    **context, **period,
                    "normal_boys_total": boys - rng.randint(0, 20),
                    "normal_girls_total": girls - rng.randint(0, 20),
                    "special_boys_total": special_boys,
                    "special_girls_total": special_girls,
                    "total_population": boys + girls + special_boys + special_girls,
                })
                for teacher in staff:
                    present = rng.randint(3, 5)
                    given = rng.randint(2, 10)
                    records["teacher_attendance"].append({
                        **context, **period,
                        "teacher_id": teacher["id"],
                        "school_session_days": 5,
                        "days_present": present,
                        "days_punctual": rng.randint(0, present),
                        "days_absent": 5 - present,
                        "excises_given": given,
                        "excises_marked": rng.randint(0, given),
                        "lesson_plan_ratings": rng.choice(LESSON_PLAN_RATINGS),
                    })
    return records
