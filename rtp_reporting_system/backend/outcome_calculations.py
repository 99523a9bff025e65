"""
Outcome indicator calculations over live survey responses.

A response is one submitted form::

    {"id": 7, "school_id": 3, "school_name": "...", "teacher_id": 12,
     "teacher_name": "...", "answers": [{"question_id": 17,
     "answer_value": "Yes", "score": None, "upload_file_path": None}]}

Percentages are rounded to two decimal places.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

LTP_THRESHOLD = 3.5

# Answer scale shared by the friendly tone (Q43) and acknowledging effort (Q44) questions
TONE_SCORING = {
    "frequently": 5,
    "sometimes": 4,
    "only boys": 3,
    "only girls": 3,
    "not at all": 0,
}

DEFAULT_QUESTION_MAPPINGS = {
    "implementation_plan_question": 17,
    "development_plan_question": 18,
    "lesson_plan_question": 19,
    "friendly_tone_question": 43,
    "acknowledging_effort_question": 44,
    "pupil_participation_question": 45,
    "teacher_skill_questions": [29, 30, 31, 32, 33, 39, 45, 46, 48, 49],
    "boys_enrolled_question": 12,
    "girls_enrolled_question": 13,
}


def find_answer(response: Dict[str, Any], question_id: int) -> Optional[Dict[str, Any]]:
    for answer in response.get("answers") or []:
        if answer.get("question_id") == question_id:
            return answer
    return None


def _answer_text(answer: Optional[Dict[str, Any]]) -> str:
    if not answer or answer.get("answer_value") is None:
        return ""
    return str(answer["answer_value"]).strip().lower()


def tone_score(answer: Optional[Dict[str, Any]]) -> int:
    """Score a Q43/Q44 answer; "Sometimes, but not regularly" and "Only with boys" forms are accepted."""
    text = _answer_text(answer).split(",")[0].replace("only with ", "only ")
    return TONE_SCORING.get(text, 0)


def _parse_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _parse_int(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def _percentage(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0


def calculate_schools_with_implementation_plans(responses: List[Dict[str, Any]], question_id: int) -> Dict[str, Any]:
    if not responses:
        return {"percentage": 0, "schools_with_plans": 0, "total_schools": 0}
    with_plans = sum(1 for r in responses if _answer_text(find_answer(r, question_id)) == "yes")
    return {
        "percentage": _percentage(with_plans, len(responses)),
        "schools_with_plans": with_plans,
        "total_schools": len(responses),
    }


def calculate_schools_with_ltp_development_plans(responses: List[Dict[str, Any]], question_id: int) -> Dict[str, Any]:
    if not responses:
        return {"percentage": 0, "schools_with_uploads": 0, "total_schools": 0}
    with_uploads = 0
    for response in responses:
        answer = find_answer(response, question_id)
        if answer and answer.get("upload_file_path"):
            with_uploads += 1
    return {
        "percentage": _percentage(with_uploads, len(responses)),
        "schools_with_uploads": with_uploads,
        "total_schools": len(responses),
    }


def calculate_teachers_with_ltp_lesson_plans(responses: List[Dict[str, Any]], question_id: int) -> Dict[str, Any]:
    if not responses:
        return {"percentage": 0, "teachers_with_ltp_plans": 0, "total_teachers": 0}
    with_plans = sum(1 for r in responses if _answer_text(find_answer(r, question_id)) == "yes")
    return {
        "percentage": _percentage(with_plans, len(responses)),
        "teachers_with_ltp_plans": with_plans,
        "total_teachers": len(responses),
    }


def calculate_learning_environments_with_ltp_methods(
    pip_responses: List[Dict[str, Any]],
    question_ids: Dict[str, int],
    threshold: float = LTP_THRESHOLD,
) -> Dict[str, Any]:
    """
    Weighted score per observed lesson: 30% tone (Q43), 30% effort (Q44) and
    40% participation (Q45, already on a 1-5 scale).
    """
    if not pip_responses:
        return {
            "percentage": 0,
            "environments_with_ltp": 0,
            "total_environments": 0,
            "average_score": 0,
            "detailed_scores": [],
        }

    scores = []
    for response in pip_responses:
        tone = tone_score(find_answer(response, question_ids["q43"]))
        effort = tone_score(find_answer(response, question_ids["q44"]))
        participation = _question_score(find_answer(response, question_ids["q45"]))

        weighted = tone * 0.3 + effort * 0.3 + participation * 0.4
        scores.append({
            "response_id": response.get("id"),
            "school_id": response.get("school_id"),
            "school_name": response.get("school_name") or "Unknown",
            "teacher_id": response.get("teacher_id"),
            "teacher_name": response.get("teacher_name") or "Unknown",
            "tone_score": tone,
            "effort_score": effort,
            "participation_score": participation,
            "weighted_score": round(weighted, 2),
            "uses_ltp_methods": weighted >= threshold,
        })

    with_ltp = sum(1 for s in scores if s["uses_ltp_methods"])
    average = sum(s["weighted_score"] for s in scores) / len(scores)
    return {
        "percentage": _percentage(with_ltp, len(scores)),
        "environments_with_ltp": with_ltp,
        "total_environments": len(scores),
        "average_score": round(average, 2),
        "detailed_scores": scores,
    }


def _question_score(answer: Optional[Dict[str, Any]]) -> float:
    if not answer:
        return 0.0
    if answer.get("score"):
        return _parse_float(answer["score"])
    return _parse_float(answer.get("answer_value"))


def calculate_teachers_with_ltp_skills(
    pip_responses: List[Dict[str, Any]],
    question_ids: List[int],
    threshold: float = LTP_THRESHOLD,
) -> Dict[str, Any]:
    """Equal-weight average of the scored skill questions against the threshold."""
    if not pip_responses:
        return {
            "percentage": 0,
            "teachers_with_skills": 0,
            "total_teachers": 0,
            "average_score": 0,
            "detailed_scores": [],
        }

    scores = []
    for response in pip_responses:
        question_scores = [_question_score(find_answer(response, qid)) for qid in question_ids]
        average = sum(question_scores) / len(question_scores) if question_scores else 0
        scores.append({
            "response_id": response.get("id"),
            "school_id": response.get("school_id"),
            "school_name": response.get("school_name") or "Unknown",
            "teacher_id": response.get("teacher_id"),
            "teacher_name": response.get("teacher_name") or "Unknown",
            "question_scores": question_scores,
            "avg_score": round(average, 2),
            "has_ltp_skills": average >= threshold,
        })

    with_skills = sum(1 for s in scores if s["has_ltp_skills"])
    overall = sum(s["avg_score"] for s in scores) / len(scores)
    return {
        "percentage": _percentage(with_skills, len(scores)),
        "teachers_with_skills": with_skills,
        "total_teachers": len(scores),
        "average_score": round(overall, 2),
        "detailed_scores": scores,
    }


def calculate_total_primary_enrollment(school_responses: List[Dict[str, Any]], question_ids: Dict[str, int]) -> Dict[str, Any]:
    if not school_responses:
        return {"total_enrollment": 0, "boys_enrollment": 0, "girls_enrollment": 0, "school_count": 0}

    boys = 0
    girls = 0
    for response in school_responses:
        boys_answer = find_answer(response, question_ids["boys_enrolled"])
        girls_answer = find_answer(response, question_ids["girls_enrolled"])
        boys += _parse_int(boys_answer.get("answer_value")) if boys_answer else 0
        girls += _parse_int(girls_answer.get("answer_value")) if girls_answer else 0

    return {
        "total_enrollment": boys + girls,
        "boys_enrollment": boys,
        "girls_enrollment": girls,
        "school_count": len(school_responses),
    }


def calculate_schools_reached(*response_lists: List[Dict[str, Any]]) -> Dict[str, int]:
    school_ids = set()
    for responses in response_lists:
        for response in responses or []:
            if response.get("school_id"):
                school_ids.add(response["school_id"])
    return {"schools_reached": len(school_ids)}


def calculate_all_outcome_indicators(
    fetch: Callable[..., Any],
    itinerary_id: Any,
    question_mappings: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Fetch the three response sets for an itinerary and compute every indicator.

    Args:
        fetch: Callable taking ``(endpoint, params)`` and returning parsed JSON,
            usually ``RTPApiClient.fetch``
        itinerary_id: Itinerary to calculate for
        question_mappings: Question ids, defaults to ``DEFAULT_QUESTION_MAPPINGS``

    Returns:
        Dictionary with one entry per indicator

    Raises:
        RTPApiError: If any of the response sets cannot be fetched
    """
    mappings = dict(DEFAULT_QUESTION_MAPPINGS)
    mappings.update(question_mappings or {})
    params = {"itineraryId": itinerary_id}

    try:
        school_responses = fetch("school-responses", params)
        checklist_responses = fetch("consolidated-checklist", params)
        pip_responses = fetch("partners-in-play", params)
    except Exception:
        logger.exception("Error fetching responses for itinerary %s", itinerary_id)
        raise

    return {
        "itinerary_id": itinerary_id,
        "implementation_plans": calculate_schools_with_implementation_plans(
            checklist_responses, mappings["implementation_plan_question"]
        ),
        "development_plans": calculate_schools_with_ltp_development_plans(
            checklist_responses, mappings["development_plan_question"]
        ),
        "lesson_plans": calculate_teachers_with_ltp_lesson_plans(
            checklist_responses, mappings["lesson_plan_question"]
        ),
        "learning_environments": calculate_learning_environments_with_ltp_methods(
            pip_responses,
            {
                "q43": mappings["friendly_tone_question"],
                "q44": mappings["acknowledging_effort_question"],
                "q45": mappings["pupil_participation_question"],
            },
        ),
        "teacher_skills": calculate_teachers_with_ltp_skills(
            pip_responses, mappings["teacher_skill_questions"]
        ),
        "enrollment": calculate_total_primary_enrollment(
            school_responses,
            {
                "boys_enrolled": mappings["boys_enrolled_question"],
                "girls_enrolled": mappings["girls_enrolled_question"],
            },
        ),
        "schools_reached": calculate_schools_reached(
            school_responses, checklist_responses, pip_responses
        ),
    }
