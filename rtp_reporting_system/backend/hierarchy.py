"""
Drill-down navigation over submissions: entity filtering, hierarchy trees,
filter cascades and pagination for the hierarchy view.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from rtp_reporting_system.backend.data_utils import (
    calculate_stats,
    group_submissions_by_entity,
    parse_datetime,
    submission_timestamp,
)

logger = logging.getLogger(__name__)

CHILD_ENTITY_TYPES = {
    "region": "district",
    "district": "school",
    "circuit": "school",
    "school": "teacher",
}

PARENT_ENTITY_TYPES = {
    "district": "region",
    "circuit": "district",
    "school": "district",
    "teacher": "school",
}

# Filter keys in cascade order; changing one clears everything after it
FILTER_CASCADE = ["regions", "districts", "circuits", "schools", "teachers"]


def filter_submissions_for_entity(submissions: List[Dict[str, Any]], entity_type: str,
                                  entity_name: str) -> List[Dict[str, Any]]:
    if entity_type == "region" and entity_name == "All":
        return list(submissions)
    return [s for s in submissions if s.get(entity_type) == entity_name]


def _as_datetime(value: Any, end_of_day: bool = False) -> Optional[datetime]:
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value.strip())
        except ValueError:
            pass
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.max if end_of_day else time.min)
    return parse_datetime(value)


def apply_filters(submissions: List[Dict[str, Any]], itinerary: str = "all",
                  start: Any = None, end: Any = None, survey_type: str = "all") -> List[Dict[str, Any]]:
    """
    Filter submissions by survey type, itinerary and date range.

    The date range applies only when both bounds are given; both bounds are
    inclusive and a plain end date covers that whole day.
    """
    filtered = []
    start_at = _as_datetime(start) if start and end else None
    end_at = _as_datetime(end, end_of_day=True) if start and end else None

    for submission in submissions:
        if survey_type != "all" and submission.get("survey_type") != survey_type:
            continue
        if itinerary != "all" and submission.get("itinerary") != itinerary:
            continue
        if start_at is not None and end_at is not None:
            submitted = submission_timestamp(submission)
            if submitted < start_at.replace(tzinfo=None) or submitted > end_at.replace(tzinfo=None):
                continue
        filtered.append(submission)
    return filtered


def _ordered_unique(values) -> List[Any]:
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def _children(submissions: List[Dict[str, Any]], levels: List[str]) -> List[Dict[str, Any]]:
    if not levels:
        return []
    level, rest = levels[0], levels[1:]
    nodes = []
    for name in _ordered_unique(s.get(level) for s in submissions):
        members = [s for s in submissions if s.get(level) == name]
        nodes.append({"type": level, "name": name, "children": _children(members, rest)})
    return nodes


HIERARCHY_LEVELS = {
    "region": ["district", "school", "teacher"],
    "district": ["school", "teacher"],
    "circuit": ["school", "teacher"],
    "school": ["teacher"],
    "teacher": [],
}


def build_hierarchy(submissions: List[Dict[str, Any]], entity_type: str) -> List[Dict[str, Any]]:
    """
    Tree of the entities below ``entity_type`` in order of first appearance.

    Each node is ``{"type", "name", "children"}``; a region expands to its
    districts, their schools and those schools' teachers.
    """
    levels = HIERARCHY_LEVELS.get(entity_type)
    if levels is None:
        raise ValueError(f"Invalid entity type: {entity_type}")
    return _children(submissions, levels)


def group_by_survey_type(submissions: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for submission in submissions:
        groups.setdefault(submission.get("survey_type") or "unknown", []).append(submission)
    return groups


def group_submissions_by_survey(submissions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Collapse per-question submissions into one entry per survey (``survey_id`` or ``id``)."""
    surveys: Dict[Any, Dict[str, Any]] = {}
    for submission in submissions:
        survey_id = submission.get("survey_id") or submission.get("id")
        survey = surveys.get(survey_id)
        if survey is None:
            surveys[survey_id] = {
                "id": survey_id,
                "survey_type": submission.get("survey_type"),
                "submitted_at": submission.get("submitted_at"),
                "region": submission.get("region"),
                "district": submission.get("district"),
                "school": submission.get("school"),
                "entity": submission.get("entity"),
                "collector": submission.get("collector") or "Unknown",
                "question_count": 1,
                "submissions": [submission],
            }
        else:
            survey["question_count"] += 1
            survey["submissions"].append(submission)
    return list(surveys.values())


def available_itineraries(submissions: List[Dict[str, Any]]) -> List[str]:
    return ["all"] + _ordered_unique(s.get("itinerary") for s in submissions)


def available_survey_types(submissions: List[Dict[str, Any]]) -> List[str]:
    return ["all"] + _ordered_unique(s.get("survey_type") for s in submissions)


def update_filter_selection(selected: Dict[str, Any], key: str, value: Any) -> Dict[str, Any]:
    """
    Return a new selection with ``key`` set to ``value``.

    Selecting a region clears the district, circuit, school and teacher
    choices below it; an empty value removes the key.
    """
    updated = dict(selected)
    if key in FILTER_CASCADE:
        for child in FILTER_CASCADE[FILTER_CASCADE.index(key) + 1:]:
            updated.pop(child, None)
    if value:
        updated[key] = value
    else:
        updated.pop(key, None)
    return updated


def paginate(items: List[Any], page: int = 0, rows_per_page: int = 10) -> List[Any]:
    """Zero-based page slice."""
    if page < 0 or rows_per_page <= 0:
        return []
    start = page * rows_per_page
    return items[start:start + rows_per_page]


def child_entities(submissions: List[Dict[str, Any]], entity_type: str) -> List[Dict[str, Any]]:
    child_type = CHILD_ENTITY_TYPES.get(entity_type)
    if not child_type:
        return []
    grouped = group_submissions_by_entity(submissions, child_type)
    children = [
        {"name": name, "type": child_type, "submissions": members, **calculate_stats(members)}
        for name, members in grouped.items()
    ]
    return sorted(children, key=lambda child: child["name"])


def build_entity_view(service, entity_type: str, entity_name: str, itinerary: str = "all",
                      start: Any = None, end: Any = None, survey_type: str = "all") -> Dict[str, Any]:
    """
    Everything the hierarchy page shows for one entity.

    Args:
        service: ``RTPApiService`` used to load the entity's submissions
        entity_type: region, district, circuit, school or teacher
        entity_name: Entity name (``All`` for every region)
        itinerary: Itinerary filter, ``all`` for no filter
        start: Start of the date range
        end: End of the date range
        survey_type: Survey type filter, ``all`` for no filter

    Returns:
        Dictionary with the filtered submissions, child entities with stats,
        the hierarchy tree, survey type counts, uploaded documents and
        filter options
    """
    submissions = service.get_submissions_by_entity(entity_type, entity_name)
    if not submissions:
        logger.warning("No submissions found for %s: %s", entity_type, entity_name)

    filtered = apply_filters(submissions, itinerary, start, end, survey_type)
    parent_type = PARENT_ENTITY_TYPES.get(entity_type)
    parent_name = None
    if parent_type:
        parent_name = submissions[0].get(parent_type) if submissions else "All"

    return {
        "entity_type": entity_type,
        "entity_name": entity_name,
        "parent": {"type": parent_type, "name": parent_name} if parent_type else None,
        "submissions": filtered,
        "children": child_entities(filtered, entity_type),
        "hierarchy": build_hierarchy(filtered, entity_type),
        "survey_type_counts": {k: len(v) for k, v in group_by_survey_type(filtered).items()},
        "documents": service.get_documents_by_entity(entity_type, entity_name),
        "filters": {
            "survey_types": available_survey_types(submissions),
            "itineraries": available_itineraries(submissions),
        },
    }
