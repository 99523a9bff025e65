"""
Common helpers for processing RTP survey data: date formatting, safe
percentages and submission grouping/statistics.
"""

import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import pytz

from rtp_reporting_system.backend.config import BaseConfig

SURVEY_TYPE_NAMES = {
    "school_output": "School Output",
    "district_output": "District Output",
    "consolidated_checklist": "Consolidated Checklist",
    "partners_in_play": "Partners in Play",
}


def survey_type_name(survey_type: Optional[str]) -> str:
    if not survey_type:
        return "Unknown"
    return SURVEY_TYPE_NAMES.get(survey_type, survey_type.replace("_", " ").title())


# ============================================================================
# DATES
# ============================================================================

def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO string (or date/datetime) into a datetime, None if invalid."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_report_timezone(value: datetime, tz_name: str = BaseConfig.REPORT_TIMEZONE) -> datetime:
    """Convert timezone-aware datetimes to the report timezone; naive ones are kept as-is."""
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.timezone(tz_name))


def format_date(value: Any, tz_name: str = BaseConfig.REPORT_TIMEZONE) -> str:
    """Format as e.g. ``Mar 5, 2025, 02:30 PM``; ``N/A`` when empty or invalid."""
    parsed = parse_datetime(value)
    if parsed is None:
        return "N/A"
    parsed = to_report_timezone(parsed, tz_name)
    return f"{parsed:%b} {parsed.day}, {parsed:%Y}, {parsed:%I:%M %p}"


def format_date_short(value: Any, include_day: bool = False) -> str:
    parsed = parse_datetime(value)
    if parsed is None:
        return ""
    parsed = to_report_timezone(parsed)
    text = f"{parsed:%d %m %Y}"
    if include_day:
        text = f"{parsed:%a} {text}"
    return text


def format_date_time(value: Any) -> str:
    parsed = parse_datetime(value)
    if parsed is None:
        return ""
    parsed = to_report_timezone(parsed)
    return f"{parsed:%d %m %Y %H:%M}"


def relative_time(value: Any, now: Optional[datetime] = None) -> str:
    """Human friendly age of a timestamp, falling back to the short date after a week."""
    parsed = parse_datetime(value)
    if parsed is None:
        return ""
    if now is None:
        now = datetime.now(parsed.tzinfo) if parsed.tzinfo else datetime.now()
    seconds = (now - parsed).total_seconds()

    if seconds < 60:
        return "just now"
    minutes = int(seconds // 60)
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    days = hours // 24
    if days < 7:
        return f"{days} day{'s' if days != 1 else ''} ago"
    return format_date_short(parsed)


def submission_timestamp(submission: Dict[str, Any]) -> datetime:
    """Sort key for submissions: ``date`` or ``submitted_at``, oldest possible when missing."""
    parsed = parse_datetime(submission.get("date") or submission.get("submitted_at"))
    if parsed is None:
        return datetime.min
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(pytz.utc).replace(tzinfo=None)
    return parsed


def sort_by_date(submissions: List[Dict[str, Any]], newest_first: bool = True) -> List[Dict[str, Any]]:
    return sorted(submissions, key=submission_timestamp, reverse=newest_first)


# ============================================================================
# PERCENTAGES
# ============================================================================

def cap_percentage(percentage: Optional[float], precision: Optional[int] = None) -> float:
    """Cap a percentage at 100; None and NaN become 0."""
    if not percentage or (isinstance(percentage, float) and math.isnan(percentage)):
        return 0
    capped = min(percentage, 100)
    if precision is not None:
        return round(capped, precision)
    return capped


def calculate_percentage(value: float, total: float, precision: Optional[int] = None) -> float:
    """
    Percentage of ``value`` over ``total``, 0 when total is empty or zero.

    With a precision the result is capped at 100 and rounded, which is how
    indicator breakdowns are displayed.
    """
    if not total:
        return 0
    percentage = (value / total) * 100
    if precision is not None:
        return cap_percentage(percentage, precision)
    return percentage


# ============================================================================
# GROUPING & STATISTICS
# ============================================================================

def group_submissions_by_entity(submissions: Any, entity_type: str) -> Dict[str, List[Dict[str, Any]]]:
    if not isinstance(submissions, list):
        return {}
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for submission in submissions:
        entity_name = submission.get(entity_type)
        if not entity_name:
            continue
        groups.setdefault(entity_name, []).append(submission)
    return groups


def calculate_stats(submissions: Any) -> Dict[str, Any]:
    if not isinstance(submissions, list) or not submissions:
        return {
            "count": 0,
            "average_score": 0,
            "completion_rate": 0,
            "latest_submission": None,
        }

    scores = [s["score"] for s in submissions if s.get("score") is not None]
    average_score = sum(scores) / len(scores) if scores else 0

    completed = sum(1 for s in submissions if s.get("completed"))
    completion_rate = calculate_percentage(completed, len(submissions))

    return {
        "count": len(submissions),
        "average_score": average_score,
        "completion_rate": cap_percentage(completion_rate),
        "latest_submission": sort_by_date(submissions)[0],
    }
