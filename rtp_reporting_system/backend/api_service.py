"""
RTP data service.

Serves dashboard data from the mock fixtures or the live API depending on
the mock data toggle. Live reads degrade step by step: the dedicated
endpoint first, then a scan of every live submission, then the mock data.
"""

import logging
import random
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from rtp_reporting_system.backend.config import BaseConfig
from rtp_reporting_system.backend.data_utils import sort_by_date
from rtp_reporting_system.backend.indicators import (
    calculate_outcome_indicators,
    calculate_output_indicators,
)
from rtp_reporting_system.backend.mock_database import unique_values
from rtp_reporting_system.backend.mock_submissions import MockSubmissionStore, get_mock_store
from rtp_reporting_system.backend.outcome_calculations import calculate_all_outcome_indicators
from rtp_reporting_system.backend.rtp_client import RTPApiClient, RTPApiError
from rtp_reporting_system.backend.school_report import (
    ReportPeriod,
    build_school_summary,
    generate_school_records,
    group_periods,
)

logger = logging.getLogger(__name__)

ENTITY_TYPES = ("school", "district", "circuit", "region", "teacher")

SUBMISSION_ENDPOINTS = [
    "school-responses",
    "output/district",
    "consolidated-checklist",
    "partners-in-play",
]

FILTER_ENDPOINTS = ["regions", "districts", "schools", "itineraries"]


def _as_list(payload: Any) -> List[Any]:
    """Accept either a bare JSON list or an object wrapping it under "data"."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    return []


def filter_by_entity(submissions: List[Dict[str, Any]], entity_type: str, entity_name: str) -> List[Dict[str, Any]]:
    if entity_type == "region" and entity_name == "All":
        return list(submissions)
    return [s for s in submissions if s.get(entity_type) == entity_name]


def filters_from_submissions(submissions: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    return {
        "regions": unique_values(submissions, "region"),
        "districts": unique_values(submissions, "district"),
        "schools": unique_values(submissions, "school"),
        "teachers": unique_values(submissions, "teacher"),
        "itineraries": unique_values(submissions, "itinerary"),
    }


class RTPApiService:
    """Mock/live data access for the RTP dashboard."""

    def __init__(
        self,
        use_mock_data: Optional[bool] = None,
        client: Optional[RTPApiClient] = None,
        mock_store: Optional[MockSubmissionStore] = None,
        rng: Optional[random.Random] = None,
    ):
        self.use_mock_data = BaseConfig.RTP_USE_MOCK_DATA if use_mock_data is None else use_mock_data
        self.client = client or RTPApiClient()
        self.mock = mock_store or get_mock_store()
        self.rng = rng or random.Random()
        self._mock_outcome = None
        self._mock_output = None
        self._mock_school_records = None

    def toggle_data_source(self) -> bool:
        self.use_mock_data = not self.use_mock_data
        logger.info("Data source switched to %s", "mock" if self.use_mock_data else "live")
        return self.use_mock_data

    # ========================================================================
    # MOCK DATA
    # ========================================================================

    def mock_submissions(self) -> List[Dict[str, Any]]:
        return self.mock.all_submissions()

    def mock_outcome_indicators(self) -> List[Dict[str, Any]]:
        if self._mock_outcome is None:
            self._mock_outcome = calculate_outcome_indicators(self.mock.database)
        return self._mock_outcome

    def mock_output_indicators(self) -> List[Dict[str, Any]]:
        if self._mock_output is None:
            self._mock_output = calculate_output_indicators(
                self.mock.database, random.Random(self.mock.database.seed)
            )
        return self._mock_output

    def mock_school_records(self) -> Dict[str, List[Dict[str, Any]]]:
        if self._mock_school_records is None:
            self._mock_school_records = generate_school_records(self.mock.database)
        return self._mock_school_records

    # ========================================================================
    # SUBMISSIONS
    # ========================================================================

    def _live_submissions(self) -> List[Dict[str, Any]]:
        combined = []
        for endpoint in SUBMISSION_ENDPOINTS:
            try:
                combined.extend(_as_list(self.client.fetch(endpoint)))
            except RTPApiError as exc:
                logger.error("Error fetching from %s: %s", endpoint, exc)
        return combined

    def get_all_submissions(self) -> List[Dict[str, Any]]:
        """
        Every submission across the four survey types.

        Live endpoints are fetched independently; one failing endpoint only
        drops its own submissions.
        """
        if self.use_mock_data:
            return self.mock_submissions()
        try:
            return self._live_submissions()
        except Exception:
            logger.exception("Error fetching all submissions")
            logger.warning("Falling back to mock data for submissions")
            return self.mock_submissions()

    def get_recent_submissions(self, limit: int = 10) -> List[Dict[str, Any]]:
        if self.use_mock_data:
            return sort_by_date(self.mock_submissions())[:limit]

        try:
            return _as_list(self.client.fetch("overview/recent", params={"limit": limit}))
        except RTPApiError as exc:
            logger.error("Error fetching recent submissions: %s", exc)

        try:
            logger.warning("Falling back to fetching all submissions and sorting")
            return sort_by_date(self.get_all_submissions())[:limit]
        except Exception:
            logger.exception("Error in fallback for recent submissions")
            logger.warning("Falling back to mock data for recent submissions")
            return sort_by_date(self.mock_submissions())[:limit]

    @staticmethod
    def _find_by_id(submissions: List[Dict[str, Any]], normalized_id: str) -> Optional[Dict[str, Any]]:
        return next((s for s in submissions if str(s.get("id")) == normalized_id), None)

    def get_submission_by_id(self, submission_id: Any) -> Optional[Dict[str, Any]]:
        if not submission_id:
            logger.error("Invalid submission ID provided: %r", submission_id)
            return None

        normalized_id = str(submission_id)
        if self.use_mock_data:
            return self._find_by_id(self.mock_submissions(), normalized_id)

        try:
            return self.client.fetch(f"submissions/{quote(normalized_id, safe='')}")
        except RTPApiError as exc:
            logger.error("Error fetching submission with ID %s: %s", normalized_id, exc)
            if exc.status != 404:
                logger.warning("Falling back to mock data for submission with ID %s", normalized_id)
                return self._find_by_id(self.mock_submissions(), normalized_id)

        try:
            logger.warning("Submission with ID %s not found, searching in all submissions", normalized_id)
            submission = self._find_by_id(self.get_all_submissions(), normalized_id)
            if submission:
                return submission
            logger.warning("Checking mock data for submission with ID %s", normalized_id)
            return self._find_by_id(self.mock_submissions(), normalized_id)
        except Exception:
            logger.exception("Error in fallback for submission by ID")
            return None

    def get_submissions_by_entity(self, entity_type: Optional[str], entity_name: Optional[str]) -> List[Dict[str, Any]]:
        if not entity_type or not entity_name:
            logger.error("Invalid entity type or name provided: %r %r", entity_type, entity_name)
            return []

        normalized_type = entity_type.lower()
        if normalized_type not in ENTITY_TYPES:
            logger.error(
                "Invalid entity type: %s. Must be one of: %s", normalized_type, ", ".join(ENTITY_TYPES)
            )
            return []

        if self.use_mock_data:
            return filter_by_entity(self.mock_submissions(), normalized_type, entity_name)

        try:
            endpoint = f"{normalized_type}s/{quote(entity_name, safe='')}/submissions"
            return _as_list(self.client.fetch(endpoint))
        except RTPApiError as exc:
            logger.error("Error fetching submissions for %s %s: %s", normalized_type, entity_name, exc)

        try:
            logger.warning("Falling back to fetching all submissions and filtering by %s", normalized_type)
            return filter_by_entity(self.get_all_submissions(), normalized_type, entity_name)
        except Exception:
            logger.exception("Error in fallback for submissions by entity")
            logger.warning("Falling back to mock data for %s %s", normalized_type, entity_name)
            return filter_by_entity(self.mock_submissions(), normalized_type, entity_name)

    def get_documents_by_entity(self, entity_type: str, entity_name: str) -> List[Dict[str, Any]]:
        """Uploaded documents (plans, reports) for an entity."""
        normalized_type = (entity_type or "").lower()
        if normalized_type not in ENTITY_TYPES or not entity_name:
            logger.error("Invalid entity for documents: %r %r", entity_type, entity_name)
            return []

        if self.use_mock_data:
            return self.mock.documents_for(normalized_type, entity_name)

        try:
            endpoint = f"{normalized_type}s/{quote(entity_name, safe='')}/documents"
            return _as_list(self.client.fetch(endpoint))
        except RTPApiError as exc:
            logger.error("Error fetching documents for %s %s: %s", normalized_type, entity_name, exc)
            logger.warning("Falling back to mock data for %s %s documents", normalized_type, entity_name)
            return self.mock.documents_for(normalized_type, entity_name)

    # ========================================================================
    # INDICATORS
    # ========================================================================

    def get_outcome_indicators(self) -> List[Dict[str, Any]]:
        if self.use_mock_data:
            return self.mock_outcome_indicators()
        try:
            return _as_list(self.client.fetch("outcome-indicators"))
        except RTPApiError as exc:
            logger.error("Error fetching outcome indicators: %s", exc)
            logger.warning(exc.user_message())
            return self.mock_outcome_indicators()

    def get_output_indicators(self) -> List[Dict[str, Any]]:
        if self.use_mock_data:
            return self.mock_output_indicators()
        try:
            return _as_list(self.client.fetch("output"))
        except RTPApiError as exc:
            logger.error("Error fetching output indicators: %s", exc)
            logger.warning(exc.user_message())
            return self.mock_output_indicators()

    def get_itinerary_outcomes(self, itinerary_id: str) -> Dict[str, Any]:
        """
        Response-based outcome figures for one itinerary from the live API.

        Raises:
            RTPApiError: If any of the response sets cannot be fetched
        """
        def fetch_responses(endpoint, params):
            return self.client.fetch(endpoint, params={**params, "format": "responses"})

        return calculate_all_outcome_indicators(fetch_responses, itinerary_id)

    # ========================================================================
    # FILTERS
    # ========================================================================

    def get_filters(self) -> Dict[str, List[str]]:
        if self.use_mock_data:
            return filters_from_submissions(self.mock_submissions())

        try:
            filters = {}
            for endpoint in FILTER_ENDPOINTS:
                try:
                    filters[endpoint] = _as_list(self.client.fetch(endpoint))
                except RTPApiError as exc:
                    logger.error("Error fetching %s: %s", endpoint, exc)
                    filters[endpoint] = []
            filters["teachers"] = unique_values(self.get_all_submissions(), "teacher")
            return filters
        except Exception:
            logger.exception("Error fetching filters")
            logger.warning("Failed to load filters. Using mock data instead.")
            return filters_from_submissions(self.mock_submissions())

    def get_cascading_filters(self, selected: Optional[Dict[str, str]] = None) -> Dict[str, List[str]]:
        return self.mock.cascading_filters(selected)

    # ========================================================================
    # WRITES & SCHOOL REPORT
    # ========================================================================

    def submit_survey(self, survey_data: Dict[str, Any]) -> Dict[str, Any]:
        if self.use_mock_data:
            submitted = dict(survey_data)
            submitted["id"] = self.rng.randint(5000, 14999)
            submitted["submitted_at"] = datetime.now().isoformat()
            return submitted
        try:
            return self.client.post("submissions", survey_data)
        except RTPApiError as exc:
            logger.error("Error submitting survey: %s", exc)
            raise

    def get_school_summary(self, school: str, year: Optional[str] = None,
                           term: Optional[str] = None, week: Optional[int] = None) -> Dict[str, Any]:
        """Enrolment, student and teacher attendance summary for one school."""
        params = {"school": school, "year": year, "term": term, "weekNumber": week}
        params = {k: v for k, v in params.items() if v is not None}

        if self.use_mock_data:
            return build_school_summary(self.mock_school_records(), school, ReportPeriod(year, term, week))

        summary = {"school": school}
        for key, path in (
            ("enrolment", "enrolment"),
            ("student_attendance", "student-attendance"),
            ("teacher_attendance", "teacher-attendance"),
        ):
            try:
                summary[key] = self.client.fetch_statistics(path, params)
            except RTPApiError as exc:
                logger.error("Error fetching %s statistics for %s: %s", path, school, exc)
                summary[key] = None
        return summary

    def get_report_periods(self) -> List[Dict[str, Any]]:
        """Years, terms and weeks with School Report data, newest first."""
        if self.use_mock_data:
            return group_periods(self.mock_school_records()["enrolment"])
        try:
            return _as_list(self.client.fetch_statistics("periods"))
        except RTPApiError as exc:
            logger.error("Error fetching report periods: %s", exc)
            logger.warning("Falling back to mock data for report periods")
            return group_periods(self.mock_school_records()["enrolment"])
