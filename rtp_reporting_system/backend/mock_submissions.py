"""
Mock submissions, filter options and document uploads derived from the
mock survey database.
"""

import random
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from rtp_reporting_system.backend.mock_database import (
    MockDatabase,
    find_question,
    get_mock_database,
)

SURVEY_TYPES = ["school_output", "district_output", "consolidated_checklist", "partners_in_play"]

SUBMISSION_ID_BASE = {
    "school_output": 1000,
    "district_output": 2000,
    "consolidated_checklist": 3000,
    "partners_in_play": 4000,
}

INTERVENTION_TYPES = ["GALOP", "Direct", "Indirect"]
ACADEMIC_YEARS = ["2024-2025", "2025-2026"]
TERMS = ["Term 1", "Term 2", "Term 3"]
ITINERARIES = [f"{term} {year}" for year in ACADEMIC_YEARS for term in TERMS]

DOCUMENT_TYPES = [
    {"id": 1, "name": "Implementation Plan", "description": "School implementation plan for Learning through Play"},
    {"id": 2, "name": "Lesson Plan", "description": "Teacher lesson plan that includes LtP activities"},
    {"id": 3, "name": "Training Certificate", "description": "Certificate of completion for LtP training"},
    {"id": 4, "name": "Development Plan", "description": "School development plan including LtP components"},
    {"id": 5, "name": "Assessment Report", "description": "Assessment report on LtP implementation"},
    {"id": 6, "name": "Meeting Minutes", "description": "Minutes from school meetings discussing LtP"},
    {"id": 7, "name": "Student Work Sample", "description": "Examples of student work from LtP activities"},
    {"id": 8, "name": "Classroom Photo", "description": "Photos of classroom setup for LtP"},
]

# Entity keys, parent first, used by cascading filters
FILTER_LEVELS = [
    ("regions", "region"),
    ("districts", "district"),
    ("circuits", "circuit"),
    ("schools", "school"),
]


def random_submission_date(rng: random.Random, now: Optional[datetime] = None) -> str:
    """A timestamp within the last 90 days, between 8am and 8pm."""
    now = now or datetime.now()
    past = now - timedelta(days=rng.randrange(90))
    past = past.replace(hour=rng.randint(8, 19), minute=rng.randrange(60), second=0, microsecond=0)
    return past.isoformat()


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.lower())


class MockSubmissionStore:
    """Submissions for every survey type, generated once per mock database."""

    def __init__(self, database: Optional[MockDatabase] = None):
        self.database = database or get_mock_database()
        self.rng = random.Random(self.database.seed + 1)
        now = self.database.today

        self.school_output = self._build("school_output", self.database.answers_school_output, now)
        self.district_output = self._build("district_output", self.database.answers_district_output, now)
        self.consolidated_checklist = self._build(
            "consolidated_checklist", self.database.answers_consolidated_checklist, now
        )
        self.partners_in_play = self._build("partners_in_play", self.database.answers_pip, now)
        self.document_uploads = self._document_uploads(now)

    def _build(self, survey_type, answers, now):
        submissions = []
        for index, answer in enumerate(answers):
            question = find_question(survey_type, answer["question_id"])
            record = {
                "id": SUBMISSION_ID_BASE[survey_type] + index,
                "region": answer.get("region"),
                "district": answer.get("district"),
                "itinerary": f"Term {self.rng.randint(1, 3)} 2025",
                "survey_type": survey_type,
                "question_id": answer["question_id"],
                "question_text": question["question"] if question else "",
                "answer": answer["answer"],
                "submitted_at": random_submission_date(self.rng, now),
            }
            if survey_type != "district_output":
                record["school"] = answer.get("school")
                record["circuit"] = answer.get("circuit")
            if answer.get("teacher_id") is not None and survey_type != "consolidated_checklist":
                teacher = self.database.teacher_by_id(answer["teacher_id"])
                record["teacher"] = teacher["name"] if teacher else None
            if answer.get("upload_file_path"):
                record["upload_file_path"] = answer["upload_file_path"]
            submissions.append(record)
        return submissions

    def by_survey_type(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "school_output": self.school_output,
            "district_output": self.district_output,
            "consolidated_checklist": self.consolidated_checklist,
            "partners_in_play": self.partners_in_play,
        }

    def all_submissions(self) -> List[Dict[str, Any]]:
        return (
            self.school_output
            + self.district_output
            + self.consolidated_checklist
            + self.partners_in_play
        )

    def sorted_submissions(self) -> List[Dict[str, Any]]:
        return sorted(self.all_submissions(), key=lambda s: s["submitted_at"], reverse=True)

    def recent_submissions(self, limit: int = 200) -> List[Dict[str, Any]]:
        return self.sorted_submissions()[:limit]

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def filters(self) -> Dict[str, List[str]]:
        teachers = self.database.teachers
        return {
            "regions": sorted({t["region"] for t in teachers}),
            "districts": sorted({t["district"] for t in teachers}),
            "circuits": sorted({t["circuit"] for t in teachers}),
            "schools": sorted({t["school"] for t in teachers}),
            "teachers": [t["name"] for t in teachers],
            "intervention_types": list(INTERVENTION_TYPES),
            "academic_years": list(ACADEMIC_YEARS),
            "terms": list(TERMS),
            "itineraries": list(ITINERARIES),
        }

    def cascading_filters(self, selected: Optional[Dict[str, str]] = None) -> Dict[str, List[str]]:
        """
        Filter options narrowed by the current selection.

        Regions are always complete; each lower level is narrowed only once
        one of its ancestors is selected.
        """
        selected = selected or {}
        options = self.filters()
        remaining = list(self.database.teachers)
        narrowed = False

        for index, (filter_key, field) in enumerate(FILTER_LEVELS):
            if index > 0 and narrowed:
                options[filter_key] = sorted({t[field] for t in remaining})
            if selected.get(filter_key):
                remaining = [t for t in remaining if t[field] == selected[filter_key]]
                narrowed = True

        if narrowed:
            options["teachers"] = [t["name"] for t in remaining]
        return options

    # ------------------------------------------------------------------
    # Document uploads
    # ------------------------------------------------------------------

    def _document_uploads(self, now):
        teachers = self.database.teachers
        uploads = []

        for school_index, school in enumerate(self.database.schools):
            owner = next(t for t in teachers if t["school"] == school)
            for i in range(self.rng.randint(1, 3)):
                doc_type = self.rng.choice(DOCUMENT_TYPES)
                uploads.append({
                    "id": f"school_{school_index}_{i}",
                    "document_type": doc_type["id"],
                    "document_name": f"{doc_type['name']} - {school}",
                    "description": doc_type["description"],
                    "uploaded_by": owner["name"],
                    "school": school,
                    "district": owner["district"],
                    "region": owner["region"],
                    "upload_date": random_submission_date(self.rng, now),
                    "file_url": f"/mock-uploads/{_slug(doc_type['name'])}-{i + 1}.pdf",
                    "file_size": f"{self.rng.randint(1, 5)} MB",
                    "file_type": "application/pdf",
                    "status": "Approved",
                    "related_survey": self.rng.choice(["consolidated_checklist", "school_output"]),
                })

        for district_index, district in enumerate(self.database.districts):
            region = next(t["region"] for t in teachers if t["district"] == district)
            for i in range(self.rng.randint(1, 2)):
                doc_type = self.rng.choice(DOCUMENT_TYPES)
                uploads.append({
                    "id": f"district_{district_index}_{i}",
                    "document_type": doc_type["id"],
                    "document_name": f"{doc_type['name']} - {district} District",
                    "description": doc_type["description"],
                    "uploaded_by": "District Education Officer",
                    "district": district,
                    "region": region,
                    "upload_date": random_submission_date(self.rng, now),
                    "file_url": f"/mock-uploads/{_slug(doc_type['name'])}-district-{i + 1}.pdf",
                    "file_size": f"{self.rng.randint(1, 5)} MB",
                    "file_type": "application/pdf",
                    "status": "Approved",
                    "related_survey": "district_output",
                })
        return uploads

    def documents_for(self, entity_type: str, entity_name: str) -> List[Dict[str, Any]]:
        """Uploads for an entity; teachers match on the uploader."""
        if entity_type == "region" and entity_name == "All":
            return list(self.document_uploads)
        key = "uploaded_by" if entity_type == "teacher" else entity_type
        return [d for d in self.document_uploads if d.get(key) == entity_name]


_stores: Dict[int, MockSubmissionStore] = {}


def get_mock_store(seed: Optional[int] = None) -> MockSubmissionStore:
    database = get_mock_database(seed) if seed is not None else get_mock_database()
    if database.seed not in _stores:
        _stores[database.seed] = MockSubmissionStore(database)
    return _stores[database.seed]
