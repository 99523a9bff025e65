"""
Database models for the RTP reporting API.

Survey answers are stored one row per question (``submissions``), matching
the records the dashboard consumes. The School Report tables hold weekly
totals per school.
"""

from typing import Any, Dict

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import declarative_base, relationship

from rtp_reporting_system.backend.mock_database import SurveyDataset

Base = declarative_base()

# survey_type -> SurveyDataset attribute
DATASET_ANSWER_ATTRIBUTES = {
    "school_output": "answers_school_output",
    "district_output": "answers_district_output",
    "consolidated_checklist": "answers_consolidated_checklist",
    "partners_in_play": "answers_pip",
}

# ============================================================================
# SURVEYS
# ============================================================================

class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    staff_number = Column(String(50))
    gender = Column(String(10))
    region = Column(String(100), index=True)
    district = Column(String(100), index=True)
    circuit = Column(String(100))
    school = Column(String(255), index=True)
    created_at = Column(DateTime, default=func.now())

    submissions = relationship("Submission", back_populates="teacher")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "staff_number": self.staff_number,
            "gender": self.gender,
            "region": self.region,
            "district": self.district,
            "circuit": self.circuit,
            "school": self.school,
        }

    def __repr__(self):
        return f"<Teacher {self.name}>"


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True)
    survey_type = Column(String(50), nullable=False, index=True)
    question_id = Column(Integer, nullable=False)
    question_text = Column(Text)
    answer = Column(Text)
    teacher_id = Column(Integer, ForeignKey("teachers.id"))
    region = Column(String(100), index=True)
    district = Column(String(100), index=True)
    circuit = Column(String(100))
    school = Column(String(255), index=True)
    itinerary = Column(String(50), index=True)
    has_upload = Column(Boolean, default=False)
    upload_file_path = Column(String(500))
    submitted_at = Column(DateTime, default=func.now())

    teacher = relationship("Teacher", back_populates="submissions")

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "survey_type": self.survey_type,
            "question_id": self.question_id,
            "question_text": self.question_text,
            "answer": self.answer,
            "region": self.region,
            "district": self.district,
            "itinerary": self.itinerary,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
        }
        if self.survey_type != "district_output":
            data["school"] = self.school
            data["circuit"] = self.circuit
        if self.teacher is not None and self.survey_type != "consolidated_checklist":
            data["teacher"] = self.teacher.name
        if self.upload_file_path:
            data["upload_file_path"] = self.upload_file_path
        return data

    def to_document(self) -> Dict[str, Any]:
        """Upload attached to a checklist answer, in the document list shape."""
        return {
            "id": self.id,
            "document_name": self.question_text,
            "uploaded_by": self.teacher.name if self.teacher is not None else None,
            "school": self.school,
            "district": self.district,
            "region": self.region,
            "upload_date": self.submitted_at.isoformat() if self.submitted_at else None,
            "file_url": self.upload_file_path,
            "related_survey": self.survey_type,
        }

    def to_answer(self) -> Dict[str, Any]:
        """Answer record as used by the indicator calculations."""
        return {
            "id": self.id,
            "question_id": self.question_id,
            "teacher_id": self.teacher_id,
            "school": self.school,
            "district": self.district,
            "region": self.region,
            "circuit": self.circuit,
            "answer": self.answer,
            "has_upload": bool(self.has_upload),
            "upload_file_path": self.upload_file_path,
        }


class SchoolDropout(Base):
    __tablename__ = "school_dropouts"

    id = Column(Integer, primary_key=True)
    school = Column(String(255), unique=True, nullable=False)
    dropouts = Column(Integer, default=0)


# ============================================================================
# SCHOOL REPORT
# ============================================================================

class _WeeklyTotals:
    school = Column(String(255), nullable=False, index=True)
    circuit = Column(String(100))
    district = Column(String(100))
    region = Column(String(100))
    year = Column(String(10), nullable=False)
    term = Column(String(10), nullable=False)
    week_number = Column(Integer, nullable=False)
    normal_boys_total = Column(Integer, default=0)
    normal_girls_total = Column(Integer, default=0)
    special_boys_total = Column(Integer, default=0)
    special_girls_total = Column(Integer, default=0)
    total_population = Column(Integer, default=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "school": self.school,
            "circuit": self.circuit,
            "district": self.district,
            "region": self.region,
            "year": self.year,
            "term": self.term,
            "week_number": self.week_number,
            "normal_boys_total": self.normal_boys_total,
            "normal_girls_total": self.normal_girls_total,
            "special_boys_total": self.special_boys_total,
            "special_girls_total": self.special_girls_total,
            "total_population": self.total_population,
        }


class EnrolmentTotal(_WeeklyTotals, Base):
    __tablename__ = "school_enrolment_totals"

    id = Column(Integer, primary_key=True)


class StudentAttendanceTotal(_WeeklyTotals, Base):
    __tablename__ = "school_student_attendance_totals"

    id = Column(Integer, primary_key=True)


class TeacherAttendance(Base):
    __tablename__ = "teacher_attendances"

    id = Column(Integer, primary_key=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"))
    school = Column(String(255), nullable=False, index=True)
    circuit = Column(String(100))
    district = Column(String(100))
    region = Column(String(100))
    year = Column(String(10), nullable=False)
    term = Column(String(10), nullable=False)
    week_number = Column(Integer, nullable=False)
    school_session_days = Column(Integer, default=0)
    days_present = Column(Integer, default=0)
    days_punctual = Column(Integer, default=0)
    days_absent = Column(Integer, default=0)
    excises_given = Column(Integer, default=0)
    excises_marked = Column(Integer, default=0)
    lesson_plan_ratings = Column(String(20))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "teacher_id": self.teacher_id,
            "school": self.school,
            "circuit": self.circuit,
            "district": self.district,
            "region": self.region,
            "year": self.year,
            "term": self.term,
            "week_number": self.week_number,
            "school_session_days": self.school_session_days,
            "days_present": self.days_present,
            "days_punctual": self.days_punctual,
            "days_absent": self.days_absent,
            "excises_given": self.excises_given,
            "excises_marked": self.excises_marked,
            "lesson_plan_ratings": self.lesson_plan_ratings,
        }


REPORT_MODELS = {
    "enrolment": EnrolmentTotal,
    "student_attendance": StudentAttendanceTotal,
    "teacher_attendance": TeacherAttendance,
}


def dataset_from_session(session) -> SurveyDataset:
    """Load the roster and stored answers into a ``SurveyDataset``."""
    teachers = [t.to_dict() for t in session.query(Teacher).order_by(Teacher.id).all()]
    answers = {attribute: [] for attribute in DATASET_ANSWER_ATTRIBUTES.values()}
    for submission in session.query(Submission).order_by(Submission.id).all():
        attribute = DATASET_ANSWER_ATTRIBUTES.get(submission.survey_type)
        if attribute:
            answers[attribute].append(submission.to_answer())
    dropouts = {d.school: d.dropouts or 0 for d in session.query(SchoolDropout).all()}
    return SurveyDataset(teachers, school_dropouts=dropouts, **answers)
