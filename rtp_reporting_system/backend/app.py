"""
Flask Backend API for the RTP Reporting System

Provides RESTful endpoints for:
- RTP survey submissions (school output, district output, consolidated
  checklist, partners in play)
- Outcome and output indicators computed from stored answers
- Filter options for the dashboard
- School Report statistics (enrolment, student and teacher attendance)
"""

import os
import random
from collections import OrderedDict

from flask import Flask, jsonify, request
from flask_cors import CORS
from sqlalchemy import create_engine, func
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from rtp_reporting_system.backend.config import config_by_name, get_config
from rtp_reporting_system.backend.data_utils import parse_datetime
from rtp_reporting_system.backend.indicators import (
    LTP_SKILL_QUESTIONS,
    calculate_outcome_indicators,
    calculate_output_indicators,
    calculate_supplementary_indicators,
    filter_indicators,
    get_indicator,
)
from rtp_reporting_system.backend.models import (
    REPORT_MODELS,
    Base,
    Submission,
    Teacher,
    dataset_from_session,
)
from rtp_reporting_system.backend.school_report import (
    ReportPeriod,
    aggregate_enrollment,
    aggregate_student_attendance,
    aggregate_teacher_attendance,
    build_school_summary,
    group_periods,
    rows_for_period,
    summarize_enrolment,
    summarize_student_attendance,
    summarize_teacher_attendance,
)

ENTITY_COLUMNS = {
    "regions": "region",
    "districts": "district",
    "circuits": "circuit",
    "schools": "school",
    "teachers": "teacher",
}

SURVEY_ROUTES = {
    "school-responses": "school_output",
    "output/district": "district_output",
    "consolidated-checklist": "consolidated_checklist",
    "partners-in-play": "partners_in_play",
}


def _engine_options(app):
    options = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {}))
    uri = app.config["SQLALCHEMY_DATABASE_URI"]
    if uri in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection so every session sees the same in-memory database
        options.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
    return options


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

def create_app(config=None):
    app = Flask(__name__)
    if isinstance(config, str):
        config = config_by_name[config]
    app_config = (config or get_config())()
    app.config.from_object(app_config)

    origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": origins}})

    engine = create_engine(app.config["SQLALCHEMY_DATABASE_URI"], **_engine_options(app))
    if app.config.get("AUTO_CREATE_TABLES"):
        Base.metadata.create_all(engine)
    Session = scoped_session(sessionmaker(bind=engine))
    app.extensions["db_session"] = Session

    @app.teardown_appcontext
    def remove_session(exception=None):
        Session.remove()

    # Utility helpers
    def get_session():
        return Session()

    def parse_int(value, default=None):
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def submission_query(session):
        query = session.query(Submission)
        for column in ("region", "district", "circuit", "school", "itinerary"):
            value = request.args.get(column)
            if value:
                query = query.filter(getattr(Submission, column) == value)
        return query

    def as_responses(submissions):
        """Group per-question rows into one response per teacher (or district)."""
        responses = OrderedDict()
        for s in submissions:
            key = s.teacher_id if s.teacher_id is not None else (s.school or s.district)
            response = responses.get(key)
            if response is None:
                response = responses[key] = {
                    "id": s.id,
                    "school_id": s.school,
                    "school_name": s.school,
                    "teacher_id": s.teacher_id,
                    "teacher_name": s.teacher.name if s.teacher else None,
                    "answers": [],
                }
            response["answers"].append({
                "question_id": s.question_id,
                "answer_value": s.answer,
                "score": LTP_SKILL_QUESTIONS.get(s.question_id, {}).get(s.answer)
                if s.survey_type == "partners_in_play" else None,
                "upload_file_path": s.upload_file_path,
            })
        return list(responses.values())

    # ========================================================================
    # SUBMISSION ENDPOINTS
    # ========================================================================

    def survey_submissions(survey_type):
        session = get_session()
        query = submission_query(session).filter(Submission.survey_type == survey_type)
        itinerary_id = request.args.get("itineraryId")
        if itinerary_id:
            query = query.filter(Submission.itinerary == itinerary_id)
        rows = query.order_by(Submission.id).all()
        if request.args.get("format") == "responses":
            return jsonify(as_responses(rows))
        return jsonify([s.to_dict() for s in rows])

    for route, survey_type in SURVEY_ROUTES.items():
        app.add_url_rule(
            f"/api/rtp/{route}",
            endpoint=f"{survey_type}_submissions",
            view_func=lambda survey_type=survey_type: survey_submissions(survey_type),
            methods=["GET"],
        )

    @app.get("/api/rtp/overview/recent")
    def recent_submissions():
        limit = parse_int(request.args.get("limit"), 10)
        session = get_session()
        rows = (
            session.query(Submission)
            .order_by(Submission.submitted_at.desc(), Submission.id.desc())
            .limit(limit)
            .all()
        )
        return jsonify([s.to_dict() for s in rows])

    @app.get("/api/rtp/submissions")
    def list_submissions():
        session = get_session()
        query = submission_query(session)
        survey_type = request.args.get("survey_type")
        if survey_type:
            query = query.filter(Submission.survey_type == survey_type)
        limit = parse_int(request.args.get("limit"))
        query = query.order_by(Submission.id)
        if limit:
            query = query.limit(limit)
        return jsonify([s.to_dict() for s in query.all()])

    @app.post("/api/rtp/submissions")
    def create_submission():
        payload = request.get_json() or {}
        required = ["survey_type", "question_id"]
        if not all(k in payload for k in required):
            return jsonify({"error": "Missing required fields"}), 400
        if payload["survey_type"] not in SURVEY_ROUTES.values():
            return jsonify({"error": "Invalid survey type"}), 400
        question_id = parse_int(payload["question_id"])
        if question_id is None:
            return jsonify({"error": "Invalid question id"}), 400

        submitted_at = None
        if payload.get("submitted_at"):
            submitted_at = parse_datetime(payload["submitted_at"])
            if submitted_at is None:
                return jsonify({"error": "Invalid date format"}), 400

        session = get_session()
        teacher = None
        if payload.get("teacher_id") is not None:
            teacher = session.get(Teacher, parse_int(payload["teacher_id"]))
            if not teacher:
                return jsonify({"error": "Teacher not found"}), 404

        submission = Submission(
            survey_type=payload["survey_type"],
            question_id=question_id,
            question_text=payload.get("question_text"),
            answer=payload.get("answer"),
            teacher=teacher,
            region=payload.get("region") or (teacher.region if teacher else None),
            district=payload.get("district") or (teacher.district if teacher else None),
            circuit=payload.get("circuit") or (teacher.circuit if teacher else None),
            school=payload.get("school") or (teacher.school if teacher else None),
            itinerary=payload.get("itinerary"),
            has_upload=bool(payload.get("upload_file_path")),
            upload_file_path=payload.get("upload_file_path"),
        )
        if submitted_at is not None:
            submission.submitted_at = submitted_at
        session.add(submission)
        session.commit()
        return jsonify(submission.to_dict()), 201

    @app.get("/api/rtp/submissions/<int:submission_id>")
    def get_submission(submission_id: int):
        session = get_session()
        submission = session.get(Submission, submission_id)
        if not submission:
            return jsonify({"error": "Submission not found"}), 404
        return jsonify(submission.to_dict())

    def entity_query(column, name):
        query = get_session().query(Submission)
        if column == "teacher":
            return query.join(Teacher).filter(Teacher.name == name)
        if column == "region" and name == "All":
            return query
        return query.filter(getattr(Submission, column) == name)

    @app.get("/api/rtp/<entity>/<path:name>/submissions")
    def entity_submissions(entity: str, name: str):
        column = ENTITY_COLUMNS.get(entity)
        if not column:
            return jsonify({"error": f"Unknown entity type: {entity}"}), 404

        query = entity_query(column, name)
        if column == "teacher":
            query = query.filter(Submission.survey_type != "consolidated_checklist")
        return jsonify([s.to_dict() for s in query.order_by(Submission.id).all()])

    @app.get("/api/rtp/<entity>/<path:name>/documents")
    def entity_documents(entity: str, name: str):
        column = ENTITY_COLUMNS.get(entity)
        if not column:
            return jsonify({"error": f"Unknown entity type: {entity}"}), 404

        query = entity_query(column, name).filter(Submission.upload_file_path.isnot(None))
        return jsonify([s.to_document() for s in query.order_by(Submission.id).all()])

    # ========================================================================
    # INDICATOR ENDPOINTS
    # ========================================================================

    @app.get("/api/rtp/outcome-indicators")
    def outcome_indicators():
        dataset = dataset_from_session(get_session())
        return jsonify(calculate_outcome_indicators(dataset))

    @app.get("/api/rtp/outcome-indicators/<indicator_id>")
    def outcome_indicator(indicator_id: str):
        dataset = dataset_from_session(get_session())
        indicator = get_indicator(calculate_outcome_indicators(dataset), indicator_id)
        if not indicator:
            return jsonify({"error": "Indicator not found"}), 404
        return jsonify(indicator)

    @app.get("/api/rtp/output")
    def output_indicators():
        dataset = dataset_from_session(get_session())
        indicators = calculate_output_indicators(dataset, random.Random(app.config["RTP_MOCK_SEED"]))
        return jsonify(filter_indicators(
            indicators,
            category=request.args.get("category"),
            subcategory=request.args.get("subcategory"),
        ))

    @app.get("/api/rtp/supplementary-indicators")
    def supplementary_indicators():
        dataset = dataset_from_session(get_session())
        return jsonify(calculate_supplementary_indicators(dataset))

    # ========================================================================
    # FILTER ENDPOINTS
    # ========================================================================

    def distinct_values(column):
        session = get_session()
        rows = (
            session.query(column)
            .filter(column.isnot(None))
            .distinct()
            .order_by(column)
            .all()
        )
        return [r[0] for r in rows]

    @app.get("/api/rtp/regions")
    def list_regions():
        return jsonify(distinct_values(Submission.region))

    @app.get("/api/rtp/districts")
    def list_districts():
        return jsonify(distinct_values(Submission.district))

    @app.get("/api/rtp/circuits")
    def list_circuits():
        return jsonify(distinct_values(Submission.circuit))

    @app.get("/api/rtp/schools")
    def list_schools():
        return jsonify(distinct_values(Submission.school))

    @app.get("/api/rtp/itineraries")
    def list_itineraries():
        return jsonify(distinct_values(Submission.itinerary))

    # ========================================================================
    # SCHOOL REPORT STATISTICS
    # ========================================================================

    def report_rows(kind):
        session = get_session()
        model = REPORT_MODELS[kind]
        query = session.query(model)
        for column in ("school", "circuit", "district", "region"):
            value = request.args.get(column)
            if value:
                query = query.filter(getattr(model, column) == value)
        return [r.to_dict() for r in query.order_by(model.week_number.desc(), model.id).all()]

    def requested_period():
        return ReportPeriod(
            year=request.args.get("year"),
            term=request.args.get("term"),
            week=parse_int(request.args.get("weekNumber")),
        )

    def period_rows(kind):
        return rows_for_period(report_rows(kind), requested_period())

    @app.get("/api/statistics/enrolment")
    def enrolment_statistics():
        rows = period_rows("enrolment")
        if not rows:
            return jsonify({"error": "No enrollment data found"}), 404
        return jsonify(summarize_enrolment(rows[0]))

    @app.get("/api/statistics/student-attendance")
    def student_attendance_statistics():
        rows = period_rows("student_attendance")
        if not rows:
            return jsonify({"error": "No student attendance data found"}), 404
        return jsonify(summarize_student_attendance(rows))

    @app.get("/api/statistics/teacher-attendance")
    def teacher_attendance_statistics():
        rows = period_rows("teacher_attendance")
        if not rows:
            return jsonify({"error": "No teacher attendance data found"}), 404
        return jsonify(summarize_teacher_attendance(rows))

    @app.get("/api/statistics/aggregate")
    def aggregate_statistics():
        """Totals across every school matching the location filters."""
        return jsonify({
            "enrolment": aggregate_enrollment(period_rows("enrolment")),
            "student_attendance": aggregate_student_attendance(period_rows("student_attendance")),
            "teacher_attendance": aggregate_teacher_attendance(period_rows("teacher_attendance")),
        })

    @app.get("/api/statistics/summary")
    def school_summary():
        school = request.args.get("school")
        if not school:
            return jsonify({"error": "Missing school parameter"}), 400
        rows_by_kind = {kind: report_rows(kind) for kind in REPORT_MODELS}
        return jsonify(build_school_summary(rows_by_kind, school, requested_period()))

    @app.get("/api/statistics/periods")
    def statistics_periods():
        return jsonify(group_periods(report_rows("enrolment")))

    # ========================================================================
    # HEALTH CHECK
    # ========================================================================

    @app.get("/api/health")
    def health():
        session = get_session()
        submissions = session.query(func.count(Submission.id)).scalar()
        return jsonify({"status": "ok", "version": "1.0", "submissions": submissions})

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
