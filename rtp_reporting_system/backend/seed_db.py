#!/usr/bin/env python3
"""
Database seeding script for the RTP Reporting System.
Creates the tables and loads the mock roster, survey submissions and
School Report statistics so the live API serves the same data as mock mode.
"""

import argparse
import logging

from dotenv import load_dotenv

from rtp_reporting_system.backend.app import create_app
from rtp_reporting_system.backend.data_utils import parse_datetime
from rtp_reporting_system.backend.mock_submissions import MockSubmissionStore, get_mock_store
from rtp_reporting_system.backend.models import (
    REPORT_MODELS,
    Base,
    SchoolDropout,
    Submission,
    Teacher,
)
from rtp_reporting_system.backend.school_report import generate_school_records

logger = logging.getLogger(__name__)

# answers_* attribute of the mock database for each survey type
ANSWER_SOURCES = {
    "school_output": "answers_school_output",
    "district_output": "answers_district_output",
    "consolidated_checklist": "answers_consolidated_checklist",
    "partners_in_play": "answers_pip",
}


def seed_database(session, store: MockSubmissionStore = None, reset: bool = False) -> dict:
    """
    Load the mock fixtures into the database.

    Args:
        session: SQLAlchemy session bound to the target database
        store: Mock submissions to load (the default seeded store if omitted)
        reset: Delete existing rows first

    Returns:
        Number of rows inserted per table (empty if the data already exists)
    """
    store = store or get_mock_store()
    database = store.database

    if reset:
        for model in list(REPORT_MODELS.values()) + [Submission, SchoolDropout, Teacher]:
            session.query(model).delete()
        session.commit()
    elif session.query(Teacher).first():
        logger.info("Database already seeded, skipping")
        return {}

    counts = {}
    session.add_all(Teacher(**teacher) for teacher in database.teachers)
    session.flush()
    counts["teachers"] = len(database.teachers)

    submissions = 0
    for survey_type, records in store.by_survey_type().items():
        answers = getattr(database, ANSWER_SOURCES[survey_type])
        for record, answer in zip(records, answers):
            session.add(Submission(
                id=record["id"],
                survey_type=survey_type,
                question_id=record["question_id"],
                question_text=record["question_text"],
                answer=record["answer"],
                teacher_id=answer.get("teacher_id"),
                region=answer.get("region"),
                district=answer.get("district"),
                circuit=answer.get("circuit"),
                school=answer.get("school"),
                itinerary=record["itinerary"],
                has_upload=bool(answer.get("has_upload")),
                upload_file_path=answer.get("upload_file_path"),
                submitted_at=parse_datetime(record["submitted_at"]),
            ))
            submissions += 1
    counts["submissions"] = submissions

    session.add_all(
        SchoolDropout(school=school, dropouts=dropouts)
        for school, dropouts in database.school_dropouts.items()
    )
    counts["school_dropouts"] = len(database.school_dropouts)

    for kind, rows in generate_school_records(database).items():
        model = REPORT_MODELS[kind]
        session.add_all(model(**row) for row in rows)
        counts[kind] = len(rows)

    session.commit()
    logger.info("Seeded database: %s", counts)
    return counts


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the RTP reporting database with mock data")
    parser.add_argument("--reset", action="store_true", help="delete existing rows first")
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = create_app()
    Session = app.extensions["db_session"]
    with app.app_context():
        Base.metadata.create_all(Session.get_bind())
        print("✓ Database tables created")
        counts = seed_database(Session(), reset=args.reset)
        if counts:
            for table, count in counts.items():
                print(f"✓ {count} {table} rows loaded")
        else:
            print("✓ Database already contains data (use --reset to reload)")


if __name__ == "__main__":
    main()
