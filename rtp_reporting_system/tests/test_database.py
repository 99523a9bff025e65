from rtp_reporting_system.backend.app import create_app
from rtp_reporting_system.backend.mock_database import MockDatabase, get_mock_database
from rtp_reporting_system.backend.mock_submissions import MockSubmissionStore, get_mock_store
from rtp_reporting_system.backend.models import (
    EnrolmentTotal,
    Submission,
    Teacher,
    TeacherAttendance,
    dataset_from_session,
)
from rtp_reporting_system.backend.seed_db import seed_database


def test_mock_database_is_reproducible():
    first = MockDatabase(seed=7)
    second = MockDatabase(seed=7)
    assert first.answers_pip == second.answers_pip
    assert first.school_dropouts == second.school_dropouts
    assert get_mock_database() is get_mock_database()


def test_mock_database_answer_counts():
    database = get_mock_database()
    assert len(database.teachers) == 8
    assert len(database.answers_school_output) == 8 * 18
    assert len(database.answers_district_output) == len(database.districts) * 13
    assert all(a["teacher_id"] is None for a in database.answers_district_output)
    uploads = [a for a in database.answers_consolidated_checklist if a.get("has_upload")]
    assert all(a["question_id"] == 18 and a["answer"] == "Yes" for a in uploads)


def test_mock_store_submission_records():
    store = get_mock_store()
    school = store.school_output[0]
    assert school["id"] == 1000
    assert school["teacher"] == "KYEREH CLEMENT"
    assert school["itinerary"].startswith("Term ")

    district = store.district_output[0]
    assert district["id"] == 2000
    assert "school" not in district and "teacher" not in district
    assert all("teacher" not in s for s in store.consolidated_checklist)

    recent = store.recent_submissions(10)
    assert len(recent) == 10
    assert recent == store.sorted_submissions()[:10]


def test_mock_store_documents():
    store = MockSubmissionStore(get_mock_database())
    docs = store.documents_for("district", "BIAKOYE")
    assert docs
    assert all(d["district"] == "BIAKOYE" for d in docs)
    assert store.documents_for("region", "All") == store.document_uploads
    assert all(d["uploaded_by"] == "KYEREH CLEMENT" for d in store.documents_for("teacher", "KYEREH CLEMENT"))


def test_seed_database_loads_fixtures_once():
    app = create_app("testing")
    Session = app.extensions["db_session"]
    session = Session()

    counts = seed_database(session)
    store = get_mock_store()
    assert counts["teachers"] == 8
    assert counts["submissions"] == len(store.all_submissions())
    assert counts["school_dropouts"] == 6
    assert session.query(Submission).count() == counts["submissions"]
    assert session.query(EnrolmentTotal).count() == counts["enrolment"]
    assert session.query(TeacherAttendance).count() == counts["teacher_attendance"]

    assert seed_database(session) == {}
    assert seed_database(session, reset=True)["teachers"] == 8
    assert session.query(Teacher).count() == 8
    Session.remove()


def test_dataset_from_session_matches_mock_database():
    app = create_app("testing")
    Session = app.extensions["db_session"]
    session = Session()
    seed_database(session)

    dataset = dataset_from_session(session)
    database = get_mock_database()
    assert dataset.teachers == database.teachers
    assert dataset.school_dropouts == database.school_dropouts
    assert [a["answer"] for a in dataset.answers_pip] == [a["answer"] for a in database.answers_pip]
    assert len(dataset.answers_consolidated_checklist) == len(database.answers_consolidated_checklist)
    Session.remove()
