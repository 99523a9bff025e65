from datetime import date

import pytest

from rtp_reporting_system.backend.api_service import RTPApiService
from rtp_reporting_system.backend.hierarchy import (
    apply_filters,
    available_itineraries,
    build_entity_view,
    build_hierarchy,
    child_entities,
    group_by_survey_type,
    group_submissions_by_survey,
    paginate,
    update_filter_selection,
)

SUBMISSIONS = [
    {"id": 1, "survey_type": "school_output", "itinerary": "Term 1 2025", "region": "BONO",
     "district": "JAMAN NORTH", "school": "GOKA", "teacher": "Kwame", "submitted_at": "2025-01-10T09:00:00"},
    {"id": 2, "survey_type": "partners_in_play", "itinerary": "Term 2 2025", "region": "BONO",
     "district": "JAMAN NORTH", "school": "ASANTEKROM", "teacher": "Clement", "submitted_at": "2025-02-10T23:30:00"},
    {"id": 3, "survey_type": "district_output", "itinerary": "Term 1 2025", "region": "BONO",
     "district": "BEREKUM WEST", "submitted_at": "2025-03-01T09:00:00"},
    {"id": 4, "survey_type": "school_output", "itinerary": "Term 2 2025", "region": "BONO",
     "district": "JAMAN NORTH", "school": "GOKA", "teacher": "Kwame", "submitted_at": "2025-02-11T09:00:00"},
]


def test_apply_filters_by_itinerary_and_type():
    assert [s["id"] for s in apply_filters(SUBMISSIONS, itinerary="Term 1 2025")] == [1, 3]
    assert [s["id"] for s in apply_filters(SUBMISSIONS, survey_type="school_output")] == [1, 4]
    assert apply_filters(SUBMISSIONS) == SUBMISSIONS


def test_apply_filters_date_range_is_inclusive():
    filtered = apply_filters(SUBMISSIONS, start=date(2025, 2, 1), end=date(2025, 2, 10))
    # the end date covers the whole day
    assert [s["id"] for s in filtered] == [2]


def test_apply_filters_date_strings_cover_whole_end_day():
    filtered = apply_filters(SUBMISSIONS, start="2025-02-10", end="2025-02-10")
    assert [s["id"] for s in filtered] == [2]

    same_day = [{"id": 9, "submitted_at": "2025-03-01T09:00:00"}]
    assert apply_filters(same_day, start="2025-03-01", end="2025-03-01") == same_day
    assert apply_filters(same_day, start="2025-03-01T10:00:00", end="2025-03-01T12:00:00") == []


def test_apply_filters_ignores_half_open_range():
    assert len(apply_filters(SUBMISSIONS, start=date(2025, 2, 1))) == 4
    assert len(apply_filters(SUBMISSIONS, end="2025-01-01")) == 4


def test_build_hierarchy_for_region():
    tree = build_hierarchy(SUBMISSIONS, "region")
    assert [node["name"] for node in tree] == ["JAMAN NORTH", "BEREKUM WEST"]
    jaman = tree[0]
    assert jaman["type"] == "district"
    assert [school["name"] for school in jaman["children"]] == ["GOKA", "ASANTEKROM"]
    goka = jaman["children"][0]
    assert goka["children"] == [{"type": "teacher", "name": "Kwame", "children": []}]
    # district output has no school
    assert tree[1]["children"] == []


def test_build_hierarchy_for_teacher_and_invalid_type():
    assert build_hierarchy(SUBMISSIONS, "teacher") == []
    with pytest.raises(ValueError):
        build_hierarchy(SUBMISSIONS, "village")


def test_grouping():
    groups = group_by_survey_type(SUBMISSIONS + [{"id": 5}])
    assert sorted(groups) == ["district_output", "partners_in_play", "school_output", "unknown"]
    assert len(groups["school_output"]) == 2

    surveys = group_submissions_by_survey([
        {"id": 1, "survey_id": "s1", "survey_type": "school_output"},
        {"id": 2, "survey_id": "s1", "survey_type": "school_output"},
        {"id": 3, "survey_type": "district_output", "collector": "Officer"},
    ])
    assert [(s["id"], s["question_count"]) for s in surveys] == [("s1", 2), (3, 1)]
    assert surveys[0]["collector"] == "Unknown"
    assert surveys[1]["collector"] == "Officer"


def test_available_itineraries():
    assert available_itineraries(SUBMISSIONS) == ["all", "Term 1 2025", "Term 2 2025"]


def test_update_filter_selection_clears_children():
    selected = {"regions": "BONO", "districts": "JAMAN NORTH", "schools": "GOKA"}
    updated = update_filter_selection(selected, "regions", "OTI")
    assert updated == {"regions": "OTI"}
    assert selected["districts"] == "JAMAN NORTH"

    assert update_filter_selection(selected, "schools", "") == {"regions": "BONO", "districts": "JAMAN NORTH"}
    assert update_filter_selection({}, "teachers", "Kwame") == {"teachers": "Kwame"}


def test_paginate():
    items = list(range(25))
    assert paginate(items, 0, 10) == list(range(10))
    assert paginate(items, 2, 10) == [20, 21, 22, 23, 24]
    assert paginate(items, 3, 10) == []
    assert paginate(items, -1, 10) == []
    assert paginate(items, 0, 0) == []


def test_child_entities():
    children = child_entities(SUBMISSIONS, "region")
    assert [(c["name"], c["count"]) for c in children] == [("BEREKUM WEST", 1), ("JAMAN NORTH", 3)]
    assert children[1]["latest_submission"]["id"] == 4
    assert child_entities(SUBMISSIONS, "teacher") == []


def test_build_entity_view_from_mock_service():
    service = RTPApiService(use_mock_data=True)
    view = build_entity_view(service, "district", "BIAKOYE")
    assert view["parent"] == {"type": "region", "name": "OTI"}
    assert view["submissions"]
    assert all(s["district"] == "BIAKOYE" for s in view["submissions"])
    assert [c["name"] for c in view["children"]] == ["AKPOSO KABO R.C KG & PRIMARY SCHOOL"]
    assert sum(view["survey_type_counts"].values()) == len(view["submissions"])
    assert view["filters"]["itineraries"][0] == "all"
    assert view["documents"]
    assert all(d["district"] == "BIAKOYE" for d in view["documents"])


def test_build_entity_view_for_unknown_entity():
    service = RTPApiService(use_mock_data=True)
    view = build_entity_view(service, "school", "Nowhere")
    assert view["submissions"] == []
    assert view["parent"] == {"type": "district", "name": "All"}
    assert view["children"] == []
