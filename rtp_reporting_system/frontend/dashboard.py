"""
RTP Reporting Dashboard

Streamlit dashboard for the RTP survey programme: outcome and
output indicators, recent submissions, drill-down by region, district,
circuit, school and teacher, and the School Report view.
"""

import logging
from datetime import datetime

import pandas as pd
import streamlit as st

from rtp_reporting_system.backend.api_service import RTPApiService
from rtp_reporting_system.backend.data_utils import format_date, relative_time, survey_type_name
from rtp_reporting_system.backend.hierarchy import build_entity_view, paginate, update_filter_selection
from rtp_reporting_system.backend.indicators import filter_indicators
from rtp_reporting_system.backend.rtp_client import RTPApiClient, RTPApiError
from rtp_reporting_system.frontend.config import get_api_base_url, get_use_mock_data
from rtp_reporting_system.frontend.reporting import (
    breakdown_chart,
    breakdown_frame,
    build_indicators_excel,
    calculation_trace_frame,
    indicator_table,
    submissions_frame,
    survey_type_chart,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Page configuration
st.set_page_config(
    page_title="RTP Reporting Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

ROWS_PER_PAGE = 10


def get_service() -> RTPApiService:
    """One service per browser session so the data source toggle sticks."""
    if "rtp_service" not in st.session_state:
        st.session_state.rtp_service = RTPApiService(
            use_mock_data=get_use_mock_data(),
            client=RTPApiClient(base_url=get_api_base_url()),
        )
    return st.session_state.rtp_service


def render_indicator_cards(indicators, columns: int = 3):
    for start in range(0, len(indicators), columns):
        cols = st.columns(columns)
        for col, ind in zip(cols, indicators[start:start + columns]):
            with col:
                value = ind.get("value")
                if isinstance(value, (int, float)) and ind.get("id", "").startswith("oi") and ind["id"] not in ("oi1", "oi5"):
                    value = f"{value:.1f}%"
                st.metric(ind.get("name", ""), value, delta=ind.get("trend"))


def render_breakdown(indicator):
    levels = [k[3:] for k in (indicator.get("breakdown") or {}).keys()]
    if not levels:
        st.info("No breakdown available for this indicator.")
        return
    level = st.radio("Breakdown level", levels, horizontal=True, key=f"level_{indicator['id']}")
    fig = breakdown_chart(indicator, level)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True)
    st.dataframe(breakdown_frame(indicator, level), use_container_width=True, hide_index=True)
    with st.expander("Calculation trace"):
        st.dataframe(calculation_trace_frame(indicator), use_container_width=True, hide_index=True)


def render_filter_bar(service):
    selected = st.session_state.setdefault("filter_selection", {})
    options = service.get_cascading_filters(selected)
    cols = st.columns(5)
    for col, key in zip(cols, ["regions", "districts", "circuits", "schools", "teachers"]):
        with col:
            choices = [""] + options.get(key, [])
            current = selected.get(key, "")
            value = st.selectbox(
                key.title(),
                choices,
                index=choices.index(current) if current in choices else 0,
                key=f"filter_{key}",
            )
            if value != current:
                st.session_state.filter_selection = update_filter_selection(selected, key, value)
                st.rerun()
    return selected


def main():
    st.title("📊 RTP Reporting Dashboard")
    service = get_service()

    # Sidebar
    st.sidebar.title("Data Source")
    use_mock = st.sidebar.toggle("Use mock data", value=service.use_mock_data)
    if use_mock != service.use_mock_data:
        service.toggle_data_source()
        st.rerun()
    st.sidebar.caption("Mock fixtures" if service.use_mock_data else f"Live API: {get_api_base_url()}")

    tabs = st.tabs([
        "📈 Outcome Indicators",
        "📊 Output Indicators",
        "🕒 Recent Submissions",
        "🗺️ Hierarchy",
        "🏫 School Report",
    ])

    outcome = service.get_outcome_indicators()
    output = service.get_output_indicators()

    # Tab 1: Outcome indicators
    with tabs[0]:
        st.subheader("Outcome Indicators")
        render_indicator_cards(outcome)
        if outcome:
            names = {ind["name"]: ind for ind in outcome}
            chosen = st.selectbox("Drill down", list(names.keys()), key="outcome_drilldown")
            render_breakdown(names[chosen])

        st.markdown("---")
        st.download_button(
            label="📥 Download Indicators (Excel)",
            data=build_indicators_excel(outcome, output),
            file_name=f"rtp_indicators_{datetime.now().strftime('%Y%m%d')}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    # Tab 2: Output indicators
    with tabs[1]:
        st.subheader("Output Indicators")
        category = st.selectbox("Category", ["all", "school_output", "district_output"])
        shown = filter_indicators(output, None if category == "all" else category)
        st.dataframe(indicator_table(shown), use_container_width=True, hide_index=True)
        if shown:
            names = {ind["name"]: ind for ind in shown}
            chosen = st.selectbox("Drill down", list(names.keys()), key="output_drilldown")
            render_breakdown(names[chosen])

    # Tab 3: Recent submissions
    with tabs[2]:
        st.subheader("Recent Submissions")
        limit = st.slider("Number of submissions", 5, 200, 20)
        recent = service.get_recent_submissions(limit)
        if recent:
            latest = recent[0]
            st.caption(
                f"Latest: {survey_type_name(latest.get('survey_type'))} "
                f"{relative_time(latest.get('submitted_at'))} ({format_date(latest.get('submitted_at'))})"
            )
            fig = survey_type_chart(recent)
            if fig is not None:
                st.plotly_chart(fig, use_container_width=True)
            st.dataframe(submissions_frame(recent), use_container_width=True, hide_index=True)
        else:
            st.info("No submissions available.")

    # Tab 4: Hierarchy view
    with tabs[3]:
        st.subheader("Hierarchy View")
        selected = render_filter_bar(service)
        entity_type, entity_name = "region", "All"
        for key, etype in [("teachers", "teacher"), ("schools", "school"), ("circuits", "circuit"),
                           ("districts", "district"), ("regions", "region")]:
            if selected.get(key):
                entity_type, entity_name = etype, selected[key]
                break

        col1, col2, col3 = st.columns(3)
        with col1:
            itinerary = st.selectbox("Itinerary", st.session_state.get("itineraries", ["all"]))
        with col2:
            start = st.date_input("Start date", value=None)
        with col3:
            end = st.date_input("End date", value=None)

        view = build_entity_view(service, entity_type, entity_name, itinerary, start, end)
        st.session_state.itineraries = view["filters"]["itineraries"]

        st.markdown(f"### {entity_type.title()}: {entity_name}")
        if view["survey_type_counts"]:
            counts = pd.DataFrame(
                [{"Survey Type": survey_type_name(k), "Submissions": v} for k, v in view["survey_type_counts"].items()]
            )
            st.dataframe(counts, use_container_width=True, hide_index=True)

        if view["children"]:
            st.markdown("#### Child Entities")
            st.dataframe(
                pd.DataFrame([
                    {
                        "Name": child["name"],
                        "Submissions": child["count"],
                        "Latest": format_date((child["latest_submission"] or {}).get("submitted_at")),
                    }
                    for child in view["children"]
                ]),
                use_container_width=True,
                hide_index=True,
            )

        if view["documents"]:
            st.markdown("#### Documents")
            st.dataframe(
                pd.DataFrame([
                    {
                        "Document": doc.get("document_name"),
                        "Uploaded By": doc.get("uploaded_by"),
                        "Date": format_date(doc.get("upload_date")),
                        "File": doc.get("file_url"),
                    }
                    for doc in view["documents"]
                ]),
                use_container_width=True,
                hide_index=True,
            )

        submissions = view["submissions"]
        pages =max(1, (len(submissions) + ROWS_PER_PAGE - 1) // ROWS_PER_PAGE)
        page = st.number_input("Page", min_value=1, max_value=pages, value=1) - 1
        st.dataframe(
            submissions_frame(paginate(submissions, page, ROWS_PER_PAGE)),
            use_container_width=True,
            hide_index=True,
        )

    # Tab 5: School Report
    with tabs[4]:
        st.subheader("School Report")
        schools = service.get_filters().get("schools", [])
        if not schools:
            st.info("No schools available.")
        else:
            school = st.selectbox("School", schools)
            periods = service.get_report_periods()
            col1, col2 = st.columns(2)
            with col1:
                year = st.selectbox("Year", ["Latest"] + [str(p["year"]) for p in periods])
            terms = next((p["terms"] for p in periods if str(p["year"]) == year), [])
            with col2:
                term = st.selectbox("Term", ["Latest"] + [str(t["term"]) for t in terms])
            year = None if year == "Latest" else year
            term = None if term == "Latest" else term
            try:
                report = service.get_school_summary(school, year, term)
            except RTPApiError as exc:
                st.error(exc.user_message())
                report = {}

            enrolment = report.get("enrolment")
            attendance = report.get("student_attendance")
            teachers = report.get("teacher_attendance")
            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Total Students", enrolment["total_students"] if enrolment else "N/A")
            with col2:
                st.metric("Student Attendance", f"{attendance['attendance_rate']:.1f}%" if attendance else "N/A")
            with col3:
                st.metric("Teacher Attendance", f"{teachers['attendance_rate']:.1f}%" if teachers else "N/A")

            if teachers and teachers.get("lesson_plan_quality"):
                quality = pd.DataFrame([
                    {"Rating": rating.replace("_", " ").title(), **values}
                    for rating, values in teachers["lesson_plan_quality"].items()
                ])
                st.markdown("#### Lesson Plan Quality")
                st.dataframe(quality, use_container_width=True, hide_index=True)

    # Footer
    st.markdown("---")
    st.caption("RTP Reporting System")


if __name__ == "__main__":
    main()
