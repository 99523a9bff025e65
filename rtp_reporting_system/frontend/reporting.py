import io
from typing import Any, Dict, List, Optional

import pandas as pd
import plotly.express as px

from rtp_reporting_system.backend.data_utils import format_date, survey_type_name

BREAKDOWN_LEVELS = ["region", "district", "school", "teacher", "gender"]


def _sanitize_sheet_name(name: str) -> str:
    invalid = set('[]:*?/\\')
    s = ''.join('_' if c in invalid else c for c in str(name))
    return s[:31]


def indicator_table(indicators: List[Dict[str, Any]]) -> pd.DataFrame:
    """One row per indicator with its headline value."""
    if not indicators:
        return pd.DataFrame(columns=["ID", "Indicator", "Value", "Trend", "Category", "Subcategory"])
    return pd.DataFrame([
        {
            "ID": ind.get("id"),
            "Indicator": ind.get("name"),
            "Value": ind.get("value"),
            "Trend": ind.get("trend"),
            "Category": ind.get("category"),
            "Subcategory": ind.get("subcategory"),
        }
        for ind in indicators
    ])


def breakdown_frame(indicator: Dict[str, Any], level: str) -> pd.DataFrame:
    """
    Breakdown of an indicator at one level (region, district, school,
    teacher or gender), sorted by value. Empty if the indicator has none.
    """
    entries = (indicator.get("breakdown") or {}).get(f"by_{level}") or []
    df = pd.DataFrame(entries)
    if df.empty:
        return df
    df = df.rename(columns={level: level.title(), "value": "Value"})
    return df.sort_values("Value", ascending=False).reset_index(drop=True)


def calculation_trace_frame(indicator: Dict[str, Any]) -> pd.DataFrame:
    trace = indicator.get("calculation_trace") or []
    return pd.DataFrame(trace)


def submissions_frame(submissions: List[Dict[str, Any]]) -> pd.DataFrame:
    if not submissions:
        return pd.DataFrame()
    df = pd.DataFrame(submissions)
    if "survey_type" in df.columns:
        df["survey_type"] = df["survey_type"].map(survey_type_name)
    if "submitted_at" in df.columns:
        df["submitted_at"] = df["submitted_at"].map(format_date)
    columns = [c for c in ["id", "survey_type", "region", "district", "circuit", "school", "teacher",
                           "itinerary", "question_text", "answer", "submitted_at"] if c in df.columns]
    return df[columns]


def breakdown_chart(indicator: Dict[str, Any], level: str):
    """Bar chart of one breakdown level, or None when there is nothing to plot."""
    df = breakdown_frame(indicator, level)
    if df.empty:
        return None
    fig = px.bar(df, x=level.title(), y="Value", title=f"{indicator.get('name')} by {level}")
    fig.update_layout(xaxis_title=level.title(), yaxis_title="Value")
    return fig


def survey_type_chart(submissions: List[Dict[str, Any]]):
    if not submissions:
        return None
    counts = pd.Series([survey_type_name(s.get("survey_type")) for s in submissions]).value_counts()
    return px.pie(names=counts.index, values=counts.values, title="Submissions by survey type")


def _write_indicator_sheet(writer, indicators: List[Dict[str, Any]], sheet_name: str) -> Optional[int]:
    table = indicator_table(indicators)
    table.to_excel(writer, sheet_name=sheet_name, index=False)
    return len(table)


def build_indicators_excel(outcome: List[Dict[str, Any]], output: List[Dict[str, Any]]) -> bytes:
    """Create an Excel workbook with outcome, output and breakdown sheets using xlsxwriter.

    Every outcome indicator with a regional breakdown also gets a native
    column chart on its own sheet.
    """
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        outcome_rows = _write_indicator_sheet(writer, outcome, "Outcome Indicators")
        _write_indicator_sheet(writer, output, "Output Indicators")

        workbook = writer.book
        header = workbook.add_format({"bold": True})

        # Long format breakdown sheet covering every level of every indicator
        rows = []
        for ind in outcome + output:
            for level in BREAKDOWN_LEVELS:
                for entry in (ind.get("breakdown") or {}).get(f"by_{level}") or []:
                    rows.append({
                        "Indicator ID": ind.get("id"),
                        "Indicator": ind.get("name"),
                        "Level": level,
                        "Name": entry.get(level),
                        "Value": entry.get("value"),
                    })
        pd.DataFrame(rows, columns=["Indicator ID", "Indicator", "Level", "Name", "Value"]).to_excel(
            writer, sheet_name="Breakdowns", index=False
        )

        summary_ws = writer.sheets["Outcome Indicators"]
        summary_ws.set_column(1, 1, 60)
        summary_ws.set_row(0, None, header)

        for ind in outcome:
            df = breakdown_frame(ind, "region")
            if df.empty:
                continue
            sheet_name = _sanitize_sheet_name(f"{ind.get('id')}_by_region")
            ws = workbook.add_worksheet(sheet_name)
            ws.write_row(0, 0, ["Region", "Value"], header)
            for i, r in df.iterrows():
                ws.write(i + 1, 0, r["Region"])
                ws.write(i + 1, 1, r["Value"])
            chart = workbook.add_chart({"type": "column"})
            chart.add_series({
                "name": str(ind.get("name")),
                "categories": [sheet_name, 1, 0, len(df), 0],
                "values": [sheet_name, 1, 1, len(df), 1],
            })
            chart.set_title({"name": f"{ind.get('id')} by Region"})
            chart.set_x_axis({"name": "Region"})
            chart.set_y_axis({"name": "Value"})
            ws.insert_chart("D2", chart, {"x_scale": 1.2, "y_scale": 1.0})

        if outcome_rows == 0:
            writer.sheets["Outcome Indicators"].write(1, 0, "No outcome indicators available")

    return buf.getvalue()
