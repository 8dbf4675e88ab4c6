import pandas as pd
import streamlit as st

from dashboard.constants import REPORT_OPTIONS
from dashboard.data import repositories
from dashboard.visualizations import category_bar_chart, ranking_chart, trend_line_chart
from mastery.reports import ReportKind, ReportOrdering


def render_report_tab(ctx):
    st.markdown("<div class='section-title'>Reports</div>", unsafe_allow_html=True)

    cols = st.columns([0.6, 0.4])
    kind = cols[0].selectbox(
        "Report",
        list(REPORT_OPTIONS.keys()),
        format_func=lambda value: REPORT_OPTIONS[value],
        key="reports.kind",
    )
    kind = ReportKind(kind)
    sort_by_value = cols[1].toggle(
        "Sort by value",
        value=kind is not ReportKind.TREND,
        key=f"reports.sort.{kind.value}",
    )
    ordering = ReportOrdering.BY_VALUE if sort_by_value else ReportOrdering.NATURAL
    report = repositories.reports().generate(kind, ordering)

    if not report.rows:
        st.info("No data for this report yet.")
        return

    if kind is ReportKind.COMPLETION:
        st.plotly_chart(ranking_chart(report.rows, "Top tasks • last 14 days"), use_container_width=True)
        table = pd.DataFrame(
            [
                {"Task": row["name"], "Category": row["category"], "Average (%)": round(row["average"], 1)}
                for row in report.rows
            ]
        )
    elif kind is ReportKind.CATEGORY:
        st.plotly_chart(category_bar_chart(report.rows, "Category completion"), use_container_width=True)
        table = pd.DataFrame(report.rows).rename(columns={"name": "Category", "value": "Completion (%)", "total": "Tasks"})
    else:
        st.plotly_chart(trend_line_chart(report.rows, "Daily completion • last 30 days"), use_container_width=True)
        table = pd.DataFrame(report.rows).rename(columns={"date": "Date", "name": "Day", "value": "Completion (%)"})

    st.dataframe(table, hide_index=True, use_container_width=True)
    st.download_button(
        "Export CSV",
        data=report.to_csv(),
        file_name=report.filename,
        mime="text/csv",
        key=f"reports.export.{kind.value}",
    )
