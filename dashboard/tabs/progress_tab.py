from datetime import date, timedelta

import streamlit as st

from dashboard.data import repositories
from dashboard.visualizations import completion_bar_chart
from mastery import progress as stats
from mastery.dates import week_start_for
from mastery.settings import get_settings


def _render_summary(series, threshold):
    best = stats.best_day(series)
    cols = st.columns(3)
    cols[0].metric("Average completion", f"{stats.average_completion_rate(series):.0f}%")
    cols[1].metric("Best day", best.day, f"{best.rate:.0f}%", delta_color="off")
    cols[2].metric(f"Best streak (≥{threshold * 100:.0f}%)", f"{stats.streak(series, threshold)} days")


def render_progress_tab(ctx):
    st.markdown("<div class='section-title'>Progress</div>", unsafe_allow_html=True)
    settings = get_settings()
    aggregator = repositories.progress()
    today = date.today()

    view = st.radio("Window", ["Weekly", "Monthly"], horizontal=True, key="progress.view")
    if view == "Weekly":
        default_start = week_start_for(today, settings.week_starts_on)
        week_start = st.date_input("Week starting", value=default_start, max_value=today, key="progress.week_start")
        series = aggregator.weekly_progress(week_start)
        title = f"Week of {week_start.strftime('%d %b %Y')}"
        chart_data = stats.completion_chart_data(series, "%a")
    else:
        month_options = []
        cursor = today.replace(day=1)
        for _ in range(12):
            month_options.append(cursor)
            cursor = (cursor - timedelta(days=1)).replace(day=1)
        selected_month = st.selectbox(
            "Month",
            month_options,
            format_func=lambda value: value.strftime("%B %Y"),
            key="progress.month",
        )
        series = aggregator.monthly_progress(selected_month.year, selected_month.month)
        title = selected_month.strftime("%B %Y")
        chart_data = stats.completion_chart_data(series, "%d")

    _render_summary(series, settings.streak_threshold)
    st.plotly_chart(completion_bar_chart(chart_data, f"Completion rate • {title}"), use_container_width=True)
