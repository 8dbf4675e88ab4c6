from datetime import date, timedelta

import pandas as pd
import streamlit as st

from dashboard.data import repositories
from mastery.dates import week_start_for
from mastery.settings import get_settings


def _shift_week(days):
    current = st.session_state["weekly.week_start"]
    target = current + timedelta(days=days)
    if target <= date.today():
        st.session_state["weekly.week_start"] = target


def _status_label(status, task):
    if task.tracks_value and status.value:
        return status.value
    return "✓" if status.done else "·"


def render_weekly_tab(ctx):
    st.markdown("<div class='section-title'>Weekly View</div>", unsafe_allow_html=True)

    if "weekly.week_start" not in st.session_state:
        st.session_state["weekly.week_start"] = week_start_for(date.today(), get_settings().week_starts_on)
    week_start = st.session_state["weekly.week_start"]

    nav = st.columns([0.2, 0.6, 0.2])
    nav[0].button("Previous week", key="weekly.prev", on_click=_shift_week, args=(-7,))
    nav[1].markdown(
        f"<div class='small-label' style='text-align:center;'>"
        f"{week_start.strftime('%d %b')} - {(week_start + timedelta(days=6)).strftime('%d %b %Y')}</div>",
        unsafe_allow_html=True,
    )
    nav[2].button("Next week", key="weekly.next", on_click=_shift_week, args=(7,))

    grid = repositories.progress().week_grid(week_start)
    day_columns = [day.strftime("%a %d") for day in grid.days]
    table = pd.DataFrame(
        [[_status_label(status, row.task) for status in row.days] for row in grid.rows],
        index=[row.task.name for row in grid.rows],
        columns=day_columns,
    )
    table.loc["Completion"] = [f"{value:.0f}%" for value in grid.day_percents]
    st.dataframe(table, use_container_width=True)

    weekly = repositories.progress().weekly_progress(week_start)
    summary = pd.DataFrame(
        {
            "Day": day_columns,
            "Completed": [day.completed_tasks for day in weekly],
            "Total": [day.total_tasks for day in weekly],
            "Rate (%)": [round(day.percent, 1) for day in weekly],
            "Screen time": [day.screen_time or "" for day in weekly],
        }
    )
    st.markdown("<div class='small-label'>Weekly summary</div>", unsafe_allow_html=True)
    st.dataframe(summary, hide_index=True, use_container_width=True)
