import streamlit as st

from dashboard.constants import TAB_OPTIONS
from dashboard.tabs.daily_tab import render_daily_tab
from dashboard.tabs.progress_tab import render_progress_tab
from dashboard.tabs.report_tab import render_report_tab
from dashboard.tabs.settings_tab import render_settings_tab
from dashboard.tabs.weekly_tab import render_weekly_tab


def render_router(ctx):
    active = st.session_state.get("ui.active_tab", TAB_OPTIONS[0])
    active = st.segmented_control(
        "Workspace",
        TAB_OPTIONS,
        key="ui.active_tab",
        default=active,
    )

    if active == "Weekly View":
        return _render_weekly(ctx)

    if active == "Progress":
        return _render_progress(ctx)

    if active == "Reports":
        return _render_reports(ctx)

    if active == "Settings":
        return _render_settings(ctx)

    return _render_daily(ctx)


@st.fragment
def _render_daily(ctx):
    render_daily_tab(ctx)


@st.fragment
def _render_weekly(ctx):
    render_weekly_tab(ctx)


@st.fragment
def _render_progress(ctx):
    render_progress_tab(ctx)


@st.fragment
def _render_reports(ctx):
    render_report_tab(ctx)


@st.fragment
def _render_settings(ctx):
    render_settings_tab(ctx)
