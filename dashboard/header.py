import html
from datetime import date

import streamlit as st

from dashboard.data import repositories


def render_global_header(ctx):
    user = ctx["user"]
    today = date.today()
    today_progress = repositories.progress().daily_progress(today)

    st.markdown("<div class='sticky-header-wrap'>", unsafe_allow_html=True)
    st.markdown(
        f"<div class='small-label'>Welcome back, {html.escape(user.name)} • {today.strftime('%A, %d %b %Y')}</div>",
        unsafe_allow_html=True,
    )
    cols = st.columns(3)
    cols[0].metric("Completed today", f"{today_progress.completed_tasks}/{today_progress.total_tasks}")
    cols[1].metric("Today's rate", f"{today_progress.percent:.0f}%")
    cols[2].metric("Screen time", today_progress.screen_time or "-")
    st.markdown("</div>", unsafe_allow_html=True)
