from datetime import date

import streamlit as st

from dashboard.constants import CATEGORY_COLORS
from dashboard.data import repositories
from dashboard.visualizations import category_bar_chart
from mastery.catalog import category_label
from mastery.errors import StaleWriteError


def _flag_stale(exc):
    st.session_state["daily.stale_error"] = str(exc)


def _save_completed(task_id, selected_day, widget_key):
    try:
        repositories.store().set_completed(task_id, selected_day, bool(st.session_state.get(widget_key, False)))
    except StaleWriteError as exc:
        _flag_stale(exc)


def _save_value(task_id, selected_day, widget_key):
    try:
        repositories.store().record_value(task_id, selected_day, st.session_state.get(widget_key, ""))
    except StaleWriteError as exc:
        _flag_stale(exc)


def render_daily_tab(ctx):
    st.markdown("<div class='section-title'>Daily Tasks</div>", unsafe_allow_html=True)

    if "daily.selected_date" not in st.session_state:
        st.session_state["daily.selected_date"] = date.today()
    selected_day = st.date_input("Date", key="daily.selected_date", max_value=date.today())

    stale_error = st.session_state.pop("daily.stale_error", None)
    if stale_error:
        st.warning(f"Your change was not saved because the data changed elsewhere. Reload and try again. ({stale_error})")

    store = repositories.store()
    catalog = store.catalog()
    entries = {entry.task_id: entry for entry in store.list_entries_for_date(selected_day)}
    day_progress = repositories.progress().daily_progress(selected_day)

    st.progress(min(day_progress.rate, 1.0), text=f"{day_progress.completed_tasks}/{day_progress.total_tasks} completed")

    loaded_key = selected_day.isoformat()
    reload_widgets = st.session_state.get("daily.loaded_key") != loaded_key

    cols = st.columns([1.2, 0.8])
    with cols[0]:
        for category in catalog.categories():
            color = CATEGORY_COLORS.get(category, "#B8B8B8")
            st.markdown(
                f"<div class='small-label' style='color:{color};'>{category_label(category)}</div>",
                unsafe_allow_html=True,
            )
            for task in catalog.tasks_in(category):
                entry = entries.get(task.id)
                if task.tracks_value:
                    widget_key = f"daily.value.{task.id}"
                    if reload_widgets:
                        st.session_state[widget_key] = (entry.value or "") if entry else ""
                    st.text_input(
                        task.name,
                        key=widget_key,
                        placeholder="HH:MM",
                        on_change=_save_value,
                        args=(task.id, selected_day, widget_key),
                    )
                    continue
                widget_key = f"daily.done.{task.id}"
                if reload_widgets:
                    st.session_state[widget_key] = bool(entry.completed) if entry else False
                st.checkbox(
                    task.name,
                    key=widget_key,
                    on_change=_save_completed,
                    args=(task.id, selected_day, widget_key),
                )
    st.session_state["daily.loaded_key"] = loaded_key

    with cols[1]:
        breakdown = [
            {"name": item.label, "value": item.completion_percent}
            for item in repositories.progress().category_completion(selected_day)
        ]
        st.plotly_chart(category_bar_chart(breakdown, "Completion by category"), use_container_width=True)
