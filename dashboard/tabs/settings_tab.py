import logging
import time

import streamlit as st

from dashboard.constants import CATEGORY_OPTIONS
from dashboard.data import repositories
from mastery import transfer
from mastery.catalog import category_label
from mastery.errors import MalformedImportError, StaleWriteError

logger = logging.getLogger(__name__)


def _add_task():
    name = (st.session_state.get("settings.task_name") or "").strip()
    if not name:
        st.session_state["settings.message"] = ("warning", "Task name is required.")
        return
    try:
        task = repositories.store().add_task(
            name,
            st.session_state.get("settings.task_category", CATEGORY_OPTIONS[0]),
            value_kind="duration" if st.session_state.get("settings.task_is_duration") else "boolean",
        )
    except StaleWriteError as exc:
        st.session_state["settings.message"] = ("warning", f"Task list changed elsewhere, try again. ({exc})")
        return
    st.session_state["settings.task_name"] = ""
    st.session_state["settings.message"] = ("success", f"Added {task.name}.")


def _render_account(user):
    st.markdown("<div class='small-label'>Account</div>", unsafe_allow_html=True)
    st.text_input("Name", value=user.name, disabled=True, key="settings.account_name")
    st.text_input("Role", value=user.role.title(), disabled=True, key="settings.account_role")


def _render_tasks():
    st.markdown("<div class='small-label'>Tasks</div>", unsafe_allow_html=True)
    for task in repositories.store().list_tasks():
        suffix = " • duration" if task.tracks_value else ""
        st.caption(f"{task.name} ({category_label(task.category)}{suffix})")
    with st.form("settings.add_task_form", clear_on_submit=False):
        st.text_input("New task", key="settings.task_name")
        st.selectbox("Category", CATEGORY_OPTIONS, format_func=category_label, key="settings.task_category")
        st.checkbox("Tracked as a duration (HH:MM)", key="settings.task_is_duration")
        st.form_submit_button("Add task", on_click=_add_task)


def _render_data_management(user):
    store = repositories.store()
    st.markdown("<div class='small-label'>Data management</div>", unsafe_allow_html=True)
    st.download_button(
        "Export tasks (CSV)",
        data=repositories.reports().tasks_csv(),
        file_name=f"self-mastery-tasks-{int(time.time() * 1000)}.csv",
        mime="text/csv",
        key="settings.export_tasks",
    )
    st.download_button(
        "Export backup (JSON)",
        data=transfer.export_snapshot(store),
        file_name="self-mastery-backup.json",
        mime="application/json",
        key="settings.export_backup",
    )

    uploaded = st.file_uploader("Import backup", type=["json"], key="settings.import_file")
    if uploaded is not None and st.button("Import", key="settings.import_button"):
        try:
            snapshot = transfer.import_snapshot(store, uploaded.getvalue())
        except MalformedImportError as exc:
            logger.warning("Import rejected for %s: %s", user.id, exc)
            st.error(f"Import failed. The file format is not valid: {exc}")
        except StaleWriteError as exc:
            st.warning(f"Data changed elsewhere while importing, nothing was imported. ({exc})")
        else:
            st.success(f"Imported {len(snapshot.tasks)} tasks and {len(snapshot.entries)} entries.")

    confirm = st.checkbox("I understand clearing data cannot be undone", key="settings.clear_confirm")
    if st.button("Clear tracking data", key="settings.clear_button", disabled=not confirm):
        transfer.clear_entries(store)
        st.session_state.pop("daily.loaded_key", None)
        st.success("All tracking data has been removed.")


def render_settings_tab(ctx):
    user = ctx["user"]
    st.markdown("<div class='section-title'>Settings</div>", unsafe_allow_html=True)

    message = st.session_state.pop("settings.message", None)
    if message:
        level, text = message
        getattr(st, level)(text)

    cols = st.columns(3)
    with cols[0]:
        _render_account(user)
    with cols[1]:
        _render_tasks()
    with cols[2]:
        _render_data_management(user)
