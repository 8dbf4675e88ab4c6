import logging

import streamlit as st

from dashboard.auth import enforce_login, render_sidebar_account, show_storage_error
from dashboard.constants import APP_TITLE
from dashboard.header import render_global_header
from dashboard.router import render_router
from mastery.errors import StorageUnavailableError
from mastery.logging_config import configure_logging

configure_logging()
logger = logging.getLogger("dashboard")

st.set_page_config(page_title=APP_TITLE, layout="wide")

BASE_CSS = """
<style>
.section-title { font-size: 1.6rem; font-weight: 600; margin: 4px 0 12px 0; }
.small-label { font-size: 0.8rem; text-transform: uppercase; letter-spacing: 0.06em; color: #6F6A78; margin: 8px 0 4px 0; }
.sticky-header-wrap { padding-bottom: 8px; border-bottom: 1px solid rgba(111, 106, 120, 0.2); margin-bottom: 12px; }
</style>
"""


def main():
    st.markdown(BASE_CSS, unsafe_allow_html=True)
    try:
        user = enforce_login()
        render_sidebar_account(user)
        ctx = {"user": user}
        render_global_header(ctx)
        render_router(ctx)
    except StorageUnavailableError as exc:
        logger.error("Storage unavailable: %s", exc)
        show_storage_error(exc)


main()
