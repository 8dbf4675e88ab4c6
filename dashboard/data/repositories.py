import logging

import streamlit as st

from mastery.db import build_engine
from mastery.kvstore import SqlKeyValueStore
from mastery.services import build_services
from mastery.settings import get_settings

logger = logging.getLogger(__name__)


@st.cache_resource
def get_services(database_url=None):
    database_url = database_url or get_settings().database_url
    logger.info("Dashboard store ready")
    return build_services(SqlKeyValueStore(build_engine(database_url)))


def store():
    return get_services().store


def progress():
    return get_services().progress


def reports():
    return get_services().reports


def sessions():
    return get_services().sessions
