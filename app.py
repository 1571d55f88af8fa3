import logging

import streamlit as st

from sanctuary.auth import current_identity, get_backend, load_settings, render_login, render_setup_required
from sanctuary.context import AppContext
from sanctuary.data import repositories
from sanctuary.data.backend import BackendError
from sanctuary.header import render_global_header
from sanctuary.logging_config import configure_logging
from sanctuary.router import render_router
from sanctuary.session import GATE_LOGIN, GATE_SETUP, resolve_gate
from sanctuary.theme import inject_theme_css, set_theme

st.set_page_config(page_title="Our Private Space", page_icon="💕", layout="wide")

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("sanctuary.app")

inject_theme_css()

identity = current_identity()
gate = resolve_gate(settings, identity)
if gate == GATE_SETUP:
    render_setup_required()

try:
    backend = get_backend(settings)
except BackendError as exc:
    logger.error("Backend unavailable: %s", exc)
    render_setup_required(str(exc))

if gate == GATE_LOGIN:
    render_login(backend)

if not st.session_state.get("ui.theme_synced"):
    profile = repositories.fetch_profile(backend, identity)
    theme_name = repositories.merged_preferences(profile)["interface"].get("theme")
    set_theme(theme_name)
    st.session_state["ui.theme_synced"] = True
    logger.info("Session started for %s", identity.email)
    st.rerun()

context = AppContext(settings=settings, backend=backend, identity=identity)
render_global_header(context)
render_router(context)
