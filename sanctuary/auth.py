from __future__ import annotations

import logging

import streamlit as st
from pydantic import ValidationError

from sanctuary import session
from sanctuary.constants import ROLES
from sanctuary.data.backend import BackendError, build_backend
from sanctuary.settings import get_settings
from sanctuary.state import session_slices

logger = logging.getLogger(__name__)

IDENTITY_KEY = "auth.identity"
BACKEND_KEY = "auth.backend"
MODE_KEY = "auth.mode"

SECRET_PATHS = {
    "backend_url": ("backend", "url"),
    "backend_key": ("backend", "key"),
}


def get_secret(path, default=None):
    current = st.secrets
    for key in path:
        try:
            if key not in current:
                return default
            current = current[key]
        except Exception:
            # No secrets.toml at all raises on first access.
            return default
    return current


def load_settings():
    overrides = {}
    for field_name, path in SECRET_PATHS.items():
        value = get_secret(path)
        if value:
            overrides[field_name] = str(value).strip()
    return get_settings(**overrides)


@st.cache_resource
def _shared_sql_backend(url, key):
    return build_backend(get_settings(backend_url=url, backend_key=key))


def get_backend(settings):
    if not settings.uses_http_backend:
        # One engine and one change feed for every session in the process.
        return _shared_sql_backend(settings.backend_url, settings.backend_key)
    backend = st.session_state.get(BACKEND_KEY)
    if backend is None or backend.base_url != settings.backend_url.rstrip("/"):
        backend = build_backend(settings)
        st.session_state[BACKEND_KEY] = backend
    return backend


def current_identity():
    return st.session_state.get(IDENTITY_KEY)


def sign_out(backend):
    identity = current_identity()
    try:
        backend.sign_out(identity)
    except BackendError:
        logger.exception("Error signing out")
    st.session_state.pop(IDENTITY_KEY, None)
    st.session_state.pop("ui.theme_synced", None)
    feed = session_slices.get_value("chat", "feed")
    if feed is not None:
        feed.stop()
    session_slices.clear_all()


def render_setup_required(error=None):
    st.markdown("<div class='section-title'>Backend Setup Required</div>", unsafe_allow_html=True)
    if error:
        st.error(error)
    st.markdown(
        "Our Private Space needs a backend before it can start. Set the URL and key "
        "in `.env`, the environment, or `.streamlit/secrets.toml`, then reload the page."
    )
    st.code(
        "SANCTUARY_BACKEND_URL=https://YOUR-PROJECT.supabase.co\n"
        "SANCTUARY_BACKEND_KEY=YOUR_ANON_KEY",
        language="bash",
    )
    st.markdown("For a local database use any SQLAlchemy URL instead:")
    st.code(
        "[backend]\n"
        "url = \"sqlite:///sanctuary.db\"\n"
        "key = \"local\"",
        language="toml",
    )
    st.stop()


def _attempt(action):
    try:
        identity = action()
    except ValidationError as exc:
        st.error(exc.errors()[0].get("msg", "Invalid input"))
        return None
    except BackendError as exc:
        logger.warning("Authentication failed: %s", exc)
        st.error(session.friendly_auth_error(exc))
        return None
    return identity


def render_login(backend):
    mode = st.session_state.get(MODE_KEY, "signin")
    is_signup = mode == "signup"

    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.markdown("<div class='page-title' style='font-size:34px;text-align:center'>💕 Our Private Space</div>", unsafe_allow_html=True)
        st.markdown(
            "<div class='small-label' style='text-align:center'>"
            + ("Create your account" if is_signup else "Welcome back, love")
            + "</div>",
            unsafe_allow_html=True,
        )
        with st.form("auth.form", clear_on_submit=False):
            email = st.text_input("Email", key="auth.email")
            password = st.text_input("Password", type="password", key="auth.password")
            confirm = ""
            role = ROLES[0]
            if is_signup:
                confirm = st.text_input("Confirm Password", type="password", key="auth.confirm")
                role = st.selectbox(
                    "I am",
                    ROLES,
                    format_func=lambda value: value.replace("partner", "Partner "),
                    key="auth.role",
                )
            submitted = st.form_submit_button(
                "Create Account" if is_signup else "Sign In",
                type="primary",
                use_container_width=True,
            )

        if submitted:
            if not email or not password:
                st.error("Email and password are required")
            elif is_signup:
                identity = _attempt(lambda: session.sign_up(backend, email, password, confirm, role))
                if identity is not None:
                    _finish_login(identity)
            else:
                identity = _attempt(lambda: session.sign_in(backend, email, password))
                if identity is not None:
                    _finish_login(identity)

        toggle_label = "Already have an account? Sign in" if is_signup else "Need an account? Sign up"
        if st.button(toggle_label, key="auth.toggle", use_container_width=True):
            st.session_state[MODE_KEY] = "signin" if is_signup else "signup"
            st.rerun()
    st.stop()


def _finish_login(identity):
    logger.info("Signed in as %s (%s)", identity.email, identity.role)
    st.session_state[IDENTITY_KEY] = identity
    st.rerun()
