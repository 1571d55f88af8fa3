from typing import Callable, NamedTuple

import streamlit as st

from sanctuary.state import session_slices
from sanctuary.tabs.appointments_tab import render_appointments_tab
from sanctuary.tabs.chat_tab import SLICE as CHAT_SLICE, render_chat_tab
from sanctuary.tabs.companion_tab import render_companion_tab
from sanctuary.tabs.fantasy_tab import render_fantasy_tab
from sanctuary.tabs.home_tab import render_home_tab
from sanctuary.tabs.positions_tab import render_positions_tab
from sanctuary.tabs.profile_tab import render_profile_tab
from sanctuary.tabs.scenes_tab import render_scenes_tab
from sanctuary.tabs.stories_tab import render_stories_tab
from sanctuary.tabs.toys_tab import render_toys_tab


class Route(NamedTuple):
    id: str
    label: str
    icon: str
    render: Callable


ROUTES = [
    Route("dashboard", "Home", "🏠", render_home_tab),
    Route("appointments", "Appointments", "📅", render_appointments_tab),
    Route("chat", "Chat", "💬", render_chat_tab),
    Route("fantasy", "Fantasies", "✨", render_fantasy_tab),
    Route("scenes", "Scene Ideas", "🎭", render_scenes_tab),
    Route("positions", "Positions", "📖", render_positions_tab),
    Route("stories", "Stories", "📚", render_stories_tab),
    Route("toys", "Toys", "🎮", render_toys_tab),
    Route("ai", "AI Companion", "🤖", render_companion_tab),
    Route("profile", "Profile", "👤", render_profile_tab),
]
ROUTES_BY_ID = {route.id: route for route in ROUTES}
DEFAULT_ROUTE = "dashboard"
CHAT_ROUTE = "chat"

ACTIVE_KEY = "ui.active_route"
PENDING_KEY = "ui.pending_route"


def resolve_route(route_id):
    return ROUTES_BY_ID.get(route_id) or ROUTES_BY_ID[DEFAULT_ROUTE]


def navigate(route_id):
    st.session_state[PENDING_KEY] = resolve_route(route_id).id
    st.rerun()


def render_router(ctx):
    # The nav widget owns ACTIVE_KEY once drawn, so jumps go through PENDING_KEY.
    pending = st.session_state.pop(PENDING_KEY, None)
    if pending:
        st.session_state[ACTIVE_KEY] = pending
    if st.session_state.get(ACTIVE_KEY) not in ROUTES_BY_ID:
        st.session_state[ACTIVE_KEY] = DEFAULT_ROUTE

    with st.sidebar:
        st.markdown("<div class='section-title'>Navigate</div>", unsafe_allow_html=True)
        active = st.radio(
            "Navigate",
            [route.id for route in ROUTES],
            format_func=lambda route_id: f"{ROUTES_BY_ID[route_id].icon} {ROUTES_BY_ID[route_id].label}",
            key=ACTIVE_KEY,
            label_visibility="collapsed",
        )

    route = resolve_route(active)
    if route.id != CHAT_ROUTE:
        release_chat_feed()

    ctx.navigate = navigate
    return _render_route(route, ctx)


def release_chat_feed():
    feed = session_slices.get_value(CHAT_SLICE, "feed")
    if feed is not None:
        feed.stop()


@st.fragment
def _render_route(route, ctx):
    route.render(ctx)
