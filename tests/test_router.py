import pytest

from sanctuary import router
from sanctuary.constants import MESSAGES_TABLE
from sanctuary.data.sync import ChatFeed
from sanctuary.router import DEFAULT_ROUTE, ROUTES, resolve_route
from sanctuary.tabs.home_tab import FEATURE_CARDS, QUICK_ACTIONS

ROUTE_IDS = ["dashboard", "appointments", "chat", "fantasy", "scenes", "positions", "stories", "toys", "ai", "profile"]


def test_route_table_covers_every_screen():
    assert [route.id for route in ROUTES] == ROUTE_IDS
    assert all(callable(route.render) for route in ROUTES)


@pytest.mark.parametrize("route_id", ROUTE_IDS)
def test_every_id_resolves_to_itself(route_id):
    assert resolve_route(route_id).id == route_id


@pytest.mark.parametrize("route_id", ["", None, "settings", "DASHBOARD"])
def test_unknown_ids_fall_back_to_home(route_id):
    assert resolve_route(route_id).id == DEFAULT_ROUTE


def test_home_links_point_at_real_routes():
    targets = [route_id for route_id, *_ in QUICK_ACTIONS + FEATURE_CARDS]
    assert all(resolve_route(route_id).id == route_id for route_id in targets)


def test_leaving_chat_releases_the_feed(monkeypatch, backend, identity):
    feed = ChatFeed(backend, identity)
    feed.start()
    monkeypatch.setattr(router.session_slices, "get_value", lambda slice_name, name, default=None: feed)

    router.release_chat_feed()

    assert feed.subscription is None
    assert backend.feed.listener_count(MESSAGES_TABLE) == 0
