import pytest

from sanctuary.data import sql_backend as sql_backend_module
from sanctuary.data.sql_backend import SqlBackend, create_sql_engine
from sanctuary.settings import reset_settings

SETTINGS_ENV = [
    "SANCTUARY_BACKEND_URL",
    "SUPABASE_URL",
    "VITE_SUPABASE_URL",
    "SANCTUARY_BACKEND_KEY",
    "SUPABASE_ANON_KEY",
    "VITE_SUPABASE_ANON_KEY",
    "SANCTUARY_LOG_LEVEL",
    "SANCTUARY_REQUEST_TIMEOUT",
    "SANCTUARY_CHAT_POLL_SECONDS",
]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the tests.
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr(sql_backend_module, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def backend():
    sql_backend = SqlBackend(create_sql_engine("sqlite://"))
    yield sql_backend
    sql_backend.close()


@pytest.fixture
def identity(backend):
    return backend.sign_up("alex@example.com", "secret123", role="partner1")


@pytest.fixture
def partner(backend):
    return backend.sign_up("sam@example.com", "secret456", role="partner2")


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.reason = "Error" if status_code >= 400 else "OK"
        self.content = b"" if payload is None and not text else b"x"

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class RecordingSession:
    """Stand-in for requests.Session that records calls and replays queued responses."""

    def __init__(self, responses=None):
        self.calls = []
        self.responses = list(responses or [])
        self.closed = False

    def queue(self, response):
        self.responses.append(response)

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "params": params, "json": json, "headers": headers, "timeout": timeout}
        )
        if not self.responses:
            return FakeResponse(204)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


@pytest.fixture
def http_session():
    return RecordingSession()


@pytest.fixture
def rest_backend(http_session):
    from sanctuary.data.rest_backend import RestBackend

    return RestBackend("https://demo.supabase.co/", "anon-key", timeout=7, session=http_session)


@pytest.fixture
def make_response():
    return FakeResponse
