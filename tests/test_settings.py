from sanctuary.settings import Settings, get_settings


def test_defaults_are_unconfigured():
    settings = Settings()
    assert settings.backend_url == ""
    assert not settings.is_configured
    assert settings.request_timeout == 10
    assert settings.chat_poll_seconds == 3


def test_supabase_aliases(monkeypatch):
    monkeypatch.setenv("VITE_SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    settings = Settings()
    assert settings.backend_url == "https://demo.supabase.co"
    assert settings.backend_key == "anon"
    assert settings.is_configured
    assert settings.uses_http_backend


def test_native_names_and_tuning(monkeypatch):
    monkeypatch.setenv("SANCTUARY_BACKEND_URL", "sqlite:///local.db")
    monkeypatch.setenv("SANCTUARY_BACKEND_KEY", "local")
    monkeypatch.setenv("SANCTUARY_REQUEST_TIMEOUT", "2.5")
    settings = Settings()
    assert settings.is_configured
    assert not settings.uses_http_backend
    assert settings.request_timeout == 2.5


def test_env_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("SANCTUARY_BACKEND_URL=https://demo.supabase.co\nSANCTUARY_BACKEND_KEY=k\n")
    assert Settings().is_configured


def test_get_settings_caches_until_overridden(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("SANCTUARY_BACKEND_URL", "https://changed.example")
    assert get_settings() is first
    override = get_settings(backend_url="sqlite://", backend_key="k")
    assert override is not first
    assert override.backend_url == "sqlite://"
