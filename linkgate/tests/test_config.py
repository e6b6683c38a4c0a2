from linkgate.core.config import Settings


def test_url_normalisation():
    settings = Settings(_env_file=None, public_base_url="https://dl.example.com///", download_prefix="/files/")
    assert settings.download_url("abc") == "https://dl.example.com/files/abc"


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("LINKGATE_DEFAULT_EXPIRY_SECONDS", "120")
    monkeypatch.setenv("LINKGATE_DEFAULT_BUCKET", "  ")
    monkeypatch.setenv("LINKGATE_CORS_ORIGINS_RAW", "https://a.example, https://b.example")
    settings = Settings(_env_file=None)
    assert settings.default_expiry_seconds == 120
    assert settings.default_bucket is None
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
