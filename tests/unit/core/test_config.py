from notegate.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.algorithm == "HS256"
    assert settings.access_token_expire_minutes == 15
    assert settings.public_rate_limit_requests == 60


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PUBLIC_RATE_LIMIT_REQUESTS", "5")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

    settings = Settings(_env_file=None)

    assert settings.public_rate_limit_requests == 5
    assert settings.database_url.startswith("sqlite")
