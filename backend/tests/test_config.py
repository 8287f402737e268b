"""Settings — verifies environment-driven configuration."""

from users_api.config import Settings


def test_postgres_url_rewritten_for_asyncpg():
    settings = Settings(database_url="postgresql://u:p@db:5432/users")
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/users"


def test_other_urls_untouched():
    settings = Settings(database_url="sqlite+aiosqlite:///:memory:")
    assert settings.database_url == "sqlite+aiosqlite:///:memory:"


def test_pool_defaults_are_bounded():
    settings = Settings()
    assert settings.database_pool_size == 10
    assert settings.database_max_overflow == 0


def test_is_development_follows_app_env():
    assert Settings(app_env="development").is_development
    assert Settings(app_env="Development").is_development
    assert not Settings(app_env="production").is_development
