"""Tests for environment driven config selection."""
import pytest

from shelfwise.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config_class,
)


def test_testing_config_uses_memory_db(monkeypatch, app):
    monkeypatch.setenv('APP_ENV', 'testing')
    assert get_config_class() is TestingConfig
    assert app.config['TESTING'] is True
    assert app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite://')
    assert app.config['RATELIMIT_ENABLED'] is False


def test_development_defaults(monkeypatch):
    monkeypatch.delenv('APP_ENV', raising=False)
    assert get_config_class() is DevelopmentConfig
    assert DevelopmentConfig.DEBUG is True
    assert DevelopmentConfig.EXPOSE_ERROR_DETAILS is True


def test_production_requires_secrets(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'production')
    monkeypatch.delenv('SECRET_KEY', raising=False)
    monkeypatch.setenv('DATABASE_URL', 'postgresql://db/shelfwise')
    with pytest.raises(RuntimeError, match='SECRET_KEY'):
        get_config_class()

    monkeypatch.setenv('SECRET_KEY', 's3cret')
    assert get_config_class() is ProductionConfig
    assert ProductionConfig.EXPOSE_ERROR_DETAILS is False


def test_lifecycle_defaults():
    assert TestingConfig.DASHBOARD_CACHE_TTL_SECONDS == 30
    assert TestingConfig.MAX_PAGE_SIZE == 100
