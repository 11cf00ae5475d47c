"""Tests for ``sqlpipe.settings``."""

from __future__ import annotations

from sqlpipe.settings import SqlpipeSettings, get_settings


class TestSqlpipeSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SQLPIPE_DEBUG", raising=False)
        settings = SqlpipeSettings()
        assert settings.debug is False
        assert settings.dialect == "sqlite"
        assert settings.database_url == "sqlite:///:memory:"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SQLPIPE_DEBUG", "1")
        monkeypatch.setenv("SQLPIPE_DIALECT", "postgresql")
        settings = SqlpipeSettings()
        assert settings.debug is True
        assert settings.dialect == "postgresql"

    def test_unknown_env_ignored(self, monkeypatch):
        monkeypatch.setenv("SQLPIPE_NOT_A_FIELD", "x")
        SqlpipeSettings()


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("SQLPIPE_LOG_LEVEL", "DEBUG")
        assert get_settings() is first
        reloaded = get_settings(reload=True)
        assert reloaded is not first
        assert reloaded.log_level == "DEBUG"
