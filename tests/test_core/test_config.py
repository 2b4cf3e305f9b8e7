"""Tests for environment-driven Settings."""

from gitaccounts.core.config import Settings


class TestSettings:
    def test_reads_prefixed_environment(self, settings):
        assert settings.USER_AGENT == "git-accounts-tests/1.0"
        assert settings.HTTP_TIMEOUT_SECONDS == 5.0

    def test_defaults(self, settings):
        assert settings.CONNECT_TIMEOUT_SECONDS == 10.0
        assert settings.MAX_CONNECTIONS == 20
        assert settings.MAX_KEEPALIVE_CONNECTIONS == 10

    def test_override(self, monkeypatch):
        monkeypatch.setenv("GITACCOUNTS_MAX_CONNECTIONS", "5")
        assert Settings().MAX_CONNECTIONS == 5

    def test_explicit_values_win(self):
        assert Settings(USER_AGENT="custom/2").USER_AGENT == "custom/2"

    def test_unprefixed_variable_ignored(self, monkeypatch):
        monkeypatch.setenv("USER_AGENT", "leaked")
        assert Settings().USER_AGENT == "git-accounts-tests/1.0"
