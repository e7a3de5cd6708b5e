"""Tests for required startup settings."""
import pytest

from shazam_forever.config import ConfigError, load_settings

REQUIRED = {"PACKAGE_NAME": "com.example.shazam", "MENTRAOS_API_KEY": "secret", "PORT": "3000"}


@pytest.fixture
def env(monkeypatch):
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


class TestLoadSettings:
    def test_all_present(self, env):
        settings = load_settings()
        assert settings.package_name == "com.example.shazam"
        assert settings.api_key == "secret"
        assert settings.port == 3000

    @pytest.mark.parametrize("missing", sorted(REQUIRED))
    def test_missing_value_is_fatal(self, env, missing):
        env.delenv(missing)
        with pytest.raises(ConfigError, match=missing):
            load_settings()

    def test_blank_value_is_fatal(self, env):
        env.setenv("MENTRAOS_API_KEY", "   ")
        with pytest.raises(ConfigError):
            load_settings()

    def test_port_must_be_integer(self, env):
        env.setenv("PORT", "eighty")
        with pytest.raises(ConfigError, match="PORT"):
            load_settings()
