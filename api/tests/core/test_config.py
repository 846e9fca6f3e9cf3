"""Unit tests for core.config module.

Tests cover:
- Settings defaults and URSHORT_* environment overrides
- Port fallback for unusable values
- Redirect status validation
- read_environment merging of .env and process variables
- get_settings / clear_settings_cache lru_cache behavior
"""

import pytest
from pydantic import ValidationError

from core.config import (
    DEFAULT_PORT,
    Settings,
    clear_settings_cache,
    get_settings,
    read_environment,
)


@pytest.fixture(autouse=True)
def _isolated(urshort_env):
    """Empty URSHORT_* environment and no .env file for every test."""
    yield


# ---------------------------------------------------------------------------
# Settings values
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestSettingsDefaults:
    def test_defaults(self):
        settings = Settings()
        assert settings.host == "127.0.0.1"
        assert settings.port == DEFAULT_PORT
        assert settings.redirect_status_code == 307
        assert settings.pattern_full_match is False
        assert settings.pattern_strict_templates is False
        assert settings.log_format == "console"
        assert settings.docs_enabled is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("URSHORT_PORT", "8080")
        monkeypatch.setenv("URSHORT_HOST", "0.0.0.0")
        monkeypatch.setenv("URSHORT_REDIRECT_STATUS_CODE", "308")
        monkeypatch.setenv("URSHORT_PATTERN_FULL_MATCH", "true")
        monkeypatch.setenv("URSHORT_LOG_LEVEL", "debug")
        settings = Settings()
        assert settings.port == 8080
        assert settings.host == "0.0.0.0"
        assert settings.redirect_status_code == 308
        assert settings.pattern_full_match is True
        assert settings.log_level == "DEBUG"

    def test_mapping_variables_are_ignored(self, monkeypatch):
        monkeypatch.setenv("URSHORT_STANDARD_URI_gh", "https://github.com")
        monkeypatch.setenv("URSHORT_PATTERN_REGEX_0", "^x$")
        Settings()

    def test_debug_enables_docs(self):
        assert Settings(debug=True).docs_enabled is True
        assert Settings(enable_docs=True).docs_enabled is True

    def test_settings_are_frozen(self):
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.port = 1  # type: ignore[misc]


@pytest.mark.unit
class TestPortFallback:
    @pytest.mark.parametrize("value", ["notANumber", "-3000", "0", "70000", ""])
    def test_unusable_port_falls_back_to_default(self, monkeypatch, value):
        monkeypatch.setenv("URSHORT_PORT", value)
        assert Settings().port == DEFAULT_PORT

    def test_padded_port_is_accepted(self, monkeypatch):
        monkeypatch.setenv("URSHORT_PORT", " 54027 ")
        assert Settings().port == 54027

    @pytest.mark.parametrize("value", ["1", "65535"])
    def test_range_bounds_are_accepted(self, monkeypatch, value):
        monkeypatch.setenv("URSHORT_PORT", value)
        assert Settings().port == int(value)

    def test_port_from_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("URSHORT_PORT=8081\n")
        assert Settings().port == 8081


@pytest.mark.unit
class TestRedirectStatus:
    @pytest.mark.parametrize("code", [301, 302, 303, 307, 308])
    def test_redirect_codes_accepted(self, code):
        assert Settings(redirect_status_code=code).redirect_status_code == code

    @pytest.mark.parametrize("code", [200, 304, 404])
    def test_non_redirect_codes_rejected(self, code):
        with pytest.raises(ValidationError):
            Settings(redirect_status_code=code)

    def test_unknown_log_format_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_format="xml")


# ---------------------------------------------------------------------------
# read_environment
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestReadEnvironment:
    def test_without_env_file(self):
        merged = read_environment(Settings(), {"URSHORT_STANDARD_URI_a": "/a"})
        assert merged == {"URSHORT_STANDARD_URI_a": "/a"}

    def test_env_file_values_are_included(self, tmp_path):
        (tmp_path / ".env").write_text(
            "URSHORT_STANDARD_URI_docs=https://docs.example.com\n"
        )
        merged = read_environment(Settings(), {})
        assert merged["URSHORT_STANDARD_URI_docs"] == "https://docs.example.com"

    def test_process_environment_wins(self, tmp_path):
        (tmp_path / ".env").write_text("URSHORT_STANDARD_URI_docs=/from-file\n")
        merged = read_environment(
            Settings(), {"URSHORT_STANDARD_URI_docs": "/from-process"}
        )
        assert merged["URSHORT_STANDARD_URI_docs"] == "/from-process"

    def test_braced_placeholders_are_not_interpolated(self, tmp_path):
        (tmp_path / ".env").write_text(
            "URSHORT_PATTERN_REGEX_0=^(?P<id>\\d+)$\n"
            "URSHORT_PATTERN_URI_0=https://example.com/${id}/x?n=${1}\n"
        )
        merged = read_environment(Settings(), {})
        assert merged["URSHORT_PATTERN_REGEX_0"] == r"^(?P<id>\d+)$"
        assert merged["URSHORT_PATTERN_URI_0"] == "https://example.com/${id}/x?n=${1}"

    def test_custom_env_file(self, tmp_path):
        (tmp_path / "links.env").write_text("URSHORT_STANDARD_URI_x=/x\n")
        merged = read_environment(Settings(env_file="links.env"), {})
        assert merged == {"URSHORT_STANDARD_URI_x": "/x"}

    def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("URSHORT_STANDARD_URI_live", "/live")
        assert read_environment(Settings())["URSHORT_STANDARD_URI_live"] == "/live"


# ---------------------------------------------------------------------------
# get_settings / clear_settings_cache
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestGetSettings:
    def test_returns_same_instance(self):
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2

    def test_clear_cache_resets(self, monkeypatch):
        s1 = get_settings()
        monkeypatch.setenv("URSHORT_PORT", "9090")
        clear_settings_cache()
        s2 = get_settings()
        assert s1 is not s2
        assert s2.port == 9090
