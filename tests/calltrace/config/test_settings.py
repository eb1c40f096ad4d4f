"""
Tests for trace settings loading.

Tests key functionality including:
- Defaults and validation
- YAML files with and without a calltrace section
- Environment overrides and type conversion
- Keyword overrides and precedence
"""

import pytest

from calltrace.config import (
    LoggingSettings,
    TraceSettings,
    collect_env_overrides,
    convert_env_value,
    load_settings,
)
from calltrace.config.loader import env_key_to_path
from calltrace.exceptions import ConfigError

# =============================================================================
# Test Schemas
# =============================================================================


@pytest.mark.unit
class TestTraceSettings:
    """Test settings schema defaults and validation."""

    def test_defaults(self):
        settings = TraceSettings()
        assert settings.marker == ">"
        assert settings.indent == "  "
        assert settings.serializer == "json"
        assert settings.max_length == 0
        assert settings.output == "stdout"
        assert settings.logging.level == "warning"

    def test_indent_width(self):
        assert TraceSettings(indent=3).indent == "   "

    def test_indent_string(self):
        assert TraceSettings(indent="\t").indent == "\t"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("serializer", "xml"),
            ("output", "file"),
            ("max_length", -1),
            ("indent", -2),
            ("unknown", 1),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            TraceSettings(**{field: value})

    def test_logging_level_validated(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingSettings(level="loud")

    def test_logging_numeric_level(self):
        assert LoggingSettings(level="10").level == "10"


# =============================================================================
# Test Environment Overrides
# =============================================================================


@pytest.mark.unit
class TestEnvOverrides:
    """Test CALLTRACE_* environment variables."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("true", True),
            ("False", False),
            ("null", None),
            ("42", 42),
            ("1.5", 1.5),
            ("repr", "repr"),
        ],
    )
    def test_convert_env_value(self, raw, expected):
        assert convert_env_value(raw) == expected

    def test_key_to_path(self):
        assert env_key_to_path("CALLTRACE_SERIALIZER") == ["serializer"]
        assert env_key_to_path("CALLTRACE_MAX_LENGTH") == ["max_length"]
        assert env_key_to_path("CALLTRACE_LOGGING_LEVEL") == ["logging", "level"]

    def test_collect(self):
        environ = {
            "CALLTRACE_SERIALIZER": "repr",
            "CALLTRACE_LOGGING_LEVEL": "debug",
            "CALLTRACE_LOGGING_COLORS": "true",
            "OTHER_VAR": "x",
        }
        assert collect_env_overrides(environ) == {
            "serializer": "repr",
            "logging": {"level": "debug", "colors": True},
        }


# =============================================================================
# Test load_settings
# =============================================================================


@pytest.mark.unit
class TestLoadSettings:
    """Test loading from files, environment and keywords."""

    def test_no_sources(self):
        assert load_settings(environ={}) == TraceSettings()

    def test_yaml_section(self, tmp_path):
        path = tmp_path / "trace.yaml"
        path.write_text(
            "calltrace:\n  serializer: repr\n  indent: 4\n  logging:\n    level: debug\n"
        )
        settings = load_settings(path, environ={})
        assert settings.serializer == "repr"
        assert settings.indent == "    "
        assert settings.logging.level == "debug"

    def test_yaml_without_section(self, tmp_path):
        path = tmp_path / "trace.yaml"
        path.write_text("max_length: 20\n")
        assert load_settings(path, environ={}).max_length == 20

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "trace.yaml"
        path.write_text("")
        assert load_settings(path, environ={}) == TraceSettings()

    def test_env_overrides_file(self, tmp_path):
        path = tmp_path / "trace.yaml"
        path.write_text("serializer: repr\nmax_length: 20\n")
        settings = load_settings(
            path, environ={"CALLTRACE_MAX_LENGTH": "5", "CALLTRACE_OUTPUT": "stderr"}
        )
        assert settings.serializer == "repr"
        assert settings.max_length == 5
        assert settings.output == "stderr"

    def test_env_disabled(self):
        settings = load_settings(
            enable_env_overrides=False, environ={"CALLTRACE_SERIALIZER": "repr"}
        )
        assert settings.serializer == "json"

    def test_custom_prefix(self):
        settings = load_settings(env_prefix="CT_", environ={"CT_MARKER": "*"})
        assert settings.marker == "*"

    def test_keyword_overrides_win(self):
        settings = load_settings(
            environ={"CALLTRACE_SERIALIZER": "repr"},
            serializer="json",
            max_length=None,
            logging={"level": "info"},
        )
        assert settings.serializer == "json"
        assert settings.max_length == 0
        assert settings.logging.level == "info"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "absent.yaml", environ={})

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "trace.yaml"
        path.write_text("calltrace: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path, environ={})

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "trace.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path, environ={})

    def test_invalid_values_wrapped(self):
        with pytest.raises(ConfigError, match="Invalid trace settings"):
            load_settings(environ={"CALLTRACE_SERIALIZER": "xml"})

    def test_oversized_file(self, tmp_path, monkeypatch):
        import calltrace.config.loader as loader

        monkeypatch.setattr(loader, "MAX_CONFIG_SIZE_BYTES", 4)
        path = tmp_path / "trace.yaml"
        path.write_text("marker: '>>'\n")
        with pytest.raises(ConfigError, match="too large"):
            load_settings(path, environ={})
