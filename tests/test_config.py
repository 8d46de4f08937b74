"""
Tests for configuration loading
"""

import pytest

from config import AppConfig, BuilderConfig


class TestConfig:
    """Config from environment variables"""

    def test_defaults(self, monkeypatch):
        for name in ("SWAGGER_STRICT_NAMES", "SWAGGER_OUTPUT_DIR", "SWAGGER_LOG_LEVEL", "SWAGGER_JSON_INDENT"):
            monkeypatch.delenv(name, raising=False)

        config = AppConfig.from_env()

        assert config.output_dir == "./output"
        assert config.log_level == "WARNING"
        assert config.json_indent == 2
        assert config.builder.strict_names is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SWAGGER_STRICT_NAMES", "true")
        monkeypatch.setenv("SWAGGER_OUTPUT_DIR", "/tmp/models")
        monkeypatch.setenv("SWAGGER_JSON_INDENT", "4")

        config = AppConfig.from_env()

        assert config.output_dir == "/tmp/models"
        assert config.json_indent == 4
        assert config.builder.strict_names is True

    @pytest.mark.parametrize("value,expected", [("1", True), ("yes", True), ("0", False), ("off", False)])
    def test_strict_flag_values(self, monkeypatch, value, expected):
        monkeypatch.setenv("SWAGGER_STRICT_NAMES", value)

        assert BuilderConfig.from_env().strict_names is expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
