"""Tests for REFTESTGEN_<SECTION>_<KEY> environment overrides."""
from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("REFTESTGEN_"):
            monkeypatch.delenv(name)


class TestTryParseEnvValue:
    """_try_parse_env_value parses typed values."""

    def test_json_list_parsed(self):
        """JSON array string is parsed into a Python list."""
        from reftestgen.config import _try_parse_env_value

        assert _try_parse_env_value('["parsing", "refret"]') == ["parsing", "refret"]

    def test_json_object_parsed(self):
        """JSON object string is parsed into a Python dict."""
        from reftestgen.config import _try_parse_env_value

        assert _try_parse_env_value('{"key": "value"}') == {"key": "value"}

    def test_booleans_parsed(self):
        """'true'/'false' (case-insensitive) become Python booleans."""
        from reftestgen.config import _try_parse_env_value

        assert _try_parse_env_value("true") is True
        assert _try_parse_env_value("TRUE") is True
        assert _try_parse_env_value("False") is False

    def test_plain_string_passthrough(self):
        from reftestgen.config import _try_parse_env_value

        assert _try_parse_env_value("refret") == "refret"

    def test_malformed_json_returns_string(self):
        """Malformed JSON starting with [ or { falls back to the string."""
        from reftestgen.config import _try_parse_env_value

        assert _try_parse_env_value("[not valid json") == "[not valid json"


class TestApplyEnvOverrides:
    """_apply_env_overrides maps variables onto config sections."""

    def test_sets_boolean_key_with_underscore(self, monkeypatch):
        """REFTESTGEN_GENERATE_FAIL_FAST=true sets generate.fail_fast."""
        from reftestgen.config import _apply_env_overrides

        monkeypatch.setenv("REFTESTGEN_GENERATE_FAIL_FAST", "true")

        result = _apply_env_overrides({"generate": {}})

        assert result["generate"]["fail_fast"] is True

    def test_sets_list(self, monkeypatch):
        from reftestgen.config import _apply_env_overrides

        monkeypatch.setenv("REFTESTGEN_ANALYSIS_VARIANTS", '["default"]')

        result = _apply_env_overrides({"analysis": {"variants": ["default", "test"]}})

        assert result["analysis"]["variants"] == ["default"]

    def test_creates_missing_section(self, monkeypatch):
        from reftestgen.config import _apply_env_overrides

        monkeypatch.setenv("REFTESTGEN_SPT_START_SYMBOL", "Start")

        result = _apply_env_overrides({})

        assert result == {"spt": {"start_symbol": "Start"}}

    def test_variable_without_key_is_ignored(self, monkeypatch):
        from reftestgen.config import _apply_env_overrides

        monkeypatch.setenv("REFTESTGEN_GENERATE", "x")

        assert _apply_env_overrides({}) == {}

    def test_load_config_applies_overrides(self, monkeypatch, tmp_path):
        """Environment wins over the config file."""
        from reftestgen.config import load_config

        config_file = tmp_path / ".reftestgen.toml"
        config_file.write_text('[generate]\nmodule = "from_file"\n', encoding="utf-8")
        monkeypatch.setenv("REFTESTGEN_GENERATE_MODULE", "from_env")

        config = load_config(config_file)

        assert config["generate"]["module"] == "from_env"
