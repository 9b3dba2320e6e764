"""Tests for engine configuration."""

import pytest
from pydantic import ValidationError

from etpl.config import EngineConfig, load_config


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.open_delimiter == "<%"
        assert config.close_delimiter == "%>"
        assert config.echo_marker == "="
        assert config.strict_undefined is True
        assert config.globals == {}

    def test_directive_pattern_escapes_delimiters(self):
        pattern = EngineConfig(open_delimiter="((", close_delimiter="))").directive_pattern()
        m = pattern.search("x ((= a.b )) y")
        assert m is not None
        assert m.group(1) == "="
        assert m.group(2) == "a.b"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"open_delimiter": ""},
            {"close_delimiter": ""},
            {"open_delimiter": "%%", "close_delimiter": "%%"},
            {"echo_marker": ""},
            {"echo_marker": "%>"},
        ],
    )
    def test_invalid_delimiters(self, kwargs):
        with pytest.raises(ValidationError):
            EngineConfig(**kwargs)

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(ValidationError):
            config.echo_marker = "!"


class TestLoadConfig:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "etpl.yaml"
        path.write_text(
            "open_delimiter: '{%'\n"
            "close_delimiter: '%}'\n"
            "strict_undefined: false\n"
            "globals:\n"
            "  site: example\n"
        )
        config = load_config(path)
        assert config.open_delimiter == "{%"
        assert config.close_delimiter == "%}"
        assert config.strict_undefined is False
        assert config.globals == {"site": "example"}

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "etpl.yaml"
        path.write_text("")
        assert load_config(path) == EngineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "etpl.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(TypeError):
            load_config(path)
