# tests/test_config.py

import logging

import pytest

from gencad import ConfigParsingError, GencadConfig, load_config
from gencad.config import DEFAULT_CONFIG, validate_config
from gencad.log_config import HANDLER_NAME, setup_logging


def write_config(tmp_path, text: str):
    path = tmp_path / "gencad.yaml"
    path.write_text(text)
    return path


@pytest.fixture(autouse=True)
def restore_log_level():
    """load_config reconfigures the root logger; put its level back afterwards."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


class TestGencadConfig:

    def test_defaults(self):
        config = GencadConfig.from_dict(None)
        assert config == DEFAULT_CONFIG
        assert config.line_terminator == "\r\n"
        assert config.encoding == "utf-8"
        assert config.length_unit == "mm"
        assert config.log_level == "INFO"

    def test_partial_sections_keep_their_defaults(self):
        config = GencadConfig.from_dict({"serializer": {"line_terminator": "LF"}})
        assert config.line_terminator == "\n"
        assert config.encoding == "utf-8"

    @pytest.mark.parametrize("raw, fragment", [
        ({"serializer": {"line_terminator": "CR"}}, "serializer.line_terminator"),
        ({"serializer": {"encoding": "latin-1"}}, "serializer.encoding"),
        ({"logging": {"level": "CHATTY"}}, "logging.level"),
        ({"interpreter": {"length_unit": 3}}, "interpreter.length_unit"),
        ({"plotter": {}}, "(root)"),
        ({"serializer": {"indent": 2}}, "serializer"),
    ])
    def test_schema_violations(self, raw, fragment):
        with pytest.raises(ConfigParsingError) as excinfo:
            GencadConfig.from_dict(raw)
        assert "Configuration validation failed" in str(excinfo.value)
        assert fragment in str(excinfo.value)

    def test_length_unit_must_be_a_length(self):
        errors = validate_config({"interpreter": {"length_unit": "second"}})
        assert len(errors) == 1
        assert "not a unit of length" in errors[0]

    def test_unknown_length_unit(self):
        errors = validate_config({"interpreter": {"length_unit": "smoot_and_a_half"}})
        assert errors and "not a known unit" in errors[0]

    def test_every_problem_is_reported(self):
        errors = validate_config({"serializer": {"line_terminator": "CR", "encoding": "ebcdic"}})
        assert len(errors) == 2


class TestSetupLogging:

    def test_repeated_calls_keep_one_handler(self):
        root = logging.getLogger()
        foreign = logging.NullHandler()
        root.addHandler(foreign)
        try:
            setup_logging("warning")
            setup_logging(logging.DEBUG)
            ours = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
            assert len(ours) == 1
            assert foreign in root.handlers
            assert root.level == logging.DEBUG
        finally:
            root.removeHandler(foreign)


class TestLoadConfig:

    def test_full_file(self, tmp_path):
        path = write_config(tmp_path, """
serializer:
  line_terminator: LF
  encoding: ascii
interpreter:
  length_unit: inch
logging:
  level: DEBUG
""")
        config = load_config(path)
        assert config == GencadConfig(line_terminator="\n", encoding="ascii", length_unit="inch", log_level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_empty_file_gives_defaults(self, tmp_path):
        assert load_config(write_config(tmp_path, "")) == DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigParsingError) as excinfo:
            load_config(tmp_path / "absent.yaml")
        assert "not found" in str(excinfo.value)

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigParsingError) as excinfo:
            load_config(write_config(tmp_path, "serializer: [unclosed"))
        assert "Invalid YAML syntax" in str(excinfo.value)

    def test_root_must_be_a_mapping(self, tmp_path):
        with pytest.raises(ConfigParsingError) as excinfo:
            load_config(write_config(tmp_path, "- LF\n- ascii\n"))
        assert "must be a mapping" in str(excinfo.value)
