# src/gencad/config.py
"""
Optional YAML configuration for serialization, interpretation and logging.

A configuration file is a small mapping such as::

    serializer:
      line_terminator: LF
      encoding: ascii
    interpreter:
      length_unit: thou
    logging:
      level: DEBUG

Every key is optional. The file is validated against a strict JSON Schema,
length units are checked with pint, and missing keys take the defaults below
before the result is turned into an immutable `GencadConfig`.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pint
import yaml
from jsonschema import Draft202012Validator

from .log_config import setup_logging
from .units import ureg

logger = logging.getLogger(__name__)

LINE_TERMINATORS = {"CRLF": "\r\n", "LF": "\n"}


class ConfigParsingError(ValueError):
    """Custom exception for errors during configuration loading and validation."""
    pass


def _section(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "object", "additionalProperties": False, "properties": properties}


CONFIG_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "serializer": _section({
            "line_terminator": {"enum": list(LINE_TERMINATORS)},
            "encoding": {"enum": ["ascii", "utf-8"]},
        }),
        "interpreter": _section({
            "length_unit": {"type": "string", "minLength": 1},
        }),
        "logging": _section({
            "level": {"enum": ["DEBUG", "INFO", "WARNING", "ERROR"]},
        }),
    },
}

DEFAULTS = {
    "serializer": {"line_terminator": "CRLF", "encoding": "utf-8"},
    "interpreter": {"length_unit": "mm"},
    "logging": {"level": "INFO"},
}


def check_length_unit(value: str) -> Optional[str]:
    """Returns an error message if `value` is not a pint unit of length."""
    try:
        unit = ureg.Unit(value)
    except (pint.UndefinedUnitError, ValueError, AttributeError, TypeError) as e:
        return f"'{value}' is not a known unit: {e}"
    if unit.dimensionality != ureg.meter.dimensionality:
        return f"'{value}' is not a unit of length (dimensionality {unit.dimensionality})."
    return None


def validate_config(raw: Dict[str, Any]) -> List[str]:
    """Returns every problem found in a raw configuration mapping, as 'path: message' lines."""
    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = []
    for error in validator.iter_errors(raw):
        path = ".".join(str(p) for p in error.absolute_path) or "(root)"
        errors.append(f"{path}: {error.message}")
    unit = raw.get("interpreter", {}).get("length_unit") if not errors else None
    if unit is not None and (problem := check_length_unit(unit)):
        errors.append(f"interpreter.length_unit: {problem}")
    return errors


@dataclass(frozen=True)
class GencadConfig:
    line_terminator: str = "\r\n"
    encoding: str = "utf-8"
    length_unit: str = "mm"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "GencadConfig":
        """Validates a raw configuration mapping and fills in the defaults."""
        raw = raw or {}
        errors = validate_config(raw)
        if errors:
            error_lines = [f"  - {e}" for e in errors]
            raise ConfigParsingError("Configuration validation failed:\n" + "\n".join(error_lines))
        merged = {name: {**defaults, **raw.get(name, {})} for name, defaults in DEFAULTS.items()}
        return cls(
            line_terminator=LINE_TERMINATORS[merged["serializer"]["line_terminator"]],
            encoding=merged["serializer"]["encoding"],
            length_unit=merged["interpreter"]["length_unit"],
            log_level=merged["logging"]["level"],
        )


DEFAULT_CONFIG = GencadConfig()


def load_config(source: Union[str, Path]) -> GencadConfig:
    """Loads, validates and normalizes a YAML configuration file and applies its logging level."""
    path = Path(source)
    config = GencadConfig.from_dict(_load_yaml(path))
    setup_logging(config.log_level)
    logger.info(f"Loaded configuration from {path}.")
    return config


def _load_yaml(source: Path) -> Dict[str, Any]:
    """Loads and performs basic sanity checks on a YAML file."""
    if not source.is_file():
        raise ConfigParsingError(f"Configuration file not found at path: {source}")
    try:
        with source.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except PermissionError as e:
        raise ConfigParsingError(f"Permission denied when trying to read file: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigParsingError(f"Invalid YAML syntax in {source}: {e}") from e
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigParsingError(f"The root of the configuration file {source} must be a mapping.")
    return content
