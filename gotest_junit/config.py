"""Configuration loading from the environment and an optional .env file."""

import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_INPUT_ENCODING = "utf-8"
DEFAULT_HTTP_TIMEOUT = 30.0

CONFIG_KEYS = ['INPUT_ENCODING', 'XML_DECLARATION', 'XML_INDENT', 'HTTP_TIMEOUT']

TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def load_config() -> dict:
    """Load config from environment variables and .env file.

    Environment variables take precedence over .env file values.
    """
    paths = [
        os.environ.get('GOTEST_JUNIT_CONFIG'),
        Path.cwd() / '.env',
    ]
    config = {}
    # First, load from .env file
    for p in paths:
        if p and Path(p).is_file():
            try:
                for line in Path(p).read_text().splitlines():
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        config[key.strip()] = value.strip()
                break
            except OSError as e:
                logger.warning(f"Failed to read config file {p}: {e}")

    # Then, override with environment variables (higher priority)
    for key in CONFIG_KEYS:
        env_value = os.environ.get(key)
        if env_value is not None:
            config[key] = env_value

    return config


def get_input_encoding() -> str:
    return load_config().get('INPUT_ENCODING', DEFAULT_INPUT_ENCODING)


def get_http_timeout() -> float:
    value = load_config().get('HTTP_TIMEOUT')
    if not value:
        return DEFAULT_HTTP_TIMEOUT
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid HTTP_TIMEOUT {value!r}, using {DEFAULT_HTTP_TIMEOUT}")
        return DEFAULT_HTTP_TIMEOUT


def parse_indent(value: Optional[str]) -> Optional[str]:
    """Turn an indent setting ("2", "\\t", "") into an indentation string."""
    if not value:
        return None
    if value.isdigit():
        return " " * int(value) if int(value) > 0 else None
    if value == "\\t":
        return "\t"
    return value


def get_xml_options() -> dict:
    """Keyword options for report.write_xml taken from the configuration."""
    config = load_config()
    return {
        "xml_declaration": config.get('XML_DECLARATION', '').lower() in TRUE_VALUES,
        "indent": parse_indent(config.get('XML_INDENT')),
    }
