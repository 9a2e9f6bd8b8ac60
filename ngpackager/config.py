"""
Configuration for ngpackager.

Defaults are merged with an optional JSON, TOML or YAML file and then
with NGPACKAGER_* environment overrides.
"""

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .exit_codes import ConfigError

logger = logging.getLogger("ngpackager")

DEFAULT_LOG_FORMAT = "%(levelname)s: %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. NGPACKAGER_CONFIG environment variable
    2. ~/.ngpackager/ directory
    """
    # Check for environment variable override
    if 'NGPACKAGER_CONFIG' in os.environ:
        path = Path(os.environ['NGPACKAGER_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.ngpackager'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        # Merge file config with defaults
        config = merge_configs(config, file_config)

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "logging": {
            "level": "WARNING",
            "format": DEFAULT_LOG_FORMAT
        },
        "packaging": {
            "stamp_key": "BUILD_SCM_VERSION",
            "descriptor_name": "package.json",
            "binary_extensions": [
                ".png", ".jpg", ".jpeg", ".gif", ".ico", ".webp",
                ".woff", ".woff2", ".ttf", ".eot", ".otf",
                ".gz", ".tgz", ".zip"
            ]
        }
    }


def configure_logging(config, debug=False):
    """Configure the root handler from the ``logging`` config section.

    ``debug`` wins over the configured level and switches to a
    timestamped format.
    """
    log_config = config.get("logging", {})
    if debug:
        level = logging.DEBUG
        fmt = DEBUG_LOG_FORMAT
    else:
        level_name = str(log_config.get("level", "WARNING")).upper()
        level = getattr(logging, level_name, None)
        if not isinstance(level, int):
            raise ConfigError(f"Unknown logging level: {level_name}")
        fmt = log_config.get("format", DEFAULT_LOG_FORMAT)

    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def merge_configs(base_config, override_config):
    """
    Recursively merge ``override_config`` over ``base_config``.

    Sections present in both are merged key by key; any other value
    replaces the base value. Neither argument is modified.
    """
    merged = dict(base_config)
    for key, value in override_config.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


def _coerce_env_value(value, current):
    """Convert an env string to the type of the value it replaces.

    List-valued keys take a comma-separated list; everything else
    follows the usual boolean/integer/string rules.
    """
    if isinstance(current, list):
        return [item.strip() for item in value.split(',') if item.strip()]
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def _match_key(section, parts):
    """Longest key of ``section`` whose ``_``-split form prefixes ``parts``."""
    best = None
    for key in section:
        key_parts = key.split('_')
        if parts[:len(key_parts)] == key_parts:
            if best is None or len(key_parts) > len(best.split('_')):
                best = key
    return best


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: NGPACKAGER_SECTION_KEY
    For example: NGPACKAGER_PACKAGING_STAMP_KEY=STABLE_VERSION
    List values are comma separated:
    NGPACKAGER_PACKAGING_BINARY_EXTENSIONS=.png,.woff2
    Only keys that already exist in the config can be overridden.
    """
    env_prefix = "NGPACKAGER_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "NGPACKAGER_CONFIG":
            continue

        parts = env_key[len(env_prefix):].lower().split('_')
        section = config
        while parts:
            key = _match_key(section, parts)
            if key is None:
                logger.debug("Ignoring %s: no matching config key", env_key)
                break
            parts = parts[len(key.split('_')):]
            if not parts:
                section[key] = _coerce_env_value(value, section[key])
            elif isinstance(section[key], dict):
                section = section[key]
            else:
                break

    logger.debug("Effective config sections: %s", sorted(config.keys()))
    return config
