"""
Configuration loading for ghsetup.

Settings are layered, later layers winning:

1. built-in defaults
2. YAML file (``--config PATH``, or ``ghsetup.yaml`` in the working directory)
3. step inputs (``version``, ``github-token``)
4. command-line flags

Example ghsetup.yaml:

    version: stable
    tool_cache_dir: /opt/hostedtoolcache
    timeout: 60
"""

import logging
import os
import tempfile
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ghsetup.core.exceptions import ConfigError
from ghsetup.core.runner import Runner

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "ghsetup.yaml"
DEFAULT_API_URL = "https://api.github.com"


@dataclass
class SetupConfig:
    """
    Resolved settings for one setup run.

    Attributes:
        version: Version request: 'stable', 'latest' or a semantic version
        github_token: Optional registry credential
        tool_cache_dir: Tool cache root
        temp_dir: Scratch directory for downloads and extraction
        api_url: Registry API base URL
        timeout: HTTP timeout in seconds
        max_retries: Download attempts before giving up
        lock_timeout: Seconds to wait for a tool cache entry lock
    """

    version: str
    github_token: Optional[str] = None
    tool_cache_dir: Optional[Path] = None
    temp_dir: Optional[Path] = None
    api_url: str = DEFAULT_API_URL
    timeout: int = 30
    max_retries: int = 3
    lock_timeout: int = 60

    def __post_init__(self):
        if self.tool_cache_dir is not None:
            self.tool_cache_dir = Path(self.tool_cache_dir)
        if self.temp_dir is not None:
            self.temp_dir = Path(self.temp_dir)


def default_tool_cache_dir(environ=None) -> Path:
    """
    Tool cache root.

    Returns:
        ``$RUNNER_TOOL_CACHE`` on a hosted runner, else ``~/.ghsetup/toolcache``
    """
    environ = os.environ if environ is None else environ
    runner_cache = environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return Path.home() / ".ghsetup" / "toolcache"


def default_temp_dir(environ=None) -> Path:
    """``$RUNNER_TEMP`` on a hosted runner, else the system temp directory."""
    environ = os.environ if environ is None else environ
    runner_temp = environ.get("RUNNER_TEMP")
    if runner_temp:
        return Path(runner_temp)
    return Path(tempfile.gettempdir())


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required but missing, or is not a YAML mapping
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigError(f"Expected a mapping in {config_file}")

    known = {f.name for f in fields(SetupConfig)}
    for key in list(config):
        if key not in known:
            logger.warning(f"Ignoring unknown configuration key '{key}' in {config_file}")
            del config[key]

    return config


def load_config(
    runner: Runner,
    config_file: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SetupConfig:
    """
    Build the effective configuration.

    Args:
        runner: Source of step inputs and environment
        config_file: Explicit YAML file; must exist when given
        overrides: Command-line values; None entries are ignored

    Returns:
        SetupConfig

    Raises:
        ConfigError: If no version was requested anywhere
    """
    if config_file is not None:
        settings = load_yaml_config(Path(config_file), required=True)
    else:
        settings = load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE)

    version_input = runner.get_input("version")
    if version_input:
        settings["version"] = version_input
    token_input = runner.get_input("github-token")
    if token_input:
        settings["github_token"] = token_input

    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value

    if not settings.get("version"):
        raise ConfigError("Input required and not supplied: version")

    if not settings.get("tool_cache_dir"):
        settings["tool_cache_dir"] = default_tool_cache_dir(runner.environ)
    if not settings.get("temp_dir"):
        settings["temp_dir"] = default_temp_dir(runner.environ)
    settings["version"] = str(settings["version"])

    try:
        return SetupConfig(**settings)
    except TypeError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


__all__ = [
    "SetupConfig",
    "load_config",
    "load_yaml_config",
    "default_tool_cache_dir",
    "default_temp_dir",
]
