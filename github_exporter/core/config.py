"""
Configuration module for the GitHub exporter.

This module provides centralized configuration layered from built-in
defaults, an optional JSON file, environment variables and command-line
flags, in that order of precedence.
"""

import copy
import json
import logging
from typing import Any, Dict, List, Optional

from github_exporter.api.github_exceptions import ConfigurationError

# Default values
DEFAULT_CONFIG = {
    # GitHub API settings
    "github": {
        "url": "https://api.github.com",
        "token": None,
        "insecure": False,
        "timeout": 10.0,  # Seconds per target
        "per_page": 30,  # Items per issue/pull request list call
    },

    # Targets to report on, owner/name with optional * in name
    "target": {
        "repos": [],
    },

    # Enabled collectors
    "collectors": {
        "repos": True,
        "issues": True,
        "pull_requests": True,
    },

    # Metrics endpoint
    "web": {
        "address": "0.0.0.0",
        "port": 9504,
    },

    # Logging settings
    "logging": {
        "level": "INFO",
        "dir": None,
    },
}

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

TRUE_VALUES = ("true", "1", "yes", "on")


def parse_repo_list(value) -> List[str]:
    """Parse a comma/newline separated list of targets (or pass a list through)."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]

    items = []
    for item in value:
        if item:
            items.extend(str(item).replace("\n", ",").split(","))
    return [item.strip() for item in items if item.strip()]


class Config:
    """Configuration manager for the GitHub exporter."""

    def __init__(self, config_file: Optional[str] = None, environment=None, logger=None):
        """Initialize configuration from file and environment variables.

        Args:
            config_file: Optional path to a JSON configuration file
            environment: Environment instance for accessing environment variables
            logger: Logger instance
        """
        self._config = copy.deepcopy(DEFAULT_CONFIG)

        self.environment = environment
        self.logger = logger or logging.getLogger(__name__)

        if config_file:
            self._load_from_file(config_file)

        self._load_from_env()

        self._init_derived_settings()

        self.logger.debug("Configuration initialized")

    def _load_from_file(self, config_file: str):
        """Load configuration from JSON file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(config_file, 'r') as f:
                file_config = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Error loading configuration from {config_file}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Configuration file {config_file} must contain a JSON object")

        self._update_nested_dict(self._config, file_config)
        self.logger.info(f"Loaded configuration from {config_file}")

    def _load_from_env(self):
        """Load configuration from environment variables."""
        if not self.environment:
            self.logger.debug("No environment instance provided, skipping environment variable loading")
            return

        get_env = self.environment.get

        # GitHub API settings
        if url := get_env("GITHUB_EXPORTER_URL"):
            self._config["github"]["url"] = url

        if token := self.environment.get_github_token():
            self._config["github"]["token"] = token

        if insecure := get_env("GITHUB_EXPORTER_INSECURE"):
            self._config["github"]["insecure"] = insecure.lower() in TRUE_VALUES

        if timeout := get_env("GITHUB_EXPORTER_TIMEOUT"):
            self._config["github"]["timeout"] = timeout

        if per_page := get_env("GITHUB_EXPORTER_PER_PAGE"):
            self._config["github"]["per_page"] = per_page

        # Targets
        if repos := get_env("GITHUB_EXPORTER_REPOS"):
            self._config["target"]["repos"] = parse_repo_list(repos)

        # Collectors
        for collector in self._config["collectors"]:
            if enabled := get_env(f"GITHUB_EXPORTER_COLLECTOR_{collector.upper()}"):
                self._config["collectors"][collector] = enabled.lower() in TRUE_VALUES

        # Web settings
        if address := get_env("GITHUB_EXPORTER_WEB_ADDRESS"):
            self._config["web"]["address"] = address

        if port := get_env("GITHUB_EXPORTER_WEB_PORT"):
            self._config["web"]["port"] = port

        # Logging settings
        if log_level := get_env("GITHUB_EXPORTER_LOG_LEVEL"):
            self._config["logging"]["level"] = log_level

        if log_dir := get_env("GITHUB_EXPORTER_LOG_DIR"):
            self._config["logging"]["dir"] = log_dir

        self.logger.debug("Loaded configuration from environment variables")

    def apply_args(self, args):
        """Override configuration with explicitly given command-line flags.

        Args:
            args: Namespace from the argument parser; None values are ignored
        """
        overrides = {
            "github.url": getattr(args, "github_url", None),
            "github.token": getattr(args, "github_token", None),
            "github.timeout": getattr(args, "timeout", None),
            "github.per_page": getattr(args, "per_page", None),
            "web.address": getattr(args, "web_address", None),
            "web.port": getattr(args, "web_port", None),
            "logging.level": getattr(args, "log_level", None),
            "logging.dir": getattr(args, "log_dir", None),
        }
        for key_path, value in overrides.items():
            if value is not None:
                self.set(key_path, value)

        if getattr(args, "insecure", False):
            self.set("github.insecure", True)

        if getattr(args, "repos", None):
            self.set("target.repos", parse_repo_list(args.repos))

        for collector in getattr(args, "disabled_collectors", None) or []:
            self.set(f"collectors.{collector}", False)

        self._init_derived_settings()

    def _update_nested_dict(self, target: Dict, source: Dict):
        """Update nested dictionary recursively."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_nested_dict(target[key], value)
            else:
                target[key] = value

    def _init_derived_settings(self):
        """Normalize and validate values that may have arrived as strings."""
        self._coerce("github.timeout", float, lambda v: v > 0)
        self._coerce("github.per_page", int, lambda v: 1 <= v <= 100)
        self._coerce("web.port", int, lambda v: 0 < v < 65536)

        self._config["target"]["repos"] = parse_repo_list(self._config["target"]["repos"])

        level = self._config["logging"]["level"]
        if isinstance(level, str):
            if level.upper() in LOG_LEVELS:
                self._config["logging"]["level"] = LOG_LEVELS[level.upper()]
            else:
                self.logger.warning(f"Unknown log level {level!r}, using INFO")
                self._config["logging"]["level"] = logging.INFO

    def _coerce(self, key_path: str, convert, valid):
        """Convert a setting in place, falling back to its default when invalid."""
        value = self.get(key_path)
        try:
            converted = convert(value)
            if not valid(converted):
                raise ValueError(value)
        except (TypeError, ValueError):
            default = self._get_default(key_path)
            self.logger.warning(f"Invalid value {value!r} for {key_path}, using default {default!r}")
            converted = default
        self.set(key_path, converted)

    def _get_default(self, key_path: str) -> Any:
        value = DEFAULT_CONFIG
        for part in key_path.split('.'):
            value = value[part]
        return value

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation path.

        Args:
            key_path: Dot notation path to configuration value (e.g., "github.url")
            default: Default value to return if path not found

        Returns:
            Configuration value or default
        """
        value = self._config

        for part in key_path.split('.'):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any):
        """Set configuration value using dot notation path."""
        parts = key_path.split('.')

        config = self._config

        for part in parts[:-1]:
            if part not in config or not isinstance(config[part], dict):
                config[part] = {}
            config = config[part]

        config[parts[-1]] = value

    def get_all(self) -> Dict[str, Any]:
        """Get the entire configuration dictionary."""
        return self._config

    @property
    def targets(self) -> List[str]:
        return list(self._config["target"]["repos"])

    def enabled_collectors(self) -> List[str]:
        """Names of the collectors switched on, in registration order."""
        return [name for name, enabled in self._config["collectors"].items() if enabled]
