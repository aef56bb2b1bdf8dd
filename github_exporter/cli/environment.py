"""Environment configuration management for the GitHub exporter."""

import os
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

TOKEN_VARIABLES = ("GITHUB_EXPORTER_TOKEN", "GITHUB_TOKEN")


class Environment:
    """Manages environment configuration without global state."""

    def __init__(self, env_file: Optional[str] = None, use_os_environ: bool = True):
        """Initialize the environment configuration.

        Args:
            env_file: Path to .env file (optional); ./.env is used if present
            use_os_environ: Whether process environment variables override the file
        """
        self._values = {}
        self.env_file_path = None

        if env_file:
            self.load_env_file(env_file)
        else:
            default_env_path = Path.cwd() / '.env'
            if default_env_path.exists():
                self.load_env_file(str(default_env_path))

        # Process environment wins over the .env file
        if use_os_environ:
            self._values.update(os.environ)

        logger.debug("Environment initialized")

    def load_env_file(self, dotenv_path: str) -> bool:
        """Load environment variables from .env file.

        Args:
            dotenv_path: Path to .env file

        Returns:
            True if file was loaded successfully, False otherwise
        """
        env_path = Path(dotenv_path)
        if not env_path.exists():
            logger.warning(f".env file not found at {dotenv_path}")
            return False

        logger.info(f"Loading environment variables from: {dotenv_path}")

        # Load values from .env file without modifying os.environ
        env_values = dotenv_values(dotenv_path=dotenv_path)
        self._values.update({k: v for k, v in env_values.items() if v is not None})

        self.env_file_path = dotenv_path

        self._log_loaded_values()

        return True

    def _log_loaded_values(self):
        """Log loaded exporter variables with the token masked."""
        for key in sorted(self._values):
            if not key.startswith("GITHUB_EXPORTER_"):
                continue
            if key in TOKEN_VARIABLES:
                logger.info(f"Loaded {key}={'*' * len(self._values[key])}")
            else:
                logger.info(f"Loaded {key}={self._values[key]}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get an environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found

        Returns:
            Value of environment variable or default
        """
        return self._values.get(key, default)

    def set(self, key: str, value: Any):
        """Set an environment variable (does not modify os.environ)."""
        self._values[key] = value

    def get_github_token(self) -> Optional[str]:
        """Get the API token from the first token variable that is set.

        Returns:
            The token, or None if no token variable is set
        """
        for key in TOKEN_VARIABLES:
            token = self.get(key)
            if token and token.strip():
                return token.strip()
        return None
