"""Logging configuration for the GitHub exporter."""

import logging
from pathlib import Path
from typing import List, Optional


class LogManager:
    """Manages logging configuration without global state."""

    def __init__(self, log_level: int = logging.INFO,
                 logs_dir: Optional[Path] = None,
                 console: bool = True):
        """Initialize the log manager.

        Args:
            log_level: Logging level (e.g., logging.INFO)
            logs_dir: Optional directory for log files; console only if None
            console: Whether to enable console logging
        """
        self.log_level = log_level
        self.console_enabled = console
        self.logs_dir = Path(logs_dir) if logs_dir else None

        if self.logs_dir:
            self.logs_dir.mkdir(exist_ok=True, parents=True)

        self._handlers = []
        self._configure_logging()

        self._loggers = {}

        self.get_logger(__name__).debug(f"Log manager initialized with log_level={self.log_level}, "
                                        f"logs_dir={self.logs_dir}")

    def _configure_logging(self):
        """Configure logging with console and optional file handlers."""
        # Reset existing logging configuration
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)

        logging.root.setLevel(self.log_level)

        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        if self.console_enabled:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(console_formatter)
            console_handler.setLevel(self.log_level)
            logging.root.addHandler(console_handler)
            self._handlers.append((logging.root, console_handler))

        if self.logs_dir:
            self._add_file_handlers()

    def _add_file_handlers(self):
        """Write all records to github_exporter.log and API records to github_api.log."""
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        self._add_file_handler("github_exporter.log", file_formatter, self.log_level)
        self._add_file_handler("github_api.log", file_formatter, self.log_level,
                               ["github_exporter.api"])

    def _add_file_handler(self, filename: str, formatter: logging.Formatter,
                          level: int, logger_names: Optional[List[str]] = None):
        """Add a file handler to specific loggers or root logger.

        Args:
            filename: Log filename
            formatter: Log formatter
            level: Log level
            logger_names: Optional list of logger names to add handler to
        """
        handler = logging.FileHandler(self.logs_dir / filename)
        handler.setFormatter(formatter)
        handler.setLevel(level)

        if logger_names:
            for logger_name in logger_names:
                logger = logging.getLogger(logger_name)
                logger.addHandler(handler)
                self._handlers.append((logger, handler))
        else:
            logging.root.addHandler(handler)
            self._handlers.append((logging.root, handler))

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger with the specified name.

        Args:
            name: Logger name (usually __name__)

        Returns:
            Logger instance
        """
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)

        return self._loggers[name]

    def set_log_level(self, level: int):
        """Set the log level for the root logger and console output."""
        self.log_level = level

        logging.root.setLevel(level)

        for handler in logging.root.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)

    def cleanup(self):
        """Detach and close the handlers this manager installed."""
        for logger, handler in self._handlers:
            logger.removeHandler(handler)
            handler.close()
        self._handlers = []

    def set_logs_dir(self, logs_dir: Optional[Path]):
        """Move file logging to another directory, or turn it off with None."""
        for logger, handler in [entry for entry in self._handlers if isinstance(entry[1], logging.FileHandler)]:
            logger.removeHandler(handler)
            handler.close()
            self._handlers.remove((logger, handler))

        self.logs_dir = Path(logs_dir) if logs_dir else None

        if self.logs_dir:
            self.logs_dir.mkdir(exist_ok=True, parents=True)
            self._add_file_handlers()
            self.get_logger(__name__).info(f"Writing log files to {self.logs_dir}")
