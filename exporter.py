#!/usr/bin/env python3
"""GitHub exporter main entry point."""

import logging
import sys

from github_exporter.core.application import Application
from github_exporter.api.github_exceptions import ApplicationException, InitializationError
from github_exporter.cli.args import parse_args
from github_exporter.utils.error_handling import log_error
from github_exporter.utils.logging_config import LogManager


def main(argv=None):
    """Main entry point for the GitHub exporter."""
    args = parse_args(argv)

    # Set up logging before anything else can fail
    log_manager = LogManager(
        log_level=getattr(logging, args.log_level or "INFO"),
        logs_dir=args.log_dir,
    )
    logger = log_manager.get_logger(__name__)

    app = None
    try:
        app = Application(args=args, log_manager=log_manager).initialize()

        return app.run()
    except InitializationError as e:
        log_error(logger, "Application initialization failed", exception=e, level="critical",
                  traceback=False, component="main", operation="initialize")
        return 2
    except ApplicationException as e:
        log_error(logger, "Application error", exception=e, level="critical",
                  component="main", operation="run")
        return 1
    except Exception as e:
        log_error(logger, "Fatal error", exception=e, level="critical",
                  component="main", operation="unknown")
        return 3
    finally:
        if app is not None:
            try:
                app.cleanup()
            except ApplicationException as e:
                log_error(logger, "Cleanup failed", exception=e, level="error",
                          traceback=False, component="main", operation="cleanup")


if __name__ == "__main__":
    sys.exit(main())
