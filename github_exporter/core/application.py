"""Application class for the GitHub exporter.

This module provides the main Application class that manages component
lifecycle, dependencies, and configuration. It initializes the HTTP
connection pool, the API client and the collectors, exposes them on a
Prometheus registry, serves that registry over HTTP and tears everything
down on shutdown.

Components are initialized in dependency order and stored in a registry
dictionary so that tests can inject their own instances.
"""

import logging
import signal
import threading
from pathlib import Path

from prometheus_client import CollectorRegistry, PlatformCollector, ProcessCollector, start_http_server

from github_exporter.api.api_client import GitHubApiClient
from github_exporter.api.repository_fetcher import RepositoryResolver
from github_exporter.api.github_exceptions import (
    ApplicationException, InitializationError, MissingConfigError, ResourceCleanupError
)
from github_exporter.cli.args import parse_args
from github_exporter.cli.environment import Environment
from github_exporter.core.config import Config
from github_exporter.metrics.collector import COLLECTORS
from github_exporter.metrics.request_metrics import RequestMetrics
from github_exporter.utils.connection_manager import ConnectionManager, mask_token
from github_exporter.utils.error_handling import log_error
from github_exporter.utils.logging_config import LogManager


class Application:
    """Main application for the GitHub exporter.

    Attributes:
        args: Command-line arguments for configuration
        components: Dictionary of initialized components
        stop_event: Set when the exporter is shutting down
    """

    def __init__(self, args=None, log_manager=None, environment=None):
        """Initialize the application with optional injected dependencies.

        Args:
            args: Command-line arguments (optional, will parse if not provided)
            log_manager: LogManager instance for logging configuration and access
            environment: Environment instance for configuration and env variables
        """
        self.args = args if args is not None else parse_args()
        self.stop_event = threading.Event()
        self.components = {}

        if log_manager:
            self.components['log_manager'] = log_manager
            self._init_logger = log_manager.get_logger(__name__)
        else:
            self._init_logger = logging.getLogger(__name__)

        if environment:
            self.components['environment'] = environment

    def initialize(self):
        """Initialize all application components.

        Returns:
            Self for method chaining

        Raises:
            InitializationError: When component initialization fails
        """
        try:
            if 'log_manager' not in self.components:
                self._init_logging()

            if 'environment' not in self.components:
                self._init_environment()

            if 'config' not in self.components:
                self._init_config()

            if 'connection_manager' not in self.components:
                self._init_connection_manager()

            if 'api_client' not in self.components:
                self._init_api_client()

            if 'registry' not in self.components:
                self._init_collectors()

            self.logger = self.get_component('log_manager').get_logger(__name__)
            self.logger.info("Application initialized successfully")

            return self
        except Exception as e:
            log_error(self._init_logger, "Application initialization failed", exception=e,
                      level="critical", component="Application", operation="initialize")

            raise InitializationError(f"Failed to initialize application: {str(e)}") from e

    def _init_logging(self):
        """Initialize logging system from the command line; config may refine the level later."""
        log_level = getattr(logging, self.args.log_level or "INFO")
        log_manager = LogManager(log_level=log_level, logs_dir=self.args.log_dir)
        self.components['log_manager'] = log_manager

        self._init_logger = log_manager.get_logger(__name__)
        self._init_logger.debug("Logging initialized")

    def _init_environment(self):
        """Initialize environment configuration."""
        env = Environment(env_file=self.args.env_file)
        self.components['environment'] = env
        self._init_logger.debug("Environment initialized")

    def _init_config(self):
        """Initialize configuration.

        Raises:
            MissingConfigError: When no target repositories are configured
        """
        env = self.get_component('environment')

        app_config = Config(config_file=self.args.config, environment=env, logger=self._init_logger)
        app_config.apply_args(self.args)

        log_manager = self.get_component('log_manager')
        if log_manager.log_level != app_config.get("logging.level"):
            log_manager.set_log_level(app_config.get("logging.level"))

        log_dir = app_config.get("logging.dir")
        if log_dir and log_manager.logs_dir != Path(log_dir):
            log_manager.set_logs_dir(log_dir)

        if not app_config.targets:
            raise MissingConfigError("No target repositories configured, use --github.repo or GITHUB_EXPORTER_REPOS")

        if not app_config.get("github.token"):
            self._init_logger.warning("No GitHub token configured, using anonymous access with a low rate limit")

        self.components['config'] = app_config
        self._init_logger.debug("Configuration initialized")

    def _init_connection_manager(self):
        """Initialize connection manager."""
        config = self.get_component('config')
        connection_manager = ConnectionManager(verify=not config.get("github.insecure"))
        self.components['connection_manager'] = connection_manager
        self._init_logger.debug("Connection manager initialized")

    def _init_api_client(self):
        """Initialize the GitHub API client."""
        config = self.get_component('config')
        token = config.get("github.token")

        api_client = GitHubApiClient(
            token=token,
            base_url=config.get("github.url"),
            connection_manager=self.get_component('connection_manager'),
        )
        self.components['api_client'] = api_client
        self._init_logger.info(f"Using GitHub API at {api_client.base_url} with token {mask_token(token)}")

    def _init_collectors(self):
        """Create the registry, the shared request metrics and the enabled collectors."""
        config = self.get_component('config')
        api_client = self.get_component('api_client')

        registry = CollectorRegistry()
        ProcessCollector(registry=registry)
        PlatformCollector(registry=registry)

        request_metrics = RequestMetrics(registry)
        resolver = RepositoryResolver(api_client)

        collectors = {}
        for name in config.enabled_collectors():
            collector = COLLECTORS[name](
                api_client=api_client,
                request_metrics=request_metrics,
                targets=config.targets,
                timeout=config.get("github.timeout"),
                resolver=resolver,
                per_page=config.get("github.per_page"),
                stop_event=self.stop_event,
            )
            registry.register(collector)
            collectors[name] = collector
            self._init_logger.debug(f"Registered {name} collector")

        self.components['registry'] = registry
        self.components['request_metrics'] = request_metrics
        self.components['collectors'] = collectors

    def get_component(self, name):
        """Get a component by name, or None if not found."""
        return self.components.get(name)

    def list_metrics(self) -> int:
        """Print every metric the enabled collectors expose.

        Returns:
            Exit code
        """
        for name, collector in self.get_component('collectors').items():
            print(f"# {name}")
            for family in collector.describe():
                labels = ", ".join(family_labels(collector, family.name))
                print(f"{family.name}{{{labels}}}  {family.documentation}")
        return 0

    def run(self):
        """Serve metrics until a shutdown signal arrives.

        Returns:
            Exit code (0 for success, non-zero for errors)

        Raises:
            ApplicationException: When a critical application error occurs
        """
        if self.args.list_metrics:
            return self.list_metrics()

        logger = self.logger
        config = self.get_component('config')

        try:
            self._install_signal_handlers()

            address = config.get("web.address")
            port = config.get("web.port")
            server, _ = start_http_server(port, addr=address, registry=self.get_component('registry'))
            self.components['server'] = server
            logger.info(f"Serving metrics on http://{address}:{port}/metrics for {len(config.targets)} targets")

            while not self.stop_event.wait(1.0):
                pass

            logger.info("Shutdown requested, stopping metrics server")
            return 0

        except KeyboardInterrupt:
            log_error(logger, "Exporter interrupted by user", level="warning",
                      component="Application", operation="run")
            return 130

        except Exception as e:
            log_error(logger, "Error running exporter", exception=e,
                      level="critical", component="Application", operation="run")

            if not isinstance(e, ApplicationException):
                raise ApplicationException(f"Application run failed: {str(e)}") from e
            raise

    def _install_signal_handlers(self):
        if threading.current_thread() is not threading.main_thread():
            return

        def handle_signal(signum, frame):
            self.logger.info(f"Received signal {signum}")
            self.stop_event.set()

        signal.signal(signal.SIGTERM, handle_signal)

    def cleanup(self):
        """Clean up all resources used by the application.

        Raises:
            ResourceCleanupError: When there's a critical error during resource cleanup
        """
        logger = logging.getLogger(__name__)
        logger.info("Cleaning up application resources...")

        # In-flight scrapes stop at the next target
        self.stop_event.set()

        cleanup_errors = []

        server = self.components.pop('server', None)
        if server is not None:
            try:
                server.shutdown()
                server.server_close()
            except Exception as e:
                log_error(logger, "Error stopping metrics server", exception=e,
                          level="error", component="Application", operation="cleanup")
                cleanup_errors.append(('server', str(e)))

        for name in ('connection_manager', 'log_manager'):
            component = self.components.get(name)
            if component is None:
                continue
            try:
                logger.debug(f"Cleaning up {name}...")
                component.cleanup()
            except Exception as e:
                log_error(logger, f"Error cleaning up {name}", exception=e,
                          level="error", component="Application", operation="cleanup",
                          component_name=name)
                cleanup_errors.append((name, str(e)))

        if cleanup_errors:
            raise ResourceCleanupError(
                f"Failed to clean up components: {', '.join(name for name, _ in cleanup_errors)}")


def family_labels(collector, family_name: str):
    """Label names declared for one of a collector's families."""
    for name, _, labels in collector.families:
        if name == family_name:
            return list(labels)
    return []
