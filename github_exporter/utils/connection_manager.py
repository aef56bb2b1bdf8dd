"""
Connection management utilities for HTTP requests.

This module provides centralized management of HTTP connections with
connection pooling and thread safety. Retries are disabled at the
transport level: a failed call is reported and retried by the next scrape.
"""

import logging
import threading
from typing import Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

# Configure connection pooling; concurrent scrapes share the pool
MAX_POOL_CONNECTIONS = 10
MAX_POOL_MAXSIZE = 10
MAX_RETRIES = 0


class ConnectionManager:
    """Manages HTTP connections with efficient connection pooling.

    Sessions are cached per token so that concurrent scrape threads reuse
    the same keep-alive connections to the API.
    """

    def __init__(self, verify: bool = True):
        """Initialize the connection manager.

        Args:
            verify: Whether TLS certificates of the API host are verified
        """
        self.verify = verify
        self.session_pool = {}  # Maps tokens to sessions
        self.lock = threading.RLock()

    def get_session(self, token: Optional[str] = None) -> requests.Session:
        """Get or create a pooled session.

        Args:
            token: Optional token to associate with the session

        Returns:
            Requests session configured for connection reuse
        """
        cache_key = token if token else "__default__"

        with self.lock:
            if cache_key in self.session_pool:
                return self.session_pool[cache_key]

            session = self._create_session()
            self.session_pool[cache_key] = session

            # Only show token prefix/suffix
            if token:
                logger.debug(f"Created new connection pool for token {mask_token(token)}")
            else:
                logger.debug("Created new default connection pool")

            return session

    def _create_session(self) -> requests.Session:
        """Create a requests session with connection pooling and no retries."""
        session = requests.Session()

        retry_strategy = Retry(total=MAX_RETRIES, backoff_factor=0)

        adapter = HTTPAdapter(
            pool_connections=MAX_POOL_CONNECTIONS,
            pool_maxsize=MAX_POOL_MAXSIZE,
            max_retries=retry_strategy
        )

        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.verify = self.verify

        return session

    def clear_all_sessions(self):
        """Close every pooled session."""
        with self.lock:
            for token, session in self.session_pool.items():
                try:
                    session.close()
                except Exception as e:
                    logger.warning(f"Error closing session for {mask_token(token)}: {e}")

            self.session_pool.clear()
            logger.info("Cleared all connection pools")

    def cleanup(self):
        """Release pooled connections on shutdown."""
        self.clear_all_sessions()


def mask_token(token: str) -> str:
    """Return a printable form of a token that does not leak it."""
    if not token or token == "__default__":
        return "<anonymous>"
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"
