"""
Exceptions for the GitHub exporter.

This module contains common exceptions used throughout the codebase.
All components should use these exception classes for consistency.
"""

# Base exceptions for different components
class GitHubException(Exception):
    """Base exception for all GitHub-related errors."""
    pass


class ConfigException(Exception):
    """Base exception for all configuration-related errors."""
    pass


class ApplicationException(Exception):
    """Base exception for application-level errors."""
    pass


# GitHub API exceptions
class GitHubAPIError(GitHubException):
    """Exception raised when GitHub API returns an error."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubRateLimitError(GitHubAPIError):
    """Exception raised when GitHub API rate limit is exceeded."""
    pass


class GitHubAuthenticationError(GitHubAPIError):
    """Exception raised when authentication to GitHub API fails."""
    pass


class GitHubNotFoundError(GitHubAPIError):
    """Exception raised when the requested repository does not exist."""
    pass


class GitHubServerError(GitHubAPIError):
    """Exception raised when GitHub API returns a 5xx status code."""
    pass


class GitHubNetworkError(GitHubException):
    """Exception raised when network connection to GitHub API fails."""
    pass


class GitHubTimeoutError(GitHubException):
    """Exception raised when a target runs past its request deadline."""
    pass


# Config exceptions
class ConfigurationError(ConfigException):
    """Exception raised when there's an error in configuration."""
    pass


class InvalidTargetError(ConfigurationError):
    """Exception raised when a target is not of the form owner/name."""
    pass


class MissingConfigError(ConfigException):
    """Exception raised when a required configuration value is missing."""
    pass


# Application exceptions
class InitializationError(ApplicationException):
    """Exception raised when component initialization fails."""
    pass


class ResourceCleanupError(ApplicationException):
    """Exception raised when resource cleanup fails."""
    pass
