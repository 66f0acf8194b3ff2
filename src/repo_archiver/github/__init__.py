"""GitHub API clients and utilities."""

from repo_archiver.github.auth import AuthenticationError, GitHubAuth
from repo_archiver.github.http import GitHubClient, GitHubHTTPError, GitHubResponse
from repo_archiver.github.rest import FetchError, MutationError, RestClient

__all__ = [
    # Auth
    "AuthenticationError",
    # REST API Client
    "FetchError",
    "GitHubAuth",
    # HTTP Client
    "GitHubClient",
    "GitHubHTTPError",
    "GitHubResponse",
    "MutationError",
    "RestClient",
]
