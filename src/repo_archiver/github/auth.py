"""GitHub authentication module.

Validates the access token supplied through configuration and builds the
Authorization header for API requests.
"""

import logging
import re

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when the token is missing or malformed."""


class GitHubAuth:
    """GitHub authentication manager.

    Token prefix formats:
    - ghp_: Personal access token (classic)
    - gho_: OAuth access token
    - ghu_: User-to-server token
    - ghs_: Server-to-server token
    - github_pat_: Fine-grained personal access token
    - Classic tokens: 40 character hex string (no prefix)
    """

    VALID_PREFIXES = ("ghp_", "gho_", "ghu_", "ghs_", "github_pat_")

    CLASSIC_TOKEN_PATTERN = re.compile(r"^[a-f0-9]{40}$")

    def __init__(self, token: str) -> None:
        """Initialize GitHub authentication.

        Args:
            token: GitHub access token.

        Raises:
            AuthenticationError: If token is empty or has an unknown format.
        """
        self._token = (token or "").strip()
        self._validate_token()

    def _validate_token(self) -> None:
        """Validate token format.

        Raises:
            AuthenticationError: If token format is invalid.
        """
        token = self._token
        if not token:
            raise AuthenticationError("Token is empty")

        has_valid_prefix = token.startswith(self.VALID_PREFIXES)
        is_classic = bool(self.CLASSIC_TOKEN_PATTERN.match(token))

        if not has_valid_prefix and not is_classic:
            raise AuthenticationError(
                f"Invalid token format. Expected prefix {self.VALID_PREFIXES} "
                "or 40-character hex string (classic token)"
            )

        if has_valid_prefix and len(token) < 20:
            raise AuthenticationError("Token appears too short to be valid")

    @property
    def token(self) -> str:
        """Get the GitHub token."""
        return self._token

    def get_authorization_header(self) -> dict[str, str]:
        """Get the Authorization header for API requests.

        Returns:
            Dictionary with a bearer Authorization header.
        """
        return {"Authorization": f"Bearer {self._token}"}
