"""API key validation for server-to-server and admin endpoints.

The identity provider's login callback and the order administration routes
authenticate with a shared API key rather than an end-user identity.
"""

import logging
import os

logger = logging.getLogger(__name__)

DEVELOPMENT_API_KEY = "dummy-key-for-development"


def load_api_keys() -> list[str]:
    """Parse the comma-separated ADMIN_API_KEY, falling back to a development key."""
    api_keys_str = os.getenv("ADMIN_API_KEY", "")
    api_keys = [key.strip() for key in api_keys_str.split(",") if key.strip()]

    if not api_keys:
        logger.warning("No ADMIN_API_KEY configured - using development key")
        api_keys = [DEVELOPMENT_API_KEY]

    return api_keys


class APIKeyValidator:
    """Validates API keys against a configured set of valid keys."""

    def __init__(self, api_keys: list[str]) -> None:
        """Initialize validator with list of valid API keys.

        Args:
            api_keys: List of valid API key strings

        Raises:
            ValueError: If api_keys list is empty
        """
        if not api_keys:
            raise ValueError("At least one API key must be provided")

        self.api_keys = frozenset(api_keys)

    def validate(self, api_key: str) -> bool:
        """Check an API key. Matching is exact and case-sensitive."""
        return api_key in self.api_keys
