"""FastAPI dependencies for request authentication.

End users are authenticated upstream by the identity provider integration,
which forwards the subject identifier in the X-User-Id header. Service and
admin callers present an X-API-Key header instead.
"""

from typing import Annotated

from fastapi import Header, HTTPException

from halal_storefront.auth.api_key_validator import APIKeyValidator


def get_api_key_from_header(
    x_api_key: Annotated[str | None, Header()] = None,
    validator: APIKeyValidator | None = None,
) -> str:
    """Extract and validate the API key from the X-API-Key header.

    Args:
        x_api_key: API key from X-API-Key header (injected by FastAPI)
        validator: APIKeyValidator instance

    Returns:
        str: The validated API key

    Raises:
        HTTPException: 401 if API key is missing or invalid
    """
    if not x_api_key:
        raise HTTPException(status_code=401, detail="Missing API key")

    if validator and not validator.validate(x_api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")

    return x_api_key


def get_user_id_from_header(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Extract the authenticated user's id from the X-User-Id header.

    Args:
        x_user_id: Subject identifier forwarded by the identity provider

    Returns:
        str: The user id, stripped of surrounding whitespace

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Not authenticated")

    return x_user_id.strip()
