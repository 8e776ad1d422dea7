from __future__ import annotations

import hmac
from typing import Optional

from fastapi import HTTPException, status

from stockdash.config import get_settings


def _load_api_keys() -> set[str]:
    settings = get_settings()
    keys = set()
    if settings.API_KEYS:
        for value in settings.API_KEYS.split(","):
            value = value.strip()
            if value:
                keys.add(value)
    return keys


def _get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _key_matches(candidate: Optional[str], keys: set[str]) -> bool:
    if not candidate:
        return False
    return any(hmac.compare_digest(candidate, key) for key in keys)


def authenticate_request(
    api_key: Optional[str],
    authorization: Optional[str],
) -> Optional[dict]:
    """Check an API key (header or bearer token) when keys are configured.

    With no ``API_KEYS`` set the service is open, as for a single local user.
    """
    keys = _load_api_keys()
    if not keys:
        return None
    if _key_matches(api_key, keys):
        return {"auth_type": "api_key"}
    if _key_matches(_get_bearer_token(authorization), keys):
        return {"auth_type": "bearer"}
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )
