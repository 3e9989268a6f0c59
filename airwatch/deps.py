# airwatch/deps.py
# Request dependencies shared by the device and reading routers.

from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from .database import get_db
from .models import APIKey

BEARER_PREFIX = "Bearer "


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_api_key(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> str:
    """Resolve `Authorization: Bearer <key>` to an active key string."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise _unauthorized("Missing or invalid Authorization header")

    token = authorization[len(BEARER_PREFIX):].strip()
    record = db.get(APIKey, token) if token else None
    if record is None or record.revoked:
        raise _unauthorized("Invalid API key")
    return record.key


def get_idempotency_key(x_idempotency_key: Optional[str] = Header(default=None, max_length=64)) -> Optional[str]:
    return x_idempotency_key or None
