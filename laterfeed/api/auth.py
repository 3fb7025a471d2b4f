"""Bearer-token guard for write endpoints."""

import secrets
from typing import Optional

import structlog
from fastapi import Header, HTTPException, Request

logger = structlog.get_logger()


def require_write_token(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> None:
    """Reject the request unless it carries the configured bearer token.

    An empty configured token rejects every caller.
    """
    expected = request.app.state.settings.auth_token

    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = authorization[len("Bearer "):].strip()
    if not expected or not secrets.compare_digest(token.encode(), expected.encode()):
        logger.warning("write_rejected", path=request.url.path)
        raise HTTPException(status_code=401, detail="Unauthorized")
