import logging
from typing import Optional

from fastapi import Depends, Request

from shiptrack.core.errors import Forbidden, Unauthorized
from shiptrack.db.session import get_db  # noqa: F401  re-exported for routers
from shiptrack.security.session import Principal, session_from_cookie_header

logger = logging.getLogger(__name__)

def get_principal(request: Request) -> Optional[Principal]:
    """Caller identity from the session cookie; ``None`` when anonymous."""
    return session_from_cookie_header(request.headers.get("cookie"))

def require_user(principal: Optional[Principal] = Depends(get_principal)) -> Principal:
    if principal is None:
        raise Unauthorized()
    return principal

def require_admin(principal: Principal = Depends(require_user)) -> Principal:
    if not principal.is_admin:
        logger.warning(f"Non-admin {principal.email} denied admin route")
        raise Forbidden()
    return principal
