from typing import Optional
import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shiptrack.api.cookies import clear_session_cookie, set_session_cookie
from shiptrack.api.deps import get_db, get_principal
from shiptrack.api.schemas import LoginPayload, RegisterPayload
from shiptrack.core.config import settings
from shiptrack.core.errors import UpstreamError
from shiptrack.core.limiting import limiter
from shiptrack.security.session import Principal, encode_session
from shiptrack.services import users as user_service

logger = logging.getLogger(__name__)
router = APIRouter()  # main.py mounts at /api/auth

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterPayload, response: Response, db: Session = Depends(get_db)) -> dict:
    try:
        user = user_service.create_user(db, str(payload.email), payload.password, payload.name)
    except SQLAlchemyError as e:
        logger.error(f"Registration failed for {payload.email}: {e}")
        raise UpstreamError("Registration failed")

    set_session_cookie(response, encode_session(user.id, user.email, user.is_admin))
    return {"success": True, "user": user_service.summarize_user(user), "message": "Registration successful"}

@router.post("/login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(request: Request, payload: LoginPayload, response: Response, db: Session = Depends(get_db)) -> dict:
    try:
        user = user_service.authenticate(db, str(payload.email), payload.password)
    except SQLAlchemyError as e:
        logger.error(f"Login lookup failed for {payload.email}: {e}")
        raise UpstreamError("Login failed")

    set_session_cookie(response, encode_session(user.id, user.email, user.is_admin))
    logger.info(f"Successful login for user: {user.email}")
    return {"success": True, "user": user_service.summarize_user(user), "message": "Login successful"}

@router.post("/logout")
def logout(response: Response) -> dict:
    clear_session_cookie(response)
    return {"success": True, "message": "Logged out successfully"}

@router.get("/session")
def current_session(principal: Optional[Principal] = Depends(get_principal), db: Session = Depends(get_db)) -> dict:
    """Always 200: anonymous callers get ``user: null``."""
    if principal is None:
        return {"success": False, "user": None}

    try:
        user = user_service.get_user(db, principal.user_id)
    except SQLAlchemyError as e:
        logger.error(f"Session user lookup failed: {e}")
        user = None
    return {
        "success": True,
        "user": user_service.summarize_user(user) if user else principal.to_dict(),
    }
