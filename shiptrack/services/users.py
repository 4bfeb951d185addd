import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiptrack.core.clock import isoformat_utc
from shiptrack.core.errors import Conflict, Unauthorized
from shiptrack.db.models import User
from shiptrack.security.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == email.lower())).scalars().first()

def create_user(db: Session, email: str, password: str, name: Optional[str] = None, is_admin: bool = False) -> User:
    if get_user_by_email(db, email):
        raise Conflict("Email already registered")
    user = User(email=email.lower(), password=hash_password(password), name=name or None, is_admin=is_admin)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    logger.info(f"User registered: {user.email}")
    return user

def authenticate(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password):
        logger.warning(f"Failed login attempt for email: {email}")
        raise Unauthorized("Invalid email or password")
    return user

def list_customers(db: Session) -> List[User]:
    """Non-admin users, newest first."""
    stmt = select(User).where(User.is_admin.is_(False)).order_by(User.created_at.desc())
    return list(db.execute(stmt).scalars().all())

def summarize_user(user: User) -> dict:
    """Public identity shape used in auth responses."""
    return {"id": user.id, "email": user.email, "name": user.name, "isAdmin": user.is_admin}

def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "is_admin": user.is_admin,
        "created_at": isoformat_utc(user.created_at),
    }
