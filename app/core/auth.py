"""
Authentication strategies.

The application picks one ``AuthProvider`` at startup: ``JWTAuthProvider``
for normal deployments and ``DemoAuthProvider`` when ``DEMO_MODE`` is on.
Endpoints only ever see the resulting ``Principal``.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core import security
from app.core.config import Settings, settings
from app.models.user import ROLE_ADMIN
from app.services import user_service

logger = logging.getLogger(__name__)

DEMO_TOKEN = "demo-token"


@dataclass(frozen=True)
class Principal:
    user_id: int
    username: str
    role: str
    company_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthProvider(ABC):
    name: str = "base"

    @abstractmethod
    def authenticate(self, db: Session, token: Optional[str]) -> Principal:
        """Resolve a bearer token to a principal or raise a 401."""

    @abstractmethod
    def login(self, db: Session, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Check credentials and return the login payload including ``token``."""


class JWTAuthProvider(AuthProvider):
    name = "jwt"

    def __init__(self, app_settings: Settings = settings):
        self.settings = app_settings

    def issue_token(self, principal: Principal) -> str:
        return security.create_access_token(
            data={
                "sub": str(principal.user_id),
                "username": principal.username,
                "role": principal.role,
                "companyId": principal.company_id,
            },
            app_settings=self.settings,
        )

    def authenticate(self, db: Session, token: Optional[str]) -> Principal:
        if not token:
            raise _unauthorized("No token provided")

        payload = security.decode_access_token(token, self.settings)
        if payload is None:
            raise _unauthorized("Invalid or expired token")

        subject = payload.get("sub")
        if subject is None or not str(subject).isdigit():
            raise _unauthorized("Invalid or expired token")

        # Role and company come from the current row so admin changes apply immediately
        user = user_service.get_user(db, int(subject))
        if user is None:
            raise _unauthorized("User no longer exists")

        return Principal(
            user_id=user.id,
            username=user.username,
            role=user.role,
            company_id=user.company_id or None,
        )

    def login(self, db: Session, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not username or not password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username and password are required",
            )

        user = user_service.get_user_by_username(db, username)
        if not user or not security.verify_password(password, user.hashed_password):
            raise _unauthorized("Invalid username or password")

        principal = Principal(
            user_id=user.id,
            username=user.username,
            role=user.role,
            company_id=user.company_id or None,
        )
        logger.info(f"User {user.username} logged in")
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "role": user.role,
            "company_id": user.company_id,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
            "token": self.issue_token(principal),
        }


class DemoAuthProvider(AuthProvider):
    """Accepts every request as a fixed demo administrator."""

    name = "demo"

    principal = Principal(user_id=1, username="demo", role=ROLE_ADMIN, company_id=None)

    def authenticate(self, db: Session, token: Optional[str]) -> Principal:
        return self.principal

    def login(self, db: Session, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        return {
            "id": self.principal.user_id,
            "username": username or self.principal.username,
            "email": None,
            "role": self.principal.role,
            "company_id": None,
            "token": DEMO_TOKEN,
        }


def select_auth_provider(app_settings: Settings) -> AuthProvider:
    provider = DemoAuthProvider() if app_settings.DEMO_MODE else JWTAuthProvider(app_settings)
    logger.info(f"Using {provider.name} authentication")
    return provider
