from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.auth import AuthProvider, Principal
from app.core.config import Settings
from app.core.database import SessionLocal
from app.services.agent_backend import AgentBackend
from app.services.elevenlabs_client import ElevenLabsClient

bearer_scheme = HTTPBearer(auto_error=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth_provider

def get_elevenlabs_client(app_settings: Settings = Depends(get_settings)) -> ElevenLabsClient:
    return ElevenLabsClient(
        api_key=app_settings.ELEVENLABS_API_KEY,
        base_url=app_settings.ELEVENLABS_API_URL,
        timeout=app_settings.ELEVENLABS_TIMEOUT,
    )

def get_agent_backend(
    request: Request,
    client: ElevenLabsClient = Depends(get_elevenlabs_client),
) -> AgentBackend:
    return request.app.state.agent_backend_cls(client)

def get_current_principal(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_provider: AuthProvider = Depends(get_auth_provider),
) -> Principal:
    token = credentials.credentials if credentials else None
    return auth_provider.authenticate(db, token)

def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """
    Dependency that requires the current user to be an administrator.
    """
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
