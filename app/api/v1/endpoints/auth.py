from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import AuthProvider, Principal
from app.core.dependencies import get_auth_provider, get_current_principal, get_db
from app.schemas import token as schemas_token, user as schemas_user
from app.services import user_service

router = APIRouter()
account_router = APIRouter()


@router.post("/login", response_model=schemas_token.LoginResponse)
def login(
    credentials: schemas_token.LoginRequest,
    db: Session = Depends(get_db),
    auth_provider: AuthProvider = Depends(get_auth_provider),
):
    return auth_provider.login(db, credentials.username, credentials.password)


@account_router.post("/register", response_model=schemas_user.User, status_code=status.HTTP_201_CREATED)
def register(user: schemas_user.UserRegister, db: Session = Depends(get_db)):
    """
    Self-service signup. New accounts always get the plain user role and no company.
    """
    return user_service.create_user(
        db,
        schemas_user.UserCreate(username=user.username, email=user.email, password=user.password),
    )


@account_router.get("/me", response_model=schemas_user.User)
def read_me(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    db_user = user_service.get_user(db, principal.user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user
