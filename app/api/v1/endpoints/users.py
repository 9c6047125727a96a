from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.dependencies import get_db, require_admin
from app.schemas import company as schemas_company, user as schemas_user
from app.services import company_service, user_service

router = APIRouter()


def _get_user_or_404(db: Session, user_id: int):
    db_user = user_service.get_user(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user


@router.get("/users", response_model=schemas_user.UserList, dependencies=[Depends(require_admin)])
def read_users(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return {"users": user_service.get_users(db, skip=skip, limit=limit)}


@router.post(
    "/users",
    response_model=schemas_user.User,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_user(user: schemas_user.UserCreate, db: Session = Depends(get_db)):
    if user.company_id and not company_service.get_company(db, user.company_id):
        raise HTTPException(status_code=404, detail="Company not found")
    return user_service.create_user(db, user)


@router.get("/users/{user_id}", response_model=schemas_user.User, dependencies=[Depends(require_admin)])
def read_user(user_id: int, db: Session = Depends(get_db)):
    return _get_user_or_404(db, user_id)


@router.patch("/users/{user_id}", response_model=schemas_user.User, dependencies=[Depends(require_admin)])
def update_user(user_id: int, user_update: schemas_user.UserUpdate, db: Session = Depends(get_db)):
    db_user = _get_user_or_404(db, user_id)
    return user_service.update_user(db, db_obj=db_user, obj_in=user_update)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    if user_id == principal.user_id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    if user_service.delete_user(db, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True}


@router.get(
    "/user-company/{user_id}",
    response_model=schemas_company.CompanyResponse,
    dependencies=[Depends(require_admin)],
)
def read_user_company(user_id: int, db: Session = Depends(get_db)):
    """
    The company a user belongs to, or ``null`` while the user is unassigned.
    """
    db_user = _get_user_or_404(db, user_id)
    company = company_service.get_company(db, db_user.company_id) if db_user.company_id else None
    return {"company": company}
