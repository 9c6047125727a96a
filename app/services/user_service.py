import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.security import get_password_hash
from app.models import user as models_user
from app.schemas import user as schemas_user

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int):
    return db.query(models_user.User).filter(models_user.User.id == user_id).first()

def get_user_by_username(db: Session, username: str):
    return db.query(models_user.User).filter(models_user.User.username == username).first()

def get_user_by_email(db: Session, email: str):
    return db.query(models_user.User).filter(models_user.User.email == email).first()

def get_users(db: Session, skip: int = 0, limit: int = 100):
    return db.query(models_user.User).order_by(models_user.User.id).offset(skip).limit(limit).all()

def get_users_by_company(db: Session, company_id: int):
    return db.query(models_user.User).filter(models_user.User.company_id == company_id).order_by(models_user.User.id).all()


def _ensure_unique(db: Session, username: Optional[str], email: Optional[str], exclude_id: Optional[int] = None):
    if username:
        existing = get_user_by_username(db, username)
        if existing and existing.id != exclude_id:
            raise ConflictError("Username already exists")
    if email:
        existing = get_user_by_email(db, email)
        if existing and existing.id != exclude_id:
            raise ConflictError("Email already exists")


def _commit(db: Session):
    """Commit, reporting a unique-constraint race as a conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"User write rejected by the database: {e.orig}")
        raise ConflictError("Username or email already exists") from e


def create_user(
    db: Session,
    user: schemas_user.UserCreate,
):
    _ensure_unique(db, user.username, user.email)

    db_user = models_user.User(
        username=user.username,
        email=user.email,
        hashed_password=get_password_hash(user.password),
        role=user.role,
        company_id=user.company_id or None,
    )
    db.add(db_user)
    _commit(db)
    db.refresh(db_user)
    logger.info(f"Created user {db_user.username} (id={db_user.id}, role={db_user.role})")
    return db_user

def update_user(db: Session, db_obj: models_user.User, obj_in: schemas_user.UserUpdate):
    if isinstance(obj_in, dict):
        update_data = dict(obj_in)
    else:
        update_data = obj_in.model_dump(exclude_unset=True)
    # an explicit null (or blank) email clears it, other nulls mean "unchanged"
    update_data = {key: value for key, value in update_data.items() if value is not None or key == "email"}

    if not update_data:
        raise ValidationError("No fields to update")

    _ensure_unique(db, update_data.get("username"), update_data.get("email"), exclude_id=db_obj.id)

    if "password" in update_data:
        update_data["hashed_password"] = get_password_hash(update_data.pop("password"))

    for field, value in update_data.items():
        setattr(db_obj, field, value)

    db.add(db_obj)
    _commit(db)
    db.refresh(db_obj)
    return db_obj

def delete_user(db: Session, user_id: int):
    db_user = get_user(db, user_id)
    if db_user:
        db.delete(db_user)
        db.commit()
    return db_user


def assign_user_to_company(db: Session, company_id: int, user_id: int):
    """Attach a user to a company.

    A user belongs to at most one company, so a user who is already placed
    somewhere else must be removed from that company first.
    """
    db_user = get_user(db, user_id)
    if not db_user:
        raise NotFoundError("User not found")

    if db_user.company_id == company_id:
        raise ConflictError("User is already assigned to this company")
    # 0 is treated like NULL for rows written by older deployments
    if db_user.company_id:
        raise ConflictError("User is already assigned to another company")

    db_user.company_id = company_id
    db.commit()
    db.refresh(db_user)
    logger.info(f"Assigned user {user_id} to company {company_id}")
    return db_user

def remove_user_from_company(db: Session, company_id: int, user_id: int):
    db_user = get_user(db, user_id)
    if not db_user:
        raise NotFoundError("User not found")
    if db_user.company_id != company_id:
        raise ValidationError("User does not belong to this company")

    db_user.company_id = None
    db.commit()
    db.refresh(db_user)
    logger.info(f"Removed user {user_id} from company {company_id}")
    return db_user
