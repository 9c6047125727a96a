import logging

from sqlalchemy.orm import Session

from app.core.config import Settings, settings
from app.core.database import SessionLocal
from app.models.user import ROLE_ADMIN
from app.schemas import user as schemas_user
from app.services import user_service

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session, app_settings: Settings = settings):
    """Create the configured admin account unless its username or email is already taken."""
    existing = user_service.get_user_by_username(db, app_settings.ADMIN_USERNAME)
    if existing is None and app_settings.ADMIN_EMAIL:
        existing = user_service.get_user_by_email(db, app_settings.ADMIN_EMAIL)
    if existing is not None:
        logger.info(f"[Bootstrap] Admin user already exists ({existing.username})")
        return existing

    admin = user_service.create_user(
        db,
        schemas_user.UserCreate(
            username=app_settings.ADMIN_USERNAME,
            email=app_settings.ADMIN_EMAIL or None,
            password=app_settings.ADMIN_PASSWORD,
            role=ROLE_ADMIN,
        ),
    )
    logger.info(f"[Bootstrap] Created default admin user {admin.username}")
    return admin


def create_initial_data(app_settings: Settings = settings):
    if app_settings.DEMO_MODE:
        logger.info("[Bootstrap] Demo mode, skipping default admin")
        return

    db = SessionLocal()
    try:
        ensure_default_admin(db, app_settings)
    finally:
        db.close()
