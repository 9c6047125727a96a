import logging

from sqlalchemy.orm import Session

from app.models import agent as models_agent, company as models_company, user as models_user
from app.schemas import company as schemas_company

logger = logging.getLogger(__name__)


def get_company(db: Session, company_id: int):
    return db.query(models_company.Company).filter(models_company.Company.id == company_id).first()

def get_companies(db: Session, skip: int = 0, limit: int = 100):
    return (
        db.query(models_company.Company)
        .order_by(models_company.Company.created_at.desc(), models_company.Company.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

def create_company(db: Session, company: schemas_company.CompanyCreate):
    db_company = models_company.Company(name=company.name, active=True)
    db.add(db_company)
    db.commit()
    db.refresh(db_company)
    logger.info(f"Created company '{db_company.name}' (id={db_company.id})")
    return db_company

def update_company(db: Session, company_id: int, company: schemas_company.CompanyUpdate):
    db_company = get_company(db, company_id)
    if db_company:
        update_data = company.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in update_data.items():
            setattr(db_company, key, value)
        db.commit()
        db.refresh(db_company)
    return db_company

def delete_company(db: Session, company_id: int):
    """Delete a company, detaching its users and agents.

    The company_voices rows go with the company through the ORM relationship.
    """
    db_company = get_company(db, company_id)
    if not db_company:
        return None

    try:
        db.query(models_user.User).filter(models_user.User.company_id == company_id).update(
            {models_user.User.company_id: None}
        )
        db.query(models_agent.Agent).filter(models_agent.Agent.company_id == company_id).update(
            {models_agent.Agent.company_id: None}
        )
        db.delete(db_company)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to delete company {company_id}")
        raise
    logger.info(f"Deleted company {company_id}")
    return db_company
