import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import agent as models_agent, company as models_company
from app.schemas import agent as schemas_agent
from app.services import company_service

logger = logging.getLogger(__name__)

REMOVAL_UNASSIGN = "unassign"
REMOVAL_REASSIGN = "reassign"


def get_agent(db: Session, agent_id: int):
    return db.query(models_agent.Agent).filter(models_agent.Agent.id == agent_id).first()

def get_agent_by_elevenlabs_id(db: Session, elevenlabs_agent_id: str):
    return db.query(models_agent.Agent).filter(models_agent.Agent.elevenlabs_agent_id == elevenlabs_agent_id).first()

def get_agents(db: Session, skip: int = 0, limit: int = 100) -> List[models_agent.Agent]:
    return db.query(models_agent.Agent).order_by(models_agent.Agent.id).offset(skip).limit(limit).all()

def get_agents_by_company(db: Session, company_id: int) -> List[models_agent.Agent]:
    return db.query(models_agent.Agent).filter(models_agent.Agent.company_id == company_id).order_by(models_agent.Agent.id).all()

def get_agents_not_in_company(db: Session, company_id: int) -> List[models_agent.Agent]:
    return (
        db.query(models_agent.Agent)
        .filter(or_(models_agent.Agent.company_id.is_(None), models_agent.Agent.company_id != company_id))
        .order_by(models_agent.Agent.id)
        .all()
    )

def upsert_agent(db: Session, agent: schemas_agent.AgentAssign):
    """Create or update the local pointer for an ElevenLabs agent, keyed by its external id."""
    if agent.company_id and not company_service.get_company(db, agent.company_id):
        raise NotFoundError("Company not found")

    db_agent = get_agent_by_elevenlabs_id(db, agent.elevenlabs_agent_id)
    if db_agent:
        db_agent.name = agent.name
        db_agent.company_id = agent.company_id or None
        if agent.created_by:
            db_agent.created_by = agent.created_by
    else:
        db_agent = models_agent.Agent(
            name=agent.name,
            elevenlabs_agent_id=agent.elevenlabs_agent_id,
            company_id=agent.company_id or None,
            created_by=agent.created_by,
        )
        db.add(db_agent)
    db.commit()
    db.refresh(db_agent)
    logger.info(f"Upserted agent {db_agent.elevenlabs_agent_id} (company={db_agent.company_id})")
    return db_agent

def update_agent(db: Session, db_agent: models_agent.Agent, agent: schemas_agent.AgentUpdate):
    update_data = agent.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise ValidationError("No fields to update")
    for key, value in update_data.items():
        setattr(db_agent, key, value)
    db.commit()
    db.refresh(db_agent)
    return db_agent

def set_agent_voice(db: Session, db_agent: models_agent.Agent, voice_id: str):
    db_agent.voice_id = voice_id
    db.commit()
    db.refresh(db_agent)
    return db_agent

def assign_agent_to_company(db: Session, company_id: int, db_agent: models_agent.Agent):
    if not company_service.get_company(db, company_id):
        raise NotFoundError("Company not found")
    if db_agent.company_id == company_id:
        raise ConflictError("Agent is already assigned to this company")

    db_agent.company_id = company_id
    db.commit()
    db.refresh(db_agent)
    logger.info(f"Assigned agent {db_agent.id} to company {company_id}")
    return db_agent

def remove_agent_from_company(
    db: Session,
    company_id: int,
    db_agent: models_agent.Agent,
    policy: str = REMOVAL_UNASSIGN,
):
    """Take an agent away from a company.

    With the ``unassign`` policy the agent simply loses its company. The
    ``reassign`` policy keeps every agent owned by some company and moves it
    to the oldest other company instead, failing when there is none.
    """
    if db_agent.company_id != company_id:
        raise ValidationError("Agent does not belong to this company")

    if policy == REMOVAL_REASSIGN:
        other = (
            db.query(models_company.Company)
            .filter(models_company.Company.id != company_id)
            .order_by(models_company.Company.id)
            .first()
        )
        if other is None:
            raise ConflictError("No other company available to reassign this agent")
        db_agent.company_id = other.id
        logger.info(f"Reassigned agent {db_agent.id} from company {company_id} to company {other.id}")
    else:
        db_agent.company_id = None
        logger.info(f"Unassigned agent {db_agent.id} from company {company_id}")

    db.commit()
    db.refresh(db_agent)
    return db_agent
