from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.config import Settings
from app.core.dependencies import get_current_principal, get_db, get_settings, require_admin
from app.schemas import (
    agent as schemas_agent,
    company as schemas_company,
    user as schemas_user,
    voice as schemas_voice,
)
from app.services import agent_service, company_service, tenancy, user_service, voice_service

# Company-scoped assignments: /companies/{company_id}/...
router = APIRouter()
# Company administration: /admin/companies
admin_router = APIRouter()


def _get_company_or_404(db: Session, company_id: int):
    db_company = company_service.get_company(db, company_id)
    if db_company is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return db_company


def _get_readable_company(db: Session, principal: Principal, company_id: int):
    tenancy.ensure_company_access(principal, company_id)
    return _get_company_or_404(db, company_id)


@router.get("/{company_id}/voices", response_model=schemas_voice.CompanyVoiceList)
def read_company_voices(
    company_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    _get_readable_company(db, principal, company_id)
    return {"voices": voice_service.get_company_voices(db, company_id)}


@router.post(
    "/{company_id}/voices/{voice_id}",
    response_model=schemas_voice.CompanyVoice,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def assign_voice(company_id: int, voice_id: str, db: Session = Depends(get_db)):
    return voice_service.assign_voice_to_company(db, company_id, voice_id)


@router.delete("/{company_id}/voices/{voice_id}", dependencies=[Depends(require_admin)])
def remove_voice(company_id: int, voice_id: str, db: Session = Depends(get_db)):
    voice_service.remove_voice_from_company(db, company_id, voice_id)
    return {"success": True}


@router.get("/{company_id}/users", response_model=schemas_user.UserList)
def read_company_users(
    company_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    _get_readable_company(db, principal, company_id)
    return {"users": user_service.get_users_by_company(db, company_id)}


@router.post(
    "/{company_id}/users/{user_id}",
    response_model=schemas_user.User,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def assign_user(company_id: int, user_id: int, db: Session = Depends(get_db)):
    _get_company_or_404(db, company_id)
    return user_service.assign_user_to_company(db, company_id, user_id)


@router.delete(
    "/{company_id}/users/{user_id}",
    response_model=schemas_user.User,
    dependencies=[Depends(require_admin)],
)
def remove_user(company_id: int, user_id: int, db: Session = Depends(get_db)):
    return user_service.remove_user_from_company(db, company_id, user_id)


@router.get("/{company_id}/agents", response_model=schemas_agent.AgentList)
def read_company_agents(
    company_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    _get_readable_company(db, principal, company_id)
    return {"agents": agent_service.get_agents_by_company(db, company_id)}


@router.post(
    "/{company_id}/agents/{agent_ref}",
    response_model=schemas_agent.Agent,
    status_code=status.HTTP_201_CREATED,
)
def assign_agent(
    company_id: int,
    agent_ref: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    db_agent = tenancy.get_authorized_agent(db, principal, agent_ref)
    return agent_service.assign_agent_to_company(db, company_id, db_agent)


@router.delete("/{company_id}/agents/{agent_ref}", response_model=schemas_agent.Agent)
def remove_agent(
    company_id: int,
    agent_ref: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
    app_settings: Settings = Depends(get_settings),
):
    """
    Take an agent away from a company according to ``AGENT_REMOVAL_POLICY``.
    Returns the agent as it ended up (unassigned, or owned by its new company).
    """
    db_agent = tenancy.get_authorized_agent(db, principal, agent_ref)
    return agent_service.remove_agent_from_company(
        db, company_id, db_agent, policy=app_settings.AGENT_REMOVAL_POLICY
    )


@admin_router.get("", response_model=schemas_company.CompanyList, dependencies=[Depends(require_admin)])
def read_companies(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return {"companies": company_service.get_companies(db, skip=skip, limit=limit)}


@admin_router.post(
    "",
    response_model=schemas_company.CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_company(company: schemas_company.CompanyCreate, db: Session = Depends(get_db)):
    return {"company": company_service.create_company(db, company)}


@admin_router.get(
    "/{company_id}",
    response_model=schemas_company.CompanyResponse,
    dependencies=[Depends(require_admin)],
)
def read_company(company_id: int, db: Session = Depends(get_db)):
    return {"company": _get_company_or_404(db, company_id)}


@admin_router.patch(
    "/{company_id}",
    response_model=schemas_company.CompanyResponse,
    dependencies=[Depends(require_admin)],
)
def update_company(company_id: int, company: schemas_company.CompanyUpdate, db: Session = Depends(get_db)):
    if not company.model_dump(exclude_unset=True, exclude_none=True):
        raise HTTPException(status_code=400, detail="No fields to update")
    db_company = company_service.update_company(db, company_id, company)
    if db_company is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return {"company": db_company}


@admin_router.delete("/{company_id}", dependencies=[Depends(require_admin)])
def delete_company(company_id: int, db: Session = Depends(get_db)):
    if company_service.delete_company(db, company_id) is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return {"success": True}
