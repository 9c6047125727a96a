"""
Tenant scoping for agents and company-owned resources.

Agents are addressed in URLs either by their ElevenLabs id or by the local
numeric id. ``resolve_agent`` tries the external id first and reports which
key matched. Callers outside the owning company get a "not found" answer so
that other tenants cannot probe for existence.
"""
from dataclasses import dataclass
from typing import Literal, Optional

from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.exceptions import NotFoundError
from app.models.agent import Agent
from app.services import agent_service

AGENT_NOT_FOUND = "Agent not found"


@dataclass(frozen=True)
class AgentResolution:
    kind: Literal["external", "local"]
    agent: Agent


def resolve_agent(db: Session, ref: str) -> Optional[AgentResolution]:
    agent = agent_service.get_agent_by_elevenlabs_id(db, ref)
    if agent is not None:
        return AgentResolution(kind="external", agent=agent)
    if ref.isdigit():
        agent = agent_service.get_agent(db, int(ref))
        if agent is not None:
            return AgentResolution(kind="local", agent=agent)
    return None


def can_access_company(principal: Principal, company_id: Optional[int]) -> bool:
    if principal.is_admin:
        return True
    return company_id is not None and principal.company_id is not None and company_id == principal.company_id


def authorize_agent(principal: Principal, resolution: Optional[AgentResolution]) -> Agent:
    if resolution is None or not can_access_company(principal, resolution.agent.company_id):
        raise NotFoundError(AGENT_NOT_FOUND)
    return resolution.agent


def get_authorized_agent(db: Session, principal: Principal, ref: str) -> Agent:
    return authorize_agent(principal, resolve_agent(db, ref))


def ensure_company_access(principal: Principal, company_id: int) -> None:
    if not can_access_company(principal, company_id):
        raise NotFoundError("Company not found")
