"""
Agent operations backed by ElevenLabs.

``TenantAgentBackend`` is the normal mode: every call first resolves the
local agent pointer and checks the caller's company before anything is sent
upstream. ``DemoAgentBackend`` serves demo deployments, where agents are
addressed by their ElevenLabs id and there is no local tenancy data.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.config import Settings
from app.core.exceptions import PermissionDeniedError
from app.schemas import agent as schemas_agent
from app.services import agent_service, tenancy, voice_service
from app.services.agent_config import to_agent_details, to_external_patch, to_voice_patch
from app.services.elevenlabs_client import ElevenLabsClient

logger = logging.getLogger(__name__)


def _serialize(agent) -> Dict[str, Any]:
    return schemas_agent.Agent.model_validate(agent).model_dump(by_alias=True, mode="json")


class AgentBackend(ABC):
    name: str = "base"

    def __init__(self, client: ElevenLabsClient):
        self.client = client

    @abstractmethod
    async def list_agents(self, db: Session, principal: Principal) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def get_details(self, db: Session, principal: Principal, agent_ref: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def update_details(self, db: Session, principal: Principal, agent_ref: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def update_voice(self, db: Session, principal: Principal, agent_ref: str, voice_id: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def upload_knowledge_base(
        self, db: Session, principal: Principal, agent_ref: str,
        filename: str, content: bytes, content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def delete_knowledge_base(self, db: Session, principal: Principal, agent_ref: str, file_id: str) -> Dict[str, Any]:
        ...


class TenantAgentBackend(AgentBackend):
    name = "tenant"

    async def list_agents(self, db: Session, principal: Principal) -> List[Dict[str, Any]]:
        if principal.is_admin:
            agents = agent_service.get_agents(db, limit=1000)
        elif principal.company_id is None:
            # Users waiting for a company simply have no agents yet
            agents = []
        else:
            agents = agent_service.get_agents_by_company(db, principal.company_id)
        return [_serialize(agent) for agent in agents]

    async def get_details(self, db: Session, principal: Principal, agent_ref: str) -> Dict[str, Any]:
        agent = tenancy.get_authorized_agent(db, principal, agent_ref)
        external = await self.client.get_agent(agent.elevenlabs_agent_id)
        return to_agent_details(external, agent, agent.elevenlabs_agent_id)

    async def update_details(self, db: Session, principal: Principal, agent_ref: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        agent = tenancy.get_authorized_agent(db, principal, agent_ref)
        payload = to_external_patch(fields)
        logger.info(f"Updating ElevenLabs agent {agent.elevenlabs_agent_id} fields={sorted(fields)}")
        return await self.client.update_agent(agent.elevenlabs_agent_id, payload)

    async def update_voice(self, db: Session, principal: Principal, agent_ref: str, voice_id: str) -> Dict[str, Any]:
        agent = tenancy.get_authorized_agent(db, principal, agent_ref)
        if not principal.is_admin and not voice_service.is_voice_assigned(db, agent.company_id, voice_id):
            raise PermissionDeniedError("Voice is not available for this company")

        await self.client.update_agent(agent.elevenlabs_agent_id, to_voice_patch(voice_id))
        agent = agent_service.set_agent_voice(db, agent, voice_id)
        return {"success": True, "agent": _serialize(agent)}

    async def upload_knowledge_base(
        self, db: Session, principal: Principal, agent_ref: str,
        filename: str, content: bytes, content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        agent = tenancy.get_authorized_agent(db, principal, agent_ref)
        logger.info(f"Uploading knowledge base file '{filename}' for agent {agent.elevenlabs_agent_id}")
        return await self.client.upload_knowledge_base(filename, content, content_type)

    async def delete_knowledge_base(self, db: Session, principal: Principal, agent_ref: str, file_id: str) -> Dict[str, Any]:
        agent = tenancy.get_authorized_agent(db, principal, agent_ref)
        logger.info(f"Deleting knowledge base file {file_id} for agent {agent.elevenlabs_agent_id}")
        await self.client.delete_knowledge_base(file_id)
        return {"success": True}


class DemoAgentBackend(AgentBackend):
    name = "demo"

    async def list_agents(self, db: Session, principal: Principal) -> List[Dict[str, Any]]:
        data = await self.client.list_agents()
        if isinstance(data, list):
            return data
        return data.get("agents") or []

    async def get_details(self, db: Session, principal: Principal, agent_ref: str) -> Dict[str, Any]:
        external = await self.client.get_agent(agent_ref)
        return to_agent_details(external, None, agent_ref)

    async def update_details(self, db: Session, principal: Principal, agent_ref: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.update_agent(agent_ref, to_external_patch(fields))

    async def update_voice(self, db: Session, principal: Principal, agent_ref: str, voice_id: str) -> Dict[str, Any]:
        await self.client.update_agent(agent_ref, to_voice_patch(voice_id))
        return {"success": True, "agent": {"agentId": agent_ref, "voiceId": voice_id}}

    async def upload_knowledge_base(
        self, db: Session, principal: Principal, agent_ref: str,
        filename: str, content: bytes, content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.client.upload_knowledge_base(filename, content, content_type)

    async def delete_knowledge_base(self, db: Session, principal: Principal, agent_ref: str, file_id: str) -> Dict[str, Any]:
        await self.client.delete_knowledge_base(file_id)
        return {"success": True}


def select_agent_backend(app_settings: Settings) -> Type[AgentBackend]:
    backend = DemoAgentBackend if app_settings.DEMO_MODE else TenantAgentBackend
    logger.info(f"Using {backend.name} agent backend")
    return backend
