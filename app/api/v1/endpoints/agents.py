from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.dependencies import (
    get_agent_backend,
    get_current_principal,
    get_db,
    get_elevenlabs_client,
    require_admin,
)
from app.schemas import agent as schemas_agent
from app.services import agent_service, tenancy
from app.services.agent_backend import AgentBackend
from app.services.elevenlabs_client import ElevenLabsClient

# Operations forwarded to ElevenLabs through the configured AgentBackend
router = APIRouter()
# Local agent records
local_router = APIRouter()
# Admin agent management: /admin/...
admin_router = APIRouter()


@router.get("")
async def read_agents(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    backend: AgentBackend = Depends(get_agent_backend),
):
    return {"agents": await backend.list_agents(db, principal)}


@router.get("/{agent_ref}/details")
async def read_agent_details(
    agent_ref: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    backend: AgentBackend = Depends(get_agent_backend),
):
    return await backend.get_details(db, principal, agent_ref)


@router.patch("/{agent_ref}/details")
async def update_agent_details(
    agent_ref: str,
    details: schemas_agent.AgentDetailsUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    backend: AgentBackend = Depends(get_agent_backend),
):
    """
    Partial update: only the fields present in the body are sent to ElevenLabs.
    Returns the upstream agent document.
    """
    fields = details.model_dump(exclude_unset=True)
    return await backend.update_details(db, principal, agent_ref, fields)


@router.patch("/{agent_ref}/voice")
async def update_agent_voice(
    agent_ref: str,
    voice: schemas_agent.AgentVoiceUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    backend: AgentBackend = Depends(get_agent_backend),
):
    return await backend.update_voice(db, principal, agent_ref, voice.voice_id)


@router.post("/{agent_ref}/knowledge-base/upload")
async def upload_knowledge_base_file(
    agent_ref: str,
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    backend: AgentBackend = Depends(get_agent_backend),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    content = await file.read()
    return await backend.upload_knowledge_base(
        db, principal, agent_ref, file.filename, content, file.content_type
    )


@router.delete("/{agent_ref}/knowledge-base/{file_id}")
async def delete_knowledge_base_file(
    agent_ref: str,
    file_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    backend: AgentBackend = Depends(get_agent_backend),
):
    return await backend.delete_knowledge_base(db, principal, agent_ref, file_id)


@local_router.get(
    "/unassigned/{company_id}",
    response_model=schemas_agent.AgentList,
    dependencies=[Depends(require_admin)],
)
def read_unassigned_agents(company_id: int, db: Session = Depends(get_db)):
    """
    Agents that could be given to ``company_id``: unowned ones and those of other companies.
    """
    return {"agents": agent_service.get_agents_not_in_company(db, company_id)}


@local_router.get("/{agent_ref}", response_model=schemas_agent.Agent)
def read_agent(
    agent_ref: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return tenancy.get_authorized_agent(db, principal, agent_ref)


@local_router.patch("/{agent_ref}", response_model=schemas_agent.Agent)
def update_agent(
    agent_ref: str,
    agent: schemas_agent.AgentUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    db_agent = tenancy.get_authorized_agent(db, principal, agent_ref)
    return agent_service.update_agent(db, db_agent, agent)


@admin_router.get("/agents", dependencies=[Depends(require_admin)])
async def read_external_agents(client: ElevenLabsClient = Depends(get_elevenlabs_client)):
    return await client.list_agents()


@admin_router.post(
    "/assign-agent",
    response_model=schemas_agent.Agent,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def assign_agent(agent: schemas_agent.AgentAssign, db: Session = Depends(get_db)):
    """
    Register an ElevenLabs agent locally, or update the existing pointer
    with the same external id.
    """
    return agent_service.upsert_agent(db, agent)


@admin_router.get("/phone-numbers", dependencies=[Depends(require_admin)])
async def read_phone_numbers(client: ElevenLabsClient = Depends(get_elevenlabs_client)):
    return await client.list_phone_numbers()
