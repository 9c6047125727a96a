from typing import Any, List, Optional
import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class Agent(CamelModel):
    id: int
    name: str
    elevenlabs_agent_id: str
    company_id: Optional[int] = None
    created_by: Optional[str] = None
    voice_id: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class AgentUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class AgentAssign(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    elevenlabs_agent_id: str = Field(..., min_length=1)
    company_id: Optional[int] = None
    created_by: Optional[str] = None


class AgentDetailsUpdate(CamelModel):
    """Flat view of the editable ElevenLabs fields.

    Only the fields present in the request body are forwarded upstream.
    """
    system_prompt: Optional[str] = None
    first_message: Optional[str] = None
    knowledge_base: Optional[List[Any]] = None
    tools: Optional[List[Any]] = None


class AgentVoiceUpdate(CamelModel):
    voice_id: str = Field(..., min_length=1)


class AgentList(CamelModel):
    agents: List[Agent]
