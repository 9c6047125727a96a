"""
Translation between the flat agent view used by the dashboard and the
nested ``conversation_config`` document stored by ElevenLabs.
"""
from typing import Any, Dict, Optional

from app.models.agent import Agent
from app.schemas import agent as schemas_agent

# flat field -> path inside conversation_config.agent
FIELD_PATHS = {
    "system_prompt": ("prompt", "prompt"),
    "knowledge_base": ("prompt", "knowledge_base"),
    "tools": ("prompt", "tools"),
    "first_message": ("first_message",),
}


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def to_agent_details(external: Dict[str, Any], agent: Optional[Agent] = None, agent_ref: Optional[str] = None) -> Dict[str, Any]:
    """Flatten an ElevenLabs agent document and merge the local tenancy metadata into it."""
    details: Dict[str, Any] = {}
    if agent is not None:
        details.update(schemas_agent.Agent.model_validate(agent).model_dump(by_alias=True, mode="json"))

    if not isinstance(external, dict):
        external = {}
    agent_config = _dig(external, "conversation_config", "agent")
    details.update({
        "name": external.get("name") or details.get("name"),
        "systemPrompt": _dig(agent_config, "prompt", "prompt"),
        "firstMessage": _dig(agent_config, "first_message"),
        "knowledgeBase": _dig(agent_config, "prompt", "knowledge_base"),
        "tools": _dig(agent_config, "prompt", "tools"),
        "agentId": external.get("agent_id") or agent_ref,
    })
    return details


def to_external_patch(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Build a PATCH body holding only the fields that were supplied.

    Keys missing from ``fields`` are left out entirely so ElevenLabs keeps its
    current values for them.
    """
    agent: Dict[str, Any] = {}
    for field, path in FIELD_PATHS.items():
        if field not in fields:
            continue
        target = agent
        for key in path[:-1]:
            target = target.setdefault(key, {})
        target[path[-1]] = fields[field]
    return {"conversation_config": {"agent": agent}}


def to_voice_patch(voice_id: str) -> Dict[str, Any]:
    return {"conversation_config": {"tts": {"voice_id": voice_id}}}
