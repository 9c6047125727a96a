"""
Thin async client for the ElevenLabs conversational-AI API.

Every call is a single request with no retries and no caching. Non-2xx
answers and transport failures are raised as ``ExternalServiceError`` with
the upstream text attached.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class ElevenLabsClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.ELEVENLABS_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.ELEVENLABS_API_URL).rstrip("/")
        self.timeout = settings.ELEVENLABS_TIMEOUT if timeout is None else timeout
        self._transport = transport

    async def _request(self, method: str, path: str, failure_message: str, **kwargs) -> Any:
        if not self.api_key:
            raise ExternalServiceError("Missing ElevenLabs API key", status_code=500)

        headers = {"xi-api-key": self.api_key}
        if "files" not in kwargs:
            headers["Content-Type"] = "application/json"

        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.request(method, path, headers=headers, **kwargs)
            except httpx.HTTPError as e:
                logger.error(f"[ElevenLabs] {method} {path} failed: {e}")
                raise ExternalServiceError(failure_message, upstream_text=str(e)) from e

        if response.is_error:
            logger.warning(f"[ElevenLabs] {method} {path} -> {response.status_code}: {response.text}")
            raise ExternalServiceError(failure_message, status_code=response.status_code, upstream_text=response.text)

        if not response.content:
            return {}
        return response.json()

    async def list_agents(self) -> Dict[str, Any]:
        return await self._request("GET", "/convai/agents", "Failed to fetch agents from ElevenLabs")

    async def get_agent(self, agent_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/convai/agents/{agent_id}", "Failed to fetch agent details from ElevenLabs")

    async def update_agent(self, agent_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "PATCH", f"/convai/agents/{agent_id}", "Failed to update agent details on ElevenLabs", json=payload
        )

    async def list_voices(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/voices", "Failed to fetch voices from ElevenLabs")
        return data.get("voices") or []

    async def upload_knowledge_base(self, filename: str, content: bytes, content_type: Optional[str] = None) -> Dict[str, Any]:
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        return await self._request(
            "POST", "/convai/knowledge-base", "Failed to upload file to ElevenLabs knowledge base", files=files
        )

    async def delete_knowledge_base(self, document_id: str) -> Dict[str, Any]:
        return await self._request(
            "DELETE", f"/convai/knowledge-base/{document_id}", "Failed to delete file from ElevenLabs"
        )

    async def list_phone_numbers(self) -> Any:
        return await self._request("GET", "/convai/phone-numbers", "Failed to fetch phone numbers from ElevenLabs")
