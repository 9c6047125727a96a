import asyncio
import json

import httpx
import pytest

from app.core.config import Settings
from app.core.dependencies import get_elevenlabs_client
from app.core.exceptions import ExternalServiceError
from app.services.elevenlabs_client import ElevenLabsClient


def _client(handler, api_key="test-key"):
    return ElevenLabsClient(
        api_key=api_key,
        base_url="https://elevenlabs.test/v1",
        transport=httpx.MockTransport(handler),
    )


def test_requests_carry_api_key():
    seen = {}

    def handler(request):
        seen["key"] = request.headers.get("xi-api-key")
        seen["path"] = request.url.path
        return httpx.Response(200, json={"agents": []})

    assert asyncio.run(_client(handler).list_agents()) == {"agents": []}
    assert seen == {"key": "test-key", "path": "/v1/convai/agents"}


def test_update_agent_sends_patch_body():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"agent_id": "agent_abc"})

    payload = {"conversation_config": {"agent": {"first_message": "Hi"}}}
    asyncio.run(_client(handler).update_agent("agent_abc", payload))

    assert seen == {"method": "PATCH", "body": payload}


def test_list_voices_unwraps_catalog():
    def handler(request):
        return httpx.Response(200, json={"voices": [{"voice_id": "v1", "name": "Rachel"}]})

    assert asyncio.run(_client(handler).list_voices()) == [{"voice_id": "v1", "name": "Rachel"}]


def test_upload_is_multipart():
    seen = {}

    def handler(request):
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, json={"id": "doc_1"})

    result = asyncio.run(_client(handler).upload_knowledge_base("faq.txt", b"hello", "text/plain"))

    assert result == {"id": "doc_1"}
    assert seen["content_type"].startswith("multipart/form-data")


def test_empty_response_body():
    def handler(request):
        return httpx.Response(204)

    assert asyncio.run(_client(handler).delete_knowledge_base("doc_1")) == {}


def test_upstream_error_keeps_status_and_body():
    def handler(request):
        return httpx.Response(422, text="invalid prompt")

    with pytest.raises(ExternalServiceError) as exc_info:
        asyncio.run(_client(handler).get_agent("agent_abc"))

    assert exc_info.value.status_code == 422
    assert exc_info.value.message == "Failed to fetch agent details from ElevenLabs: invalid prompt"


def test_transport_error_is_502():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExternalServiceError) as exc_info:
        asyncio.run(_client(handler).list_phone_numbers())

    assert exc_info.value.status_code == 502


def test_missing_api_key():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(ExternalServiceError) as exc_info:
        asyncio.run(_client(handler, api_key="").list_agents())

    assert exc_info.value.status_code == 500


def test_dependency_builds_client_from_app_settings():
    app_settings = Settings(
        DATABASE_URL="sqlite://",
        ELEVENLABS_API_KEY="other-key",
        ELEVENLABS_API_URL="https://eu.elevenlabs.test/v1/",
        ELEVENLABS_TIMEOUT=5.0,
    )

    client = get_elevenlabs_client(app_settings)

    assert client.api_key == "other-key"
    assert client.base_url == "https://eu.elevenlabs.test/v1"
    assert client.timeout == 5.0
