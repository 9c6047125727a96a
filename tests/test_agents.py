from app.core.exceptions import ExternalServiceError
from app.services import voice_service
from tests.factories import auth_headers, create_agent, create_company, create_user, create_voice

EXTERNAL_AGENT = {
    "agent_id": "agent_abc",
    "name": "Support bot",
    "conversation_config": {
        "agent": {
            "first_message": "Hi there",
            "prompt": {
                "prompt": "You are helpful",
                "knowledge_base": [{"id": "doc_1", "name": "faq.txt"}],
                "tools": [{"name": "lookup"}],
            },
        }
    },
}


def test_user_without_company_gets_empty_agent_list(client, db):
    create_agent(db, company_id=create_company(db).id)
    user = create_user(db)

    response = client.get("/api/agents", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json() == {"agents": []}


def test_user_sees_only_own_company_agents(client, db):
    acme = create_company(db, "Acme")
    globex = create_company(db, "Globex")
    create_agent(db, "agent_acme", company_id=acme.id)
    create_agent(db, "agent_globex", company_id=globex.id)
    user = create_user(db, company_id=acme.id)

    response = client.get("/api/agents", headers=auth_headers(user))

    agents = response.json()["agents"]
    assert [agent["elevenlabsAgentId"] for agent in agents] == ["agent_acme"]


def test_admin_sees_all_agents(client, db, admin_headers):
    create_agent(db, "agent_one", company_id=create_company(db).id)
    create_agent(db, "agent_two")

    response = client.get("/api/agents", headers=admin_headers)

    assert len(response.json()["agents"]) == 2


def test_foreign_agent_is_not_found_not_forbidden(client, db, fake_client):
    acme = create_company(db, "Acme")
    globex = create_company(db, "Globex")
    agent = create_agent(db, "agent_globex", company_id=globex.id)
    user = create_user(db, company_id=acme.id)
    headers = auth_headers(user)

    for path in ("/api/agents/agent_globex", f"/api/agents/{agent.id}", "/api/agents/agent_globex/details"):
        response = client.get(path, headers=headers)
        assert response.status_code == 404
        assert response.json() == {"message": "Agent not found"}
    fake_client.get_agent.assert_not_called()


def test_agent_can_be_addressed_by_local_id(client, db):
    company = create_company(db)
    agent = create_agent(db, "agent_abc", name="Support", company_id=company.id)
    user = create_user(db, company_id=company.id)

    response = client.get(f"/api/agents/{agent.id}", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["elevenlabsAgentId"] == "agent_abc"


def test_rename_agent(client, db):
    company = create_company(db)
    create_agent(db, "agent_abc", company_id=company.id)
    user = create_user(db, company_id=company.id)

    response = client.patch("/api/agents/agent_abc", json={"name": "Sales"}, headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["name"] == "Sales"


def test_get_details_merges_local_and_external(client, db, fake_client):
    company = create_company(db)
    create_agent(db, "agent_abc", name="Local name", company_id=company.id)
    user = create_user(db, company_id=company.id)
    fake_client.get_agent.return_value = EXTERNAL_AGENT

    response = client.get("/api/agents/agent_abc/details", headers=auth_headers(user))

    assert response.status_code == 200
    body = response.json()
    assert body["companyId"] == company.id
    assert body["name"] == "Support bot"
    assert body["systemPrompt"] == "You are helpful"
    assert body["firstMessage"] == "Hi there"
    assert body["knowledgeBase"] == [{"id": "doc_1", "name": "faq.txt"}]
    assert body["tools"] == [{"name": "lookup"}]
    assert body["agentId"] == "agent_abc"
    fake_client.get_agent.assert_awaited_once_with("agent_abc")


def test_partial_details_patch_only_sends_present_fields(client, db, fake_client, admin_headers):
    create_agent(db, "agent_abc")

    response = client.patch(
        "/api/agents/agent_abc/details",
        json={"firstMessage": "Welcome!"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    fake_client.update_agent.assert_awaited_once_with(
        "agent_abc", {"conversation_config": {"agent": {"first_message": "Welcome!"}}}
    )


def test_details_patch_by_local_id_uses_external_id(client, db, fake_client, admin_headers):
    agent = create_agent(db, "agent_abc")

    client.patch(
        f"/api/agents/{agent.id}/details",
        json={"systemPrompt": "Be brief", "tools": []},
        headers=admin_headers,
    )

    fake_client.update_agent.assert_awaited_once_with(
        "agent_abc", {"conversation_config": {"agent": {"prompt": {"prompt": "Be brief", "tools": []}}}}
    )


def test_upstream_error_keeps_status_and_text(client, db, fake_client, admin_headers):
    create_agent(db, "agent_abc")
    fake_client.get_agent.side_effect = ExternalServiceError(
        "Failed to fetch agent details from ElevenLabs", status_code=404, upstream_text="agent missing"
    )

    response = client.get("/api/agents/agent_abc/details", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"message": "Failed to fetch agent details from ElevenLabs: agent missing"}


def test_update_voice_requires_company_voice_for_users(client, db, fake_client):
    company = create_company(db)
    create_agent(db, "agent_abc", company_id=company.id)
    create_voice(db, "v1")
    user = create_user(db, company_id=company.id)
    headers = auth_headers(user)

    response = client.patch("/api/agents/agent_abc/voice", json={"voiceId": "v1"}, headers=headers)
    assert response.status_code == 403
    fake_client.update_agent.assert_not_called()

    voice_service.assign_voice_to_company(db, company.id, "v1")
    response = client.patch("/api/agents/agent_abc/voice", json={"voiceId": "v1"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["agent"]["voiceId"] == "v1"
    fake_client.update_agent.assert_awaited_once_with(
        "agent_abc", {"conversation_config": {"tts": {"voice_id": "v1"}}}
    )


def test_knowledge_base_upload_requires_file(client, db, admin_headers, fake_client):
    create_agent(db, "agent_abc")

    response = client.post("/api/agents/agent_abc/knowledge-base/upload", headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"message": "No file uploaded"}
    fake_client.upload_knowledge_base.assert_not_called()


def test_knowledge_base_upload_and_delete(client, db, admin_headers, fake_client):
    create_agent(db, "agent_abc")

    response = client.post(
        "/api/agents/agent_abc/knowledge-base/upload",
        files={"file": ("faq.txt", b"Q: hours? A: 9-5", "text/plain")},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"id": "doc_1", "name": "faq.txt"}
    fake_client.upload_knowledge_base.assert_awaited_once_with("faq.txt", b"Q: hours? A: 9-5", "text/plain")

    response = client.delete("/api/agents/agent_abc/knowledge-base/doc_1", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}
    fake_client.delete_knowledge_base.assert_awaited_once_with("doc_1")


def test_unassigned_agents_for_company(client, db, admin_headers):
    acme = create_company(db, "Acme")
    globex = create_company(db, "Globex")
    create_agent(db, "agent_acme", company_id=acme.id)
    create_agent(db, "agent_globex", company_id=globex.id)
    create_agent(db, "agent_free")

    response = client.get(f"/api/agents/unassigned/{acme.id}", headers=admin_headers)

    assert response.status_code == 200
    ids = sorted(agent["elevenlabsAgentId"] for agent in response.json()["agents"])
    assert ids == ["agent_free", "agent_globex"]
