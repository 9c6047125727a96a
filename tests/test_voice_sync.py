import pytest
from unittest.mock import patch

from app.core.exceptions import ExternalServiceError
from app.models.voice import Voice
from app.services import voice_service
from tests.factories import create_company, create_voice

CATALOG = [
    {"voice_id": "v1", "name": "Rachel", "labels": {"category": "premade"}},
    {"voice_id": "v3", "name": "Clone", "category": "cloned"},
    {"voice_id": "v3", "name": "Clone duplicate", "category": "cloned"},
    {"name": "no id"},
]


def _catalog(db):
    db.expire_all()
    return {voice.voice_id: (voice.name, voice.category) for voice in db.query(Voice).all()}


def test_sync_replaces_catalog_exactly(db):
    create_voice(db, "v1", name="Old name", category=None)
    create_voice(db, "v2", name="Retired")

    count = voice_service.sync_voices(db, CATALOG)

    assert count == 2
    assert _catalog(db) == {
        "v1": ("Rachel", "premade"),
        "v3": ("Clone duplicate", "cloned"),
    }


def test_sync_drops_links_of_removed_voices(db):
    company = create_company(db)
    create_voice(db, "v1")
    create_voice(db, "v2")
    voice_service.assign_voice_to_company(db, company.id, "v1")
    voice_service.assign_voice_to_company(db, company.id, "v2")

    voice_service.sync_voices(db, [{"voice_id": "v1", "name": "Rachel"}])

    assert [row["voice_id"] for row in voice_service.get_company_voices(db, company.id)] == ["v1"]


def test_sync_failure_keeps_previous_catalog(db):
    create_voice(db, "v1", name="Rachel")
    create_voice(db, "v2", name="Adam")

    with patch.object(db, "commit", side_effect=RuntimeError("disk full")):
        with pytest.raises(RuntimeError):
            voice_service.sync_voices(db, [{"voice_id": "v9", "name": "New"}])

    assert _catalog(db) == {"v1": ("Rachel", "premade"), "v2": ("Adam", "premade")}


def test_sync_endpoint(client, db, admin_headers, fake_client):
    create_voice(db, "stale")
    fake_client.list_voices.return_value = CATALOG

    response = client.post("/api/admin/voices/sync", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "count": 2}
    assert set(_catalog(db)) == {"v1", "v3"}

    listing = client.get("/api/admin/voices", headers=admin_headers)
    assert [voice["voiceId"] for voice in listing.json()["voices"]] == ["v1", "v3"]


def test_sync_endpoint_upstream_failure_leaves_catalog(client, db, admin_headers, fake_client):
    create_voice(db, "v1")
    fake_client.list_voices.side_effect = ExternalServiceError(
        "Failed to fetch voices from ElevenLabs", status_code=401, upstream_text="bad key"
    )

    response = client.post("/api/admin/voices/sync", headers=admin_headers)

    assert response.status_code == 401
    assert response.json() == {"message": "Failed to fetch voices from ElevenLabs: bad key"}
    assert set(_catalog(db)) == {"v1"}
