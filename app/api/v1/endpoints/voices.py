from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.dependencies import get_current_principal, get_db, get_elevenlabs_client, require_admin
from app.schemas import voice as schemas_voice
from app.services import voice_service
from app.services.elevenlabs_client import ElevenLabsClient

router = APIRouter()
admin_router = APIRouter()


@router.get("", response_model=schemas_voice.VoiceList)
def read_voices(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    """
    Voices the caller may pick for an agent: the whole catalog for admins,
    the company's assigned voices for everyone else.
    """
    if principal.is_admin:
        return {"voices": voice_service.get_voices(db)}
    if principal.company_id is None:
        return {"voices": []}
    return {"voices": [row["voice"] for row in voice_service.get_company_voices(db, principal.company_id)]}


@admin_router.get("", response_model=schemas_voice.VoiceList, dependencies=[Depends(require_admin)])
def read_voice_catalog(db: Session = Depends(get_db)):
    return {"voices": voice_service.get_voices(db)}


@admin_router.post("/sync", response_model=schemas_voice.VoiceSyncResult, dependencies=[Depends(require_admin)])
async def sync_voice_catalog(
    db: Session = Depends(get_db),
    client: ElevenLabsClient = Depends(get_elevenlabs_client),
):
    # Fetch first so an upstream failure never touches the local catalog
    catalog = await client.list_voices()
    count = voice_service.sync_voices(db, catalog)
    return {"success": True, "count": count}
