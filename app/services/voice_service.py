import logging
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.models.voice import Voice, company_voices
from app.services import company_service

logger = logging.getLogger(__name__)


def get_voices(db: Session) -> List[Voice]:
    return db.query(Voice).order_by(Voice.voice_id).all()

def get_voice(db: Session, voice_id: str):
    return db.query(Voice).filter(Voice.voice_id == voice_id).first()

def get_company_voices(db: Session, company_id: int) -> List[Dict[str, Any]]:
    """Voices a company may use, each with its catalog details."""
    rows = (
        db.query(Voice)
        .join(company_voices, company_voices.c.voice_id == Voice.voice_id)
        .filter(company_voices.c.company_id == company_id)
        .order_by(Voice.voice_id)
        .all()
    )
    return [{"company_id": company_id, "voice_id": voice.voice_id, "voice": voice} for voice in rows]

def is_voice_assigned(db: Session, company_id: int, voice_id: str) -> bool:
    row = db.execute(
        company_voices.select().where(
            company_voices.c.company_id == company_id,
            company_voices.c.voice_id == voice_id,
        )
    ).first()
    return row is not None

def assign_voice_to_company(db: Session, company_id: int, voice_id: str) -> Dict[str, Any]:
    company = company_service.get_company(db, company_id)
    if not company:
        raise NotFoundError("Company not found")
    voice = get_voice(db, voice_id)
    if not voice:
        raise NotFoundError("Voice not found")
    if is_voice_assigned(db, company_id, voice_id):
        raise ConflictError("Voice is already assigned to this company")

    db.execute(company_voices.insert().values(company_id=company_id, voice_id=voice_id))
    db.commit()
    logger.info(f"Assigned voice {voice_id} to company {company_id}")
    return {"company_id": company_id, "voice_id": voice_id, "voice": voice}

def remove_voice_from_company(db: Session, company_id: int, voice_id: str) -> None:
    result = db.execute(
        company_voices.delete().where(
            company_voices.c.company_id == company_id,
            company_voices.c.voice_id == voice_id,
        )
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Voice not found for this company")
    db.commit()
    logger.info(f"Removed voice {voice_id} from company {company_id}")


def _catalog_entries(catalog: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    entries: Dict[str, Dict[str, Any]] = {}
    for item in catalog:
        voice_id = item.get("voice_id")
        if not voice_id:
            logger.warning(f"[VoiceSync] Skipping catalog entry without voice_id: {item!r}")
            continue
        labels = item.get("labels") or {}
        entries[voice_id] = {
            "name": item.get("name") or voice_id,
            "category": labels.get("category") or item.get("category"),
        }
    return entries

def sync_voices(db: Session, catalog: Iterable[Dict[str, Any]]) -> int:
    """Make the local voice table match ``catalog`` exactly.

    Runs as one transaction: catalog voices are upserted, local voices
    missing from the catalog are deleted along with their company links.
    Readers never see an empty catalog and a failure leaves the previous
    catalog untouched.
    """
    entries = _catalog_entries(catalog)
    try:
        existing = {voice.voice_id: voice for voice in db.query(Voice).all()}

        for voice_id, data in entries.items():
            voice = existing.get(voice_id)
            if voice is None:
                db.add(Voice(voice_id=voice_id, name=data["name"], category=data["category"]))
            else:
                voice.name = data["name"]
                voice.category = data["category"]

        stale = [voice_id for voice_id in existing if voice_id not in entries]
        # Deleting through the ORM also clears the company_voices rows
        for voice_id in stale:
            db.delete(existing[voice_id])

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("[VoiceSync] Sync failed, catalog left unchanged")
        raise

    logger.info(f"[VoiceSync] Synced {len(entries)} voices ({len(stale)} removed)")
    return len(entries)
