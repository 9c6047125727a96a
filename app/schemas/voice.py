from typing import List, Optional
import datetime

from app.schemas.base import CamelModel


class Voice(CamelModel):
    voice_id: str
    name: str
    category: Optional[str] = None
    created_at: Optional[datetime.datetime] = None


class CompanyVoice(CamelModel):
    company_id: int
    voice_id: str
    voice: Optional[Voice] = None


class VoiceList(CamelModel):
    voices: List[Voice]


class CompanyVoiceList(CamelModel):
    voices: List[CompanyVoice]


class VoiceSyncResult(CamelModel):
    success: bool = True
    count: int
