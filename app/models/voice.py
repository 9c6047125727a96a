from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Table, func
from sqlalchemy.orm import relationship
from app.core.database import Base

company_voices = Table('company_voices', Base.metadata,
    Column('company_id', Integer, ForeignKey('companies.id', ondelete='CASCADE'), primary_key=True),
    Column('voice_id', String(255), ForeignKey('voices.voice_id', ondelete='CASCADE'), primary_key=True)
)

class Voice(Base):
    """Catalog entry mirroring one ElevenLabs voice."""
    __tablename__ = "voices"

    voice_id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    companies = relationship("Company", secondary=company_voices, back_populates="voices")
