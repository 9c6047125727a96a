from app.models.voice import Voice, company_voices
from app.models.company import Company
from app.models.user import User
from app.models.agent import Agent
