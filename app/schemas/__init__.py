from app.schemas.agent import Agent, AgentAssign, AgentDetailsUpdate, AgentList, AgentUpdate, AgentVoiceUpdate
from app.schemas.company import Company, CompanyCreate, CompanyList, CompanyResponse, CompanyUpdate
from app.schemas.token import LoginRequest, LoginResponse
from app.schemas.user import User, UserCreate, UserList, UserRegister, UserUpdate
from app.schemas.voice import CompanyVoice, CompanyVoiceList, Voice, VoiceList, VoiceSyncResult
