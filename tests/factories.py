from app.core.auth import JWTAuthProvider, Principal
from app.models.user import ROLE_USER
from app.schemas import agent as schemas_agent, company as schemas_company, user as schemas_user
from app.services import agent_service, company_service, user_service
from app.models.voice import Voice


def create_company(db, name="Acme"):
    return company_service.create_company(db, schemas_company.CompanyCreate(name=name))


def create_user(db, username="alice", password="secret", role=ROLE_USER, company_id=None, email=None):
    return user_service.create_user(
        db,
        schemas_user.UserCreate(
            username=username,
            email=email,
            password=password,
            role=role,
            company_id=company_id,
        ),
    )


def create_agent(db, elevenlabs_agent_id="agent_abc", name="Support", company_id=None):
    return agent_service.upsert_agent(
        db,
        schemas_agent.AgentAssign(name=name, elevenlabs_agent_id=elevenlabs_agent_id, company_id=company_id),
    )


def create_voice(db, voice_id="v1", name="Rachel", category="premade"):
    voice = Voice(voice_id=voice_id, name=name, category=category)
    db.add(voice)
    db.commit()
    db.refresh(voice)
    return voice


def auth_headers(user) -> dict:
    token = JWTAuthProvider().issue_token(
        Principal(user_id=user.id, username=user.username, role=user.role, company_id=user.company_id)
    )
    return {"Authorization": f"Bearer {token}"}
