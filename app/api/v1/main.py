from fastapi import APIRouter

from app.api.v1.endpoints import agents, auth, companies, users, voices

api_router = APIRouter()
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(auth.account_router, tags=["auth"])
api_router.include_router(agents.router, prefix="/agents", tags=["agents"])
api_router.include_router(agents.local_router, prefix="/agents", tags=["agents"])
api_router.include_router(voices.router, prefix="/voices", tags=["voices"])
api_router.include_router(companies.router, prefix="/companies", tags=["companies"])
api_router.include_router(users.router, prefix="/admin", tags=["admin"])
api_router.include_router(companies.admin_router, prefix="/admin/companies", tags=["admin"])
api_router.include_router(voices.admin_router, prefix="/admin/voices", tags=["admin"])
api_router.include_router(agents.admin_router, prefix="/admin", tags=["admin"])

# Demo deployments only expose login and the ElevenLabs-backed agent views
demo_router = APIRouter()
demo_router.include_router(auth.router, tags=["auth"])
demo_router.include_router(agents.router, prefix="/agents", tags=["agents"])
demo_router.include_router(voices.router, prefix="/voices", tags=["voices"])
