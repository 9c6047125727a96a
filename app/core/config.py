from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Agent Console"
    API_PREFIX: str = "/api"
    # Process-wide: the engine in app.core.database and alembic read it at import
    DATABASE_URL: str

    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # ElevenLabs conversational AI
    ELEVENLABS_API_KEY: str = ""
    ELEVENLABS_API_URL: str = "https://api.elevenlabs.io/v1"
    ELEVENLABS_TIMEOUT: float = 30.0

    # Demo deployments skip authentication and talk to ElevenLabs directly
    DEMO_MODE: bool = False

    # Default admin created on startup (ignored in demo mode)
    ADMIN_USERNAME: str = "admin"
    ADMIN_EMAIL: str = "admin@example.com"
    ADMIN_PASSWORD: str = "changeme"

    # "unassign" clears the agent's company, "reassign" moves it to another company
    AGENT_REMOVAL_POLICY: str = "unassign"

    # Server configuration
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ORIGINS: str = "http://localhost:5000,http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'

settings = Settings()
