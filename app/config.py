from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "TechTeam Tracker"
    API_VERSION: str = "1.0.0"
    ENV: str = "development"
    FRONTEND_URL: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # database
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "techteam"

    # auth
    SESSION_EXPIRE_HOURS: int = 12
    SESSION_COOKIE_NAME: str = "session"
    SESSION_COOKIE_SECURE: bool = False
    BCRYPT_ROUNDS: int = 12

    # gamification
    RANKINGS_LIMIT: int = 10
    RECOMMENDED_CHALLENGES_LIMIT: int = 5


settings = Settings()
