from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, AnyHttpUrl
from typing import List


class Settings(BaseSettings):
    # --- Project Settings ---
    PROJECT_NAME: str = "Collections API"
    API_V1_STR: str = "/api/v1"
    API_PORT: str = "8000"
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    LOG_LEVEL: str = "INFO"

    # --- Security Settings ---
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # --- Database Settings ---
    DATABASE_URL: str = "sqlite:///./collections.db"

    # --- Maintenance Settings ---
    #comma-separated, only used when the ADMIN_EMAILS property is not stored
    ADMIN_EMAILS: str = ""
    #comma-separated, only used when the AGENT_EMAILS property is not stored
    AGENT_EMAILS: str = ""
    MAINTENANCE_CACHE_TTL: int = 300
    MAINTENANCE_ALLOW_ADMINS: bool = False
    MAINTENANCE_RETRY_AFTER: int = 3600

    # --- HTTP Settings ---
    #comma-separated host names accepted by TrustedHostMiddleware
    ALLOWED_HOSTS: str = "localhost,127.0.0.1,testserver"
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @property
    def allowed_hosts(self) -> List[str]:
        return [host.strip() for host in self.ALLOWED_HOSTS.split(",") if host.strip()]

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")


settings = Settings()
