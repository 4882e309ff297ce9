from __future__ import annotations
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    SERVICE_NAME: str = Field("product-api")
    APP_VERSION: str = Field("0.1.0")
    LOG_LEVEL: str = Field("INFO")

    # Persistence
    REPOSITORY_BACKEND: Literal["sql", "memory"] = "sql"

    # CORS: "http://localhost:3000,https://example.com"
    CORS_ORIGINS: str = ""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


def get_settings() -> Settings:
    return Settings()
