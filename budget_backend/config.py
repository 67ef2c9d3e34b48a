# budget_backend/config.py
from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BUDGET_", extra="ignore")

    app_name: str = "Department Budget Requests"

    # --- Database ---
    database_url: str = "sqlite:///./budget_requests.db"
    sql_echo: bool = False
    # Dev convenience; Alembic migrations own the schema everywhere else.
    auto_create_tables: bool = True

    # --- CORS ---
    cors_origins: List[AnyHttpUrl] = ["http://localhost:5173"]  # type: ignore[assignment]

    # --- Logging ---
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"
    log_format: Literal["text", "json"] = "text"

    @property
    def cors_allow_origins(self) -> List[str]:
        return [str(origin).rstrip("/") for origin in self.cors_origins]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def ensure_sqlite_directory(self) -> None:
        if not self.is_sqlite or ":memory:" in self.database_url:
            return
        db_path = Path(self.database_url.replace("sqlite:///", ""))
        db_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    return Settings()
