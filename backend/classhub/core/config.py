import json

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Resolve backend root (…/backend/) regardless of current working directory
BASE_DIR = Path(__file__).resolve().parents[2]
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Classroom Hub"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    # One origin or several, comma separated
    # Example: "http://localhost:5173,https://example.com"
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    # ===== Data source =====
    # remote: spreadsheet web app (POST {action, payload} -> {ok, data, error})
    # memory: collections loaded from DATA_SEED_FILE (demo / local dev)
    DATA_BACKEND: str = "remote"
    DATA_API_URL: str | None = None
    DATA_API_TIMEOUT_SEC: int = 30
    DATA_SEED_FILE: str | None = None

    # Independent collections (students, tasks, behaviors, ...) are fetched in parallel.
    FETCH_MAX_WORKERS: int = 6

    # ===== Reports / dashboard =====
    REPORT_TOP_STUDENTS: int = 3
    DASHBOARD_UPCOMING_TASKS: int = 5
    DASHBOARD_ANNOUNCEMENTS: int = 5

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        if v is None or v == "":
            return []

        if isinstance(v, list):
            return v

        # JSON list first, then comma separated
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                try:
                    return json.loads(s)
                except Exception:
                    pass
            return [item.strip() for item in s.split(",") if item.strip()]

        return v

    @field_validator("DATA_BACKEND", mode="before")
    @classmethod
    def _normalize_backend(cls, v):
        s = str(v or "remote").strip().lower()
        return s if s in {"remote", "memory"} else "remote"


settings = Settings()
