from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    due_soon_days: int = 7
    llm_api_key: str | None = None
    llm_base_url: str | None = None
    llm_model: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 20.0

    @property
    def suggestions_enabled(self) -> bool:
        return bool(self.llm_api_key)


load_env()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip() or f"sqlite:///{PROJECT_ROOT / 'upkeep.db'}"

SETTINGS = Settings(
    database_url=DATABASE_URL,
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
    due_soon_days=int(os.getenv("DUE_SOON_DAYS", "7")),
    llm_api_key=os.getenv("LLM_API_KEY", "").strip() or None,
    llm_base_url=os.getenv("LLM_BASE_URL", "").strip() or None,
    llm_model=os.getenv("LLM_MODEL", "gpt-4o-mini"),
    llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "20")),
)
