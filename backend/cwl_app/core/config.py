import os
from pathlib import Path
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

# Prefer the backend/.env file so running from the repo root still picks up settings.
# __file__ is backend/cwl_app/core/config.py -> parents[2] is backend/
BACKEND_ENV = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(BACKEND_ENV)


def _env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean from the environment with sensible defaults."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: List[str] | None = None) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default or []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _data_dir() -> str:
    return os.getenv("DATA_DIR", "data")


def _database_url() -> str:
    return os.getenv("DATABASE_URL") or f"sqlite:///{Path(_data_dir()) / 'database.db'}"


def _clash_api_key() -> str:
    # Same precedence as the deployment scripts: first non-empty wins.
    for name in ("CLASH_API_KEY", "COC_API_KEY", "CLASH_API_KEY_2"):
        value = os.getenv(name)
        if value:
            return value
    return ""


@dataclass
class Settings:
    app_name: str = field(default_factory=lambda: os.getenv("APP_NAME", "CWL Roster API"))
    api_prefix: str = field(default_factory=lambda: os.getenv("API_PREFIX", "/api"))
    data_dir: str = field(default_factory=_data_dir)
    database_url: str = field(default_factory=_database_url)
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", False))
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", ["*"]))
    admin_password: str = field(default_factory=lambda: os.getenv("ADMIN_PASSWORD", "ClanWarMaker"))
    clash_api_key: str = field(default_factory=_clash_api_key)
    clash_api_url: str = field(default_factory=lambda: os.getenv("CLASH_API_URL", "https://api.clashofclans.com/v1"))
    allow_network: bool = field(default_factory=lambda: _env_bool("ALLOW_NETWORK", True))
    max_roster_sessions: int = field(default_factory=lambda: int(os.getenv("MAX_ROSTER_SESSIONS", "50")))
    pdf_font_path: str = field(default_factory=lambda: os.getenv("PDF_FONT_PATH", ""))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    registrations_file: str = "listaIscrizioni.txt"
    clan_config_file: str = "clan-config.json"

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings instance sourced from environment variables."""
    return Settings()
