import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

SUPPORTED_BACKENDS = ("supabase", "sql")


class Settings(BaseModel):
    store_backend: str = "supabase"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    database_url: Optional[str] = None
    admin_password: Optional[str] = None
    cors_origins: List[str] = ["http://localhost:3000"]
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return ["http://localhost:3000"]
    return [o.strip() for o in raw.split(",") if o.strip()]


def get_settings() -> Settings:
    """Snapshot of the environment; read fresh on every call."""
    return Settings(
        store_backend=(os.getenv("STORE_BACKEND") or "supabase").strip().lower(),
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        database_url=os.getenv("DATABASE_URL"),
        admin_password=os.getenv("ADMIN_PASSWORD"),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("APP_HOST", "127.0.0.1"),
        port=int(os.getenv("APP_PORT", "8000")),
    )
