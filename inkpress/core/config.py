from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Backend selection: the in-process emulator or a real Supabase project
        self.backend_mode: str = os.getenv("BACKEND_MODE", "mock").strip().lower()
        raw_url = os.getenv("SUPABASE_URL", "")
        self.supabase_url: str = raw_url.rstrip("/")
        self.supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY", "")
        self.supabase_key: str = self.supabase_anon_key  # alias
        self.supabase_query_timeout: float = float(os.getenv("SUPABASE_QUERY_TIMEOUT", "5"))
        # Emulator
        self.mock_latency_ms: int = max(0, int(os.getenv("MOCK_LATENCY_MS", "500")))
        self.mock_default_user_email: str | None = os.getenv("MOCK_DEFAULT_USER_EMAIL") or None
        self.mock_rpc_strict: bool = _env_bool("MOCK_RPC_STRICT")
        # Site
        self.posts_per_page: int = max(1, int(os.getenv("POSTS_PER_PAGE", "10")))
        # App meta
        self.app_name: str = "Inkpress"
        self.debug: bool = _env_bool("DEBUG")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def use_mock_backend(self) -> bool:
        return self.backend_mode != "supabase"

    @property
    def mock_latency(self) -> float:
        return self.mock_latency_ms / 1000.0


@lru_cache()
def get_settings() -> Settings:
    return Settings()
