from __future__ import annotations

import os
import secrets
from dataclasses import dataclass, field

from dotenv import load_dotenv


def _generate_secret() -> str:
    return secrets.token_hex(32)


@dataclass(frozen=True)
class Settings:
    api_base: str = "http://localhost:8080/api"
    timeout_seconds: int = 20
    web_host: str = "github.com"
    results_ttl_seconds: int = 300
    secret_key: str = field(default_factory=_generate_secret)
    log_level: str = "INFO"
    port: int = 5000

    @property
    def results_ttl_ms(self) -> int:
        return self.results_ttl_seconds * 1000


def load_settings() -> Settings:
    """
    Read settings from the environment (and a local .env file, when present).
    """
    load_dotenv()
    return Settings(
        api_base=os.getenv("ANALYTICS_API_BASE", "http://localhost:8080/api").strip().rstrip("/"),
        timeout_seconds=int(os.getenv("ANALYTICS_TIMEOUT_SECONDS", "20")),
        web_host=os.getenv("GITHUB_WEB_HOST", "github.com").strip().lower(),
        results_ttl_seconds=int(os.getenv("RESULTS_TTL_SECONDS", "300")),
        secret_key=os.getenv("SECRET_KEY", "").strip() or _generate_secret(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        port=int(os.getenv("PORT", "5000")),
    )
