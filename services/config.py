import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Settings:
    google_ai_api_key: str = None
    gemini_model: str = "gemini-2.0-flash-exp"
    improve_temperature: float = 0.3
    improve_max_tokens: int = 3000
    analyze_temperature: float = 0.3
    analyze_max_tokens: int = 2000
    max_upload_bytes: int = 5 * 1024 * 1024
    suggestion_debounce_seconds: float = 2.0
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def ai_configured(self) -> bool:
        return bool(self.google_ai_api_key)


def load_settings() -> Settings:
    """
    Build settings from the environment, reading a local .env file first
    """
    load_dotenv()
    return Settings(
        google_ai_api_key=os.getenv("GOOGLE_AI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash-exp"),
        improve_temperature=float(os.getenv("IMPROVE_TEMPERATURE", "0.3")),
        improve_max_tokens=int(os.getenv("IMPROVE_MAX_TOKENS", "3000")),
        analyze_temperature=float(os.getenv("ANALYZE_TEMPERATURE", "0.3")),
        analyze_max_tokens=int(os.getenv("ANALYZE_MAX_TOKENS", "2000")),
        max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024))),
        suggestion_debounce_seconds=float(os.getenv("SUGGESTION_DEBOUNCE_SECONDS", "2.0")),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
