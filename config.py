from dataclasses import dataclass, field
from dotenv import load_dotenv
from typing import List, Optional
import os

DEFAULT_GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    gemini_api_key: Optional[str] = None
    gemini_api_url: str = DEFAULT_GEMINI_API_URL
    analysis_timeout: float = 30.0
    broadcast_scope: str = "class"
    session_idle_hours: float = 0
    reap_interval_seconds: float = 300
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def load_settings() -> Settings:
    # Load environment variables
    load_dotenv()

    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_api_url=os.getenv("GEMINI_API_URL", DEFAULT_GEMINI_API_URL),
        analysis_timeout=float(os.getenv("ANALYSIS_TIMEOUT", "30")),
        broadcast_scope=os.getenv("BROADCAST_SCOPE", "class"),
        session_idle_hours=float(os.getenv("SESSION_IDLE_HOURS", "0")),
        reap_interval_seconds=float(os.getenv("REAP_INTERVAL_SECONDS", "300")),
        cors_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
    )
