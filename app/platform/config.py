from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Accessibility Analyzer API"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    LOG_DIR: str = "logs"

    # ── Browser ─────────────────────────────────
    CHROMEDRIVER_PATH: Optional[str] = None
    USE_WEBDRIVER_MANAGER: bool = False
    PAGE_LOAD_TIMEOUT_SECONDS: int = 15
    DOM_SETTLE_SECONDS: int = 2
    USER_AGENT: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    # ── AI Suggestions ──────────────────────────
    AI_SUGGESTIONS_ENABLED: bool = False
    OPENROUTER_API_KEY: Optional[str] = None
    AI_BASE_URL: str = "https://openrouter.ai/api/v1"
    AI_MODEL: str = "google/gemini-2.5-flash"
    AI_TIMEOUT_MS: int = 9000
    AI_MIN_INTERVAL_MS: int = 500  # spacing between upstream calls in a batch
    AI_MAX_ISSUES: int = 6

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
