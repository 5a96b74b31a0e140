from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    frontend_url: str = "http://localhost:3000"
    port: int = 5000
    database_url: str = "sqlite:///./truelens.db"

    firebase_service_account_path: str = "./firebase-key.json"
    firebase_project_id: Optional[str] = None

    llm_provider: str = "gemini"
    llm_model: str = "gemini-1.5-pro"
    google_generative_ai_api_key: Optional[str] = None
    log_llm_calls: bool = True

    # Claim verification is skipped entirely when no key is set
    serper_api_key: Optional[str] = None
    search_timeout: float = 10.0

    rate_limit: str = "100 per 15 minutes"
    rate_limit_enabled: bool = True

    prompt_char_limit: int = 2000
    excerpt_char_limit: int = 500
    max_claims_to_verify: int = 3
    default_reliability_score: int = 70
    history_limit: int = 50

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

settings = Settings()
