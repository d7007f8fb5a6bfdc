from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List

class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/jobboard.db"
    # Elevated tier used only by admin endpoints; falls back to database_url
    admin_database_url: str = ""

    jwt_secret: str = "dev-secret-key-change-in-production"
    access_token_expire_minutes: int = 60
    bcrypt_rounds: int = 12

    # Redis backing the identity cache and rate limiter (empty disables both)
    redis_url: str = ""
    identity_cache_ttl_seconds: int = 5

    # Per-client request limit, backed by REDIS_URL (0 disables it)
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 900

    # Application status lifecycle: reject moves outside the transition graph
    enforce_status_transitions: bool = False

    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]
    request_timeout_seconds: float = 30.0
    log_level: str = "INFO"
    enable_metrics: bool = True

    class Config:
        env_file = ".env"

@lru_cache
def get_settings() -> Settings:
    return Settings()
