import os
from pydantic_settings import BaseSettings
import hashlib

def _derive_key(base_secret: str, purpose: str) -> str:
    """Derive a deterministic key from base secret for specific purpose"""
    return hashlib.sha256(f"{base_secret}:{purpose}".encode()).hexdigest()

class Settings(BaseSettings):
    app_name: str = "Fleet Operations API"
    database_url: str = os.getenv("DATABASE_URL", "")
    session_secret: str = os.getenv("SESSION_SECRET", "default-dev-secret-change-in-production")

    @property
    def secret_key(self) -> str:
        """JWT session token signing key"""
        return _derive_key(self.session_secret, "session_token")

    @property
    def password_pepper(self) -> str:
        """Credential pepper - derived from base secret"""
        return _derive_key(self.session_secret, "password_pepper")[:32]

    algorithm: str = "HS256"
    session_expire_minutes: int = 120  # matches the dashboard cookie lifetime
    cookie_name: str = "token"

    admin_user_id: str = "admin001"
    admin_api_key: str = "secret1"
    seed_demo_data: bool = True

    upload_dir: str = "uploads"

    tally_url: str = "http://localhost:9000"
    tally_timeout_seconds: float = 10.0

    cors_origins: list = ["*"]

    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60
    auth_rate_limit_requests: int = 10
    auth_rate_limit_window_seconds: int = 60
    max_request_bytes: int = 10 * 1024 * 1024

    log_level: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
