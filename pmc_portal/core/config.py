from pydantic import BaseModel
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseModel):
    database_url: str
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60
    session_idle_minutes: int = 30
    otp_ttl_seconds: int = 300
    otp_resend_cooldown_seconds: int = 30
    otp_max_attempts: int = 5
    storage_dir: str = "storage"
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_from: str | None = None
    frontend_base_url: str = "http://localhost:5173"
    payment_callback_secret: str | None = None
    log_level: str = "INFO"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        database_url = os.getenv("DATABASE_URL", "")
        jwt_secret_key = os.getenv("JWT_SECRET_KEY", "")
        if not jwt_secret_key:
            raise RuntimeError("JWT_SECRET_KEY is not set")
        _settings = Settings(
            database_url=database_url,
            jwt_secret_key=jwt_secret_key,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", "60")),
            session_idle_minutes=int(os.getenv("SESSION_IDLE_MINUTES", "30")),
            otp_ttl_seconds=int(os.getenv("OTP_TTL_SECONDS", "300")),
            otp_resend_cooldown_seconds=int(os.getenv("OTP_RESEND_COOLDOWN_SECONDS", "30")),
            otp_max_attempts=int(os.getenv("OTP_MAX_ATTEMPTS", "5")),
            storage_dir=os.getenv("STORAGE_DIR", "storage"),
            smtp_host=os.getenv("SMTP_HOST"),
            smtp_port=int(os.getenv("SMTP_PORT", "587")),
            smtp_user=os.getenv("SMTP_USER"),
            smtp_pass=os.getenv("SMTP_PASS"),
            smtp_from=os.getenv("SMTP_FROM"),
            frontend_base_url=os.getenv("FRONTEND_BASE_URL", "http://localhost:5173"),
            payment_callback_secret=os.getenv("PAYMENT_CALLBACK_SECRET"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
    return _settings
