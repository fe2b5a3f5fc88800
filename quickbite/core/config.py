"""
Core configuration for QuickBite API
"""
from typing import List
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")

    # API Configuration
    PROJECT_NAME: str = "QuickBite Delivery API"
    API_PREFIX: str = "/api"
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./quickbite.db"  # SQLite for development

    # Signup / OTP
    OTP_EXPIRE_MINUTES: int = 10
    PENDING_SIGNUP_RETENTION_HOURS: int = 24

    # Orders
    ORDER_IDEMPOTENCY_WINDOW_HOURS: int = 24
    DEFAULT_DELIVERY_MINUTES: int = 30

    # CORS Configuration
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",  # React dev server
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Email Configuration
    SMTP_SERVER: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    FROM_EMAIL: str = "noreply@quickbite.app"

    # Seed data
    SEED_ON_STARTUP: bool = False
    SEED_ADMIN_USERNAME: str = "admin"
    SEED_ADMIN_EMAIL: str = ""
    SEED_ADMIN_PASSWORD: str = ""
    SEED_ADMIN_MOBILE: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

# Global settings instance
settings = Settings()
