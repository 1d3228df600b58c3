# app/core/config.py

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./northstar.db"

    # API
    api_title: str = "NorthStar Student API"
    api_version: str = "0.1.0"

    # Security
    secret_key: str = "your-secret-key-change-in-production"
    cron_secret: str = ""

    # Deployment timezone - the daily sweep runs at sweep_hour local time
    timezone: str = "America/Winnipeg"
    sweep_hour: int = 8

    # IRCC work hour limits (academic session)
    work_hour_cap_per_week: float = 24
    work_hour_warning_threshold: float = 20

    # Due date defaults
    recurring_default_days: int = 90

    # Email (SMTP)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""
    email_from: str = "alerts@northstarstudent.ca"

    # URL Configuration
    frontend_url: str = "http://localhost:3000"
    cors_origins: List[str] = ["http://localhost:3000"]

    # Environment
    environment: str = "development"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
