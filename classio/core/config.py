# classio/core/config.py
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SECRET_KEY: str = "your-super-secret-jwt-key-change-in-prod"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days

    DATABASE_URL: str = "sqlite:///./classio.db"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://127.0.0.1",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:8000",
    ]

    # Коды приглашений
    INVITE_CODE_LENGTH: int = 16
    INVITE_DEFAULT_EXPIRY_DAYS: int = 7
    PRINCIPAL_TOKEN_EXPIRY_DAYS: int = 30

    # Слот урока, если в расписании не заполнено время
    DEFAULT_LESSON_START: str = "08:00"
    DEFAULT_LESSON_END: str = "08:45"

    class Config:
        env_file = ".env"

# Экземпляр создаётся ОДИН РАЗ
settings = Settings()
