from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://daily_diet:daily_diet@db:5432/daily_diet"
    # При продакшн/обычной разработке лучше не пересоздавать БД на каждом старте
    RESET_DATABASE: bool = False
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    SESSION_COOKIE_NAME: str = "sessionId"
    SESSION_COOKIE_MAX_AGE_DAYS: int = 7
    SESSION_COOKIE_PATH: str = "/"
    SESSION_COOKIE_SECURE: bool = False
    # Выдавать новый sessionId (и создавать пользователя), если cookie не пришла
    AUTO_PROVISION_SESSIONS: bool = True

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8080",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


settings = Settings()
