import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    def __init__(self) -> None:
        self.APP_NAME: str = os.getenv("APP_NAME", "Academia API")
        self.ENV: str = os.getenv("ENV", "development")
        self.FIREBASE_PROJECT_ID: str | None = os.getenv("FIREBASE_PROJECT_ID")
        # Runs against the in-memory store/identity backends instead of Firebase.
        self.LOCAL_BACKENDS: bool = os.getenv("LOCAL_BACKENDS", "0") == "1"
        self.DEFAULT_PLAN_PERIOD: int = int(os.getenv("DEFAULT_PLAN_PERIOD", "30"))

        default_cors = [
            "http://localhost",
            "http://localhost:3000",
            "http://127.0.0.1",
            "http://127.0.0.1:3000",
        ]
        cors_origins = os.getenv("BACKEND_CORS_ORIGINS")
        self.BACKEND_CORS_ORIGINS: List[str] = (
            [origin.strip() for origin in cors_origins.split(",") if origin.strip()]
            if cors_origins
            else default_cors
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
