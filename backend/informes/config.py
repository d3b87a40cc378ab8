import os
from dotenv import load_dotenv

load_dotenv()


def _optional_float(value: str):
    value = (value or "").strip()
    return float(value) if value else None


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./data/informes.db")
    # vazio: usa o banco de dados deste processo como backend
    BACKEND_API_URL: str = os.getenv("BACKEND_API_URL", "")
    BACKEND_TIMEOUT = _optional_float(os.getenv("BACKEND_TIMEOUT", ""))
    SEED_FILE: str = os.getenv("SEED_FILE", "")
    SUCCESS_DISPLAY_SECONDS: float = float(os.getenv("SUCCESS_DISPLAY_SECONDS", "1.5"))
    # sessões sem uso por mais tempo que isso exigem novo check-in
    SESSION_IDLE_MINUTES: float = float(os.getenv("SESSION_IDLE_MINUTES", "720"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "./logs")
    CORS_ORIGINS: list = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
        if origin.strip()
    ]

settings = Settings()
