"""
Service configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _get_env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        return default


class Settings:
    """Settings from environment variables"""

    # Storage
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "scorebook.db")

    # JWT settings
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = _get_env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 12 * 60)

    # Scoring rules
    AUTO_RETIRE_BALLS: int = _get_env_int("AUTO_RETIRE_BALLS", 11)  # 0 disables
    DEFAULT_OVERS: int = _get_env_int("DEFAULT_OVERS", 40)

    # HTTP
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
