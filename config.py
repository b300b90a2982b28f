# config.py
import logging
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DB_URL: str = "sqlite+aiosqlite:///./packs.db"
    LOG_LEVEL: str = "INFO"

    # Пакетная симуляция (main.py)
    SIMULATION_PACK_ID: Optional[str] = None
    SIMULATION_PACKS: int = 1000
    SIMULATION_SEED: Optional[int] = None

    class Config:
        env_file = ".env"


settings = Settings()


def setup_logging(level: Optional[str] = None):
    """Настройка логгирования (один раз, в точке входа)"""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
