# classroll/core/config.py
"""Application configuration using Pydantic."""
from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    database_url: str = 'postgresql+asyncpg://localhost/classroll'
    jwt_secret_key: str = 'change-me'
    jwt_algorithm: str = 'HS256'
    access_token_expire_minutes: int = 480  # 8h

    app_name: str = 'classroll'
    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'info'
    allowed_origins: List[str] = ['*']

    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_recycle: int = 1800
    db_echo: bool = False

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
