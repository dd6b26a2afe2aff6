"""
Application configuration using Pydantic Settings
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Newsreader Store"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development", description="Environment: development, staging, production")
    DEBUG: bool = Field(default=False, description="Debug mode")

    @field_validator('DEBUG', mode='before')
    @classmethod
    def validate_debug(cls, v):
        """Validate DEBUG field to handle string inputs"""
        if isinstance(v, str):
            return v.lower() in ('true', '1', 'yes', 'on')
        return bool(v)

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./newsreader.db",
        description="SQLAlchemy async database URL (postgresql+asyncpg:// in production)"
    )
    DB_POOL_SIZE: int = Field(default=5, ge=1, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0, description="Connections allowed above the pool size")
    DB_POOL_RECYCLE: int = Field(default=300, ge=1, description="Seconds before a pooled connection is recycled")

    # News store
    PREDEFINED_DEFINITIONS_PATH: Optional[str] = Field(
        default=None,
        description="Path to YAML/JSON file with predefined news definitions to seed"
    )
    DEFAULT_SET_NAME: str = Field(default="default", description="Name of the news set created for new users")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        """Normalise log level names"""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create settings instance
settings = Settings()
