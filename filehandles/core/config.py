from typing import Literal, Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from filehandles.core.types import Lock


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FILEHANDLES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="filehandles", description="Library name")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment mode"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log output format"
    )
    logging_enabled: bool = Field(
        default=False,
        description="Hand a structlog logger to files made by the default file system",
    )

    # Directory locking
    lock_file_name: str = Field(
        default=".lock", description="Sentinel file used to lock a directory"
    )
    lock_file_opening_mode: str = Field(
        default="w", description="Mode the sentinel lock file is opened with"
    )
    remove_lock_file_on_unlock: bool = Field(
        default=True, description="Delete the sentinel lock file when unlocking"
    )
    default_lock: Literal["shared", "exclusive"] = Field(
        default="exclusive", description="Lock taken by transactions by default"
    )

    max_link_depth: int = Field(
        default=40, description="Maximum number of symlinks followed in one resolution"
    )

    @validator("log_format", pre=True)
    def validate_log_format(cls, v, values):
        if "environment" in values:
            if values["environment"] == "production":
                return "json"
        return v

    @validator("max_link_depth")
    def validate_max_link_depth(cls, v):
        if v < 1:
            raise ValueError("max_link_depth must be at least 1")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def transaction_lock(self) -> Lock:
        return Lock(self.default_lock)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()
