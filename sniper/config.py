from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
import os

OUTCOMES = ("P", "B")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_STATIC_PATTERN = ['P', 'B', 'P', 'B', 'B', 'P', 'B', 'P', 'P', 'B', 'P', 'B']


class Settings(BaseSettings):
    db_dsn: str = os.getenv("DB_DSN", "sqlite://")
    license_store: str = os.getenv("LICENSE_STORE", "memory")  # 'memory' | 'sql'
    licenses_file: str = os.getenv("LICENSES_FILE", "licenses.json")
    admin_token: str | None = os.getenv("ADMIN_TOKEN")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", 8000))

    # detector tuning
    dragon_threshold: int = Field(default=4, ge=3, le=5)
    cycle_lengths: list[int] = [12, 8, 6, 4, 3]
    static_pattern: list[str] = DEFAULT_STATIC_PATTERN
    transition_window: int = Field(default=24, ge=4)
    transition_confidence: float = Field(default=0.65, ge=0.0, le=1.0)
    transition_before_cycles: bool = False

    cors_origins: list[str] = ["*"]

    @field_validator("cycle_lengths")
    @classmethod
    def _check_cycles(cls, v: list[int]) -> list[int]:
        if any(n < 2 for n in v):
            raise ValueError("cycle lengths must be >= 2")
        return v

    @field_validator("static_pattern")
    @classmethod
    def _check_pattern(cls, v: list[str]) -> list[str]:
        v = [s.strip().upper() for s in v]
        if not v:
            raise ValueError("static pattern must not be empty")
        if any(s not in OUTCOMES for s in v):
            raise ValueError("static pattern may only contain P or B")
        return v

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}")
        return v

    @field_validator("license_store")
    @classmethod
    def _check_store(cls, v: str) -> str:
        if v not in ("memory", "sql"):
            raise ValueError("license_store must be 'memory' or 'sql'")
        return v


settings = Settings()
