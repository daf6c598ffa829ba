import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import TimeWindowConfig

BASE_DIR = Path(__file__).resolve().parent.parent


class TokenSettings(BaseModel):
    name: str = "Payroll Token"
    symbol: str = "PAY"
    initial_supply: int = Field(default=1_000_000_000, ge=0)
    fund_account: str = "payroll-fund"


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    admin: str = Field(default="admin", description="Identity that initialises the ledger")
    max_change_working_days: int = Field(default=10, ge=0)
    check_in: TimeWindowConfig = TimeWindowConfig(hour=8, minute=0, second=0, tolerance=900)
    check_out: TimeWindowConfig = TimeWindowConfig(hour=16, minute=0, second=0, tolerance=900)
    utc_offset_minutes: int = Field(default=0, ge=-720, le=840, description="Reference time zone of the windows")
    token: TokenSettings = TokenSettings()
    data_path: Path | None = Field(default=None, description="JSON snapshot of the ledger state")
    event_log_path: Path | None = Field(default=None, description="JSON lines audit trail of ledger events")
    log_level: str = "INFO"
    json_logs: bool = True
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    otlp_endpoint: str | None = Field(default=None, description="OTLP endpoint for traces/metrics")

    model_config = SettingsConfigDict(env_prefix="PAYROLL_", env_nested_delimiter="__", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def normalise_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("PAYROLL_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None
