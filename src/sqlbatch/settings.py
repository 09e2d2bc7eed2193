"""Runtime settings, read from ``SQLBATCH_*`` environment variables or ``.env``."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SIZE_THRESHOLD = 50_000

# Tables `status` counts rows in when none are named on the command line
DEFAULT_EXPECTED_TABLES = (
    "user_profiles",
    "user_preferences",
    "saved_locations",
    "weather_reports",
    "crop_predictions",
    "user_weather_alerts",
)


class Settings(BaseSettings):
    base_url: str = "http://localhost:3011"
    project_ref: str | None = None
    size_threshold: int = DEFAULT_SIZE_THRESHOLD
    timeout_seconds: float | None = None
    schema_file: Path = Path("schema.sql")
    seed_file: Path = Path("seed-data.sql")
    expected_tables: list[str] = Field(default_factory=lambda: list(DEFAULT_EXPECTED_TABLES))

    model_config = SettingsConfigDict(
        env_prefix="SQLBATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> Settings:
    return Settings()
