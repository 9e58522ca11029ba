"""Configuration management for Receipt Split."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError, ValidationError
from .models import User
from .roster import DEFAULT_ROSTER, Roster

_DATA_DIR = Path.home() / ".receipt_split"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Fixed roster, e.g. ROSTER='[{"id": "1", "name": "Juan"}]'
    roster: list[User] = DEFAULT_ROSTER

    # Storage locations
    database_path: Path = _DATA_DIR / "receipt_split.db"
    receipts_dir: Path = _DATA_DIR / "receipts"
    reports_dir: Path = _DATA_DIR / "reports"

    # Report settings
    currency_symbol: str = "$"
    report_title: str = "Shared Expenses Report"

    @field_validator("roster")
    @classmethod
    def _validate_roster(cls, value: list[User]) -> list[User]:
        try:
            Roster(value)
        except ValidationError as e:
            raise ValueError(str(e)) from e
        return value

    def __init__(self, **kwargs):
        """Initialize settings and create data directories if needed."""
        super().__init__(**kwargs)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self.receipts_dir.mkdir(parents=True, exist_ok=True)
        self.reports_dir.mkdir(parents=True, exist_ok=True)

    def get_roster(self) -> Roster:
        """Build the roster from the configured users."""
        return Roster(self.roster)


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the environment variables and "
            f"the .env file in the current directory.\n"
            f"Error: {e}"
        ) from e
