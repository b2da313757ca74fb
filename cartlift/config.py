"""CartLift — Central Configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Database (key-value store for saved calculations) ──
    database_url: str = ""

    # ── App ──
    log_level: str = "INFO"
    schema_version: str = "1.0.0"

    # ── CSV Import ──
    default_gross_margin_percent: float = 40.0  # Whole-percent, normalized downstream

    # ── Storage keys ──
    saved_calculations_key: str = "saved-calculations"
    autosave_key: str = "autosave"

    @property
    def effective_database_url(self) -> str:
        """Return the configured URL if set, otherwise fall back to local SQLite."""
        if self.database_url:
            return self.database_url
        return "sqlite:///./cartlift.db"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "CARTLIFT_",
    }


settings = Settings()
