from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "prompts" / "templates"


class Settings(BaseSettings):
    """
    Settings for the medication NLU engine.
    Loaded from environment variables and an optional .env file.
    """

    PROJECT_NAME: str = "MediCare NLU"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field("development", description="Deployment environment name")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("colored", description="Log format: colored, json or plain")

    # NLU data assets
    NLU_TEMPLATES_DIR: Path = Field(
        DEFAULT_TEMPLATES_DIR,
        description="Directory holding medication/patterns.yaml and medication/responses.yaml",
    )

    # Two names at or above this similarity are flagged as probable duplicates
    NLU_DUPLICATE_SIMILARITY_THRESHOLD: float = Field(
        0.8, ge=0.0, le=1.0, description="Edit-distance similarity for duplicate detection"
    )

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in {"colored", "json", "plain"}:
            raise ValueError(f"Invalid log format: {v}")
        return fmt

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


# Settings singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return a cached Settings instance so the environment is read only once.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
