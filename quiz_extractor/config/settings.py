"""Application settings and configuration."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from quiz_extractor.messages import UiLanguage

# Load .env file if present
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API CONFIG
    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key",
        validation_alias="ANTHROPIC_API_KEY",
    )

    # Model Configuration
    fast_model_name: str = Field(
        default="claude-3-5-haiku-20241022",
        description="Model used for the fast tier",
        validation_alias="FAST_MODEL_NAME",
    )
    quality_model_name: str = Field(
        default="claude-3-7-sonnet-20250219",
        description="Model used for the quality tier",
        validation_alias="QUALITY_MODEL_NAME",
    )

    # Generation Settings
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Sampling temperature for completions",
        validation_alias="TEMPERATURE",
    )
    max_tokens: int = Field(
        default=4000,
        ge=1,
        description="Maximum tokens per completion",
        validation_alias="MAX_TOKENS",
    )

    # Source document settings
    source_text_limit: int = Field(
        default=8000,
        ge=1,
        description="Maximum characters of document text embedded in a prompt",
        validation_alias="SOURCE_TEXT_LIMIT",
    )
    pdf_batch_size: int = Field(
        default=5,
        ge=1,
        description="Pages extracted concurrently per batch",
        validation_alias="PDF_BATCH_SIZE",
    )

    # History Settings
    history_path: Path = Field(
        default=Path.home() / ".quiz_extractor" / "history.json",
        description="Where chat and quiz history is stored",
        validation_alias="HISTORY_PATH",
    )
    history_limit: int = Field(
        default=50,
        ge=1,
        description="Number of most recent history entries kept",
        validation_alias="HISTORY_LIMIT",
    )

    # Interface Settings
    ui_language: UiLanguage = Field(
        default=UiLanguage.EN,
        description="Language of default labels and messages",
        validation_alias="UI_LANGUAGE",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level for the quiz_extractor logger",
        validation_alias="LOG_LEVEL",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# This is loaded the first time and then cached for further use
@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with loaded configuration
    """
    return Settings()
