"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field
from functools import lru_cache

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # LANGUAGE DATA
    # ===================
    locales_dir: Path = Field(
        default=DATA_DIR / "locales",
        description="Directory holding <locale>.json vocabulary tables"
    )
    dropdown_map_path: Path = Field(
        default=DATA_DIR / "dropdown_map.json",
        description="Dropdown value mapping (flat, or wrapped in 'dropdowns')"
    )
    mapping_source_locale: str = Field(
        default="en",
        min_length=2,
        description="Locale of the mapping file's keys"
    )
    mapping_target_locale: str = Field(
        default="ja",
        min_length=2,
        description="Locale of the mapping file's values"
    )

    # ===================
    # DROPDOWN SUBSTITUTION
    # ===================
    dropdown_strategy: str = Field(
        default="tree",
        pattern="^(tree|pattern)$",
        description="tree rewrites parsed inputs, pattern rewrites serialized text"
    )
    pattern_require_marker: bool = Field(
        default=True,
        description="Pattern strategy only rewrites literals carrying the ' v' arrow"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    log_preview_chars: int = Field(
        default=50,
        ge=0,
        le=1000,
        description="Characters of submitted code included in request logs"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=3000,
        ge=1000,
        le=65535,
        validation_alias=AliasChoices("API_PORT", "PORT"),
        description="API port (PORT env var, as set by most PaaS hosts)"
    )
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        description="Origins allowed by the CORS middleware"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
