"""Configuration management for the pantry tracker."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="pantry-tracker", description="Service name reported to Logfire")

    # SQLite Configuration
    sqlite_db_path: str = Field(default="data/pantry.db", description="Path to the SQLite database file")

    # OpenRouter Configuration
    openrouter_api_key: str | None = Field(default=None, description="OpenRouter API key for LLM access")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value

    # AI Model Configuration
    model_id: str = Field(
        default="meta-llama/llama-3.1-405b-instruct",
        description="Model ID for OpenRouter",
    )
    model_provider: str | None = Field(
        default=None,
        description="Optional OpenRouter upstream provider to pin requests to (e.g., 'together')",
    )
    completion_max_tokens: int = Field(default=512, description="Maximum tokens per chat completion")
    completion_temperature: float = Field(default=0.7, description="Sampling temperature for chat completions")

    # Task Executor Configuration
    update_lookup_max_attempts: int = Field(
        default=3, description="Total lookup attempts before an update task reports the item as not found"
    )
    update_lookup_delay_seconds: float = Field(
        default=0.2, description="Fixed delay between update lookup attempts (in seconds)"
    )


# Application Constants
class Constants:
    """Application-wide constants."""

    # Chat replies
    DEFAULT_REPLY: str = "Task executed successfully."
    AUTH_REQUIRED_MESSAGE: str = "User not authenticated."

    # Collections
    PANTRY_COLLECTION: str = "pantry_items"
    RECIPES_COLLECTION: str = "recipes"

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 100  # Default pagination limit for list queries
    TOP_ITEMS_LIMIT: int = 5

    # Recipe generation
    RECIPE_TITLE_INGREDIENTS: int = 3  # Ingredients named in a generated recipe title
    RECIPE_DEFAULT_MINUTES: int = 30


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
