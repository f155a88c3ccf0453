"""Configuration management for the PBL dashboard service."""

from functools import lru_cache
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from pbl_dashboard.db.airtable import AirtableConfig

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    PBL_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # File-backed datastore
    DATA_DIR: str = Field(default="data", description="Directory holding students/, tasks.json, teams.json")

    # Airtable sync (optional; files are used when unset)
    AIRTABLE_API_KEY: str | None = Field(default=None, description="Airtable personal access token")
    AIRTABLE_BASE_ID: str | None = Field(default=None, description="Airtable base ID")
    AIRTABLE_STUDENTS_TABLE: str = Field(default="Students", description="Students table name")
    AIRTABLE_TASKS_TABLE: str = Field(default="Tasks", description="Tasks table name")
    AIRTABLE_TEAMS_TABLE: str = Field(default="Teams", description="Teams table name")
    AIRTABLE_VIEW: str = Field(default="Grid view", description="View used when listing records")
    AIRTABLE_TIMEOUT_SECONDS: float = Field(
        default=2.0, description="Read timeout before falling back to files"
    )

    # Chat assistant
    OPENAI_API_KEY: str | None = Field(default=None, description="OpenAI API key")
    OPENAI_MODEL: str = Field(default="gpt-4o", description="Model for the chat assistant")
    CHAT_TEMPERATURE: float = Field(default=0.7, description="Sampling temperature for chat")
    CHAT_MAX_TOKENS: int = Field(default=1000, description="Max tokens per chat reply")
    CHAT_HISTORY_LIMIT: int = Field(default=10, description="Most recent messages sent to the model")

    @property
    def airtable_enabled(self) -> bool:
        return bool(self.AIRTABLE_API_KEY and self.AIRTABLE_BASE_ID)

    def airtable_config(self, table_name: str) -> "AirtableConfig | None":
        """Build the Airtable config for one table, or None when credentials are missing."""
        from pbl_dashboard.db.airtable import AirtableConfig

        if not self.airtable_enabled:
            return None
        return AirtableConfig(
            api_key=self.AIRTABLE_API_KEY,
            base_id=self.AIRTABLE_BASE_ID,
            table_name=table_name,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance
    """
    return Settings()
