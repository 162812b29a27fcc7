from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "Dealership Sales API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:3000"

    # Database (Postgres in production or SQLite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./dealership_dev.db",
        alias="DATABASE_URL",
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Bearer tokens accepted by the API, mapped to the actor id they authenticate.
    # e.g. API_TOKENS='{"s3cr3t": "user-42"}'
    api_tokens: dict[str, str] = Field(default_factory=dict, alias="API_TOKENS")

    # Vehicle availability statuses (matched by slug in the statuses table)
    sold_status_slug: str = Field(default="sold", alias="SOLD_STATUS_SLUG")
    hold_status_slugs: list[str] = Field(
        default_factory=lambda: ["reserved", "pending"], alias="HOLD_STATUS_SLUGS",
    )  # statuses a cancelled sale releases
    release_status_slug: str = Field(
        default="available", alias="RELEASE_STATUS_SLUG",
    )  # falls back to the default status when missing

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

settings = Settings()
