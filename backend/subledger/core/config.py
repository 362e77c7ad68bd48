"""Application configuration from environment variables."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

def _clean_str(value: str | None) -> str | None:
    if value is None:
        return None
    # Replace non-breaking spaces with normal spaces
    value = value.replace("\u00a0", " ").strip()
    return value or None



class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "SubLedger"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_TOKEN: str | None = None


    # Database Settings
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "subledger"
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str | None = None

    # Subscription store
    OWNER_ID: str | None = Field(default=None, description="Identity allowed to withdraw funds")
    SUBSCRIPTION_CAPACITY: int = Field(default=100_000, ge=1)

    @field_validator(
        "API_TOKEN",
        "DATABASE_URL",
        "OWNER_ID",
        mode="before",
    )
    @classmethod
    def clean_optional_strings(cls, v):
        return _clean_str(v)



    @property
    def database_url(self) -> str:
        """Database URL, either explicit or built from the PostgreSQL components."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


settings = Settings()
