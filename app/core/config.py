"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, Slack endpoints, secret names)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Dict, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="riddlebot",
        description="MongoDB database name"
    )
    MONGODB_COLLECTION: str = Field(
        default="edition-2",
        description="Collection holding user documents for the current edition"
    )

    # Slack
    SLACK_API_BASE_URL: str = Field(
        default="https://slack.com/api",
        description="Slack Web API base URL"
    )
    SLACK_DOMAIN: str = Field(
        default="slack.com",
        description="Host suffix recognised in message permalinks"
    )
    SLACK_API_TIMEOUT: float = Field(
        default=10.0,
        description="Outbound Slack request timeout in seconds"
    )

    # Request verification
    VERIFY_SIGNATURES: bool = Field(
        default=True,
        description="Verify request signatures (may only be disabled outside production)"
    )
    SIGNATURE_MAX_AGE_SECONDS: int = Field(
        default=300,
        description="Replay window for signed request timestamps"
    )

    # Game
    GUESS_POLICY: Literal["strict", "lenient"] = Field(
        default="strict",
        description="Guess evaluation policy"
    )
    SERIALIZE_USER_UPDATES: bool = Field(
        default=True,
        description="Serialize read-modify-write of a user document within this process"
    )

    # Secrets
    SECRET_ENV_PREFIX: str = Field(
        default="SECRET_",
        description="Environment prefix under which named secrets are looked up"
    )
    PERSONA_CREDENTIALS: Dict[str, Dict[str, str]] = Field(
        default={
            "kretes": {
                "oauth": "kretes-oauth-token",
                "signing": "kretes-signing-secret",
            },
            "rexor": {
                "oauth": "slack-bot-oaut-token",
                "signing": "slack-signing-secret",
            },
        },
        description="Secret names holding each persona's OAuth token and signing secret"
    )
    AUTHORIZED_USERS_SECRET: str = Field(
        default="command-authed-users",
        description="Secret with the comma separated list of users allowed to run commands"
    )
    REPORT_TOKEN_SECRET: str = Field(
        default="command-token",
        description="Secret with the bearer token guarding the report endpoint"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @validator("VERIFY_SIGNATURES")
    def validate_verify_signatures(cls, v, values):
        """Signature verification can never be switched off in production."""
        if values.get("ENVIRONMENT") == "production" and not v:
            raise ValueError("VERIFY_SIGNATURES cannot be disabled in production environment")
        return v

    @validator("PERSONA_CREDENTIALS")
    def validate_persona_credentials(cls, v):
        """Every persona needs both secret names."""
        for persona, names in v.items():
            missing = {"oauth", "signing"} - set(names)
            if missing:
                raise ValueError(f"Persona '{persona}' is missing credential names: {sorted(missing)}")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.MONGODB_COLLECTION:
        errors.append("MONGODB_COLLECTION is required")

    if settings.SIGNATURE_MAX_AGE_SECONDS <= 0:
        errors.append("SIGNATURE_MAX_AGE_SECONDS must be positive")

    if not settings.PERSONA_CREDENTIALS:
        errors.append("PERSONA_CREDENTIALS must define at least one persona")

    # Production-specific validations
    if settings.is_production and not settings.VERIFY_SIGNATURES:
        errors.append("VERIFY_SIGNATURES must be enabled in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
