"""
Base settings class for environment configuration.

Uses Pydantic Settings for automatic environment variable loading.
Extend this class for application-specific settings.

Example:
    from common.config import BaseAppSettings

    class Settings(BaseAppSettings):
        BCRYPT_ROUNDS: int = 12

    settings = Settings()
    settings.validate_required()
    print(settings.MONGODB_DATABASE)
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    """
    Base settings class with common configuration options.

    Automatically loads values from environment variables. Secrets have
    no defaults; validate_required() refuses to start without them.
    """

    # ==========================================================================
    # Database Settings
    # ==========================================================================
    MONGODB_URI: Optional[str] = None
    MONGODB_DATABASE: str = "powershield"
    MONGODB_TIMEOUT_MS: int = 5000
    # Extra connection strings tried in order when MONGODB_URI is unreachable
    MONGODB_FALLBACK_URIS: str = ""
    MONGODB_CONNECT_ATTEMPTS: int = 3
    MONGODB_CONNECT_BACKOFF_SECONDS: float = 0.5

    # ==========================================================================
    # Authentication Settings
    # ==========================================================================
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"

    # ==========================================================================
    # Server Settings
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 5001
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production
    LOG_LEVEL: str = "INFO"

    # CORS Settings
    CORS_ORIGINS: str = "*"  # Comma-separated origins or "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    # ==========================================================================
    # Pydantic Settings Configuration
    # ==========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",  # Allow app-specific settings
        case_sensitive=True,
    )

    def get_cors_origins(self) -> list:
        """Parse CORS_ORIGINS into a list."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    def get_mongodb_uris(self) -> List[str]:
        """Primary URI followed by any fallbacks, de-duplicated, in order."""
        uris: List[str] = []
        candidates = [self.MONGODB_URI or ""] + self.MONGODB_FALLBACK_URIS.split(",")
        for uri in candidates:
            uri = uri.strip()
            if uri and uri not in uris:
                uris.append(uri)
        return uris

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"

    def validate_required(self) -> None:
        """
        Validate that required settings are configured.

        Raises:
            ValueError: If required settings are missing
        """
        errors = []

        if not self.MONGODB_URI:
            errors.append("MONGODB_URI is required")

        if not self.JWT_SECRET:
            errors.append("JWT_SECRET is required for admin authentication")

        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))
