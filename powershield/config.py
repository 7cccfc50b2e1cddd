"""
PowerShield application settings.

Extends the base settings with PowerShield-specific configuration.
"""

from functools import lru_cache

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """PowerShield-specific settings."""

    # ==========================================================================
    # Password hashing
    # ==========================================================================
    BCRYPT_ROUNDS: int = 12

    # ==========================================================================
    # List endpoints
    # ==========================================================================
    # Default page sizes when the client sends no (or a non-positive) limit
    USERS_PAGE_SIZE: int = 50
    CONTACTS_PAGE_SIZE: int = 50
    GALLERY_PAGE_SIZE: int = 20
    JOBS_PAGE_SIZE: int = 20
    APPLICATIONS_PAGE_SIZE: int = 20

    # Hard ceiling on any page, whatever the client asks for
    MAX_PAGE_SIZE: int = 100

    # Number of items returned by /gallery/featured when no limit is given
    FEATURED_GALLERY_LIMIT: int = 5


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
