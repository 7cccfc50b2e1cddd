"""
Configuration module - pydantic-settings base shared by the API and scripts.
"""

from common.config.base_settings import BaseAppSettings

__all__ = ["BaseAppSettings"]
