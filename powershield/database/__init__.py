"""
PowerShield-specific database utilities.

Provides collection names and the startup index bootstrap.
"""

from powershield.database import collections
from powershield.database.indexes import ensure_indexes

__all__ = ["collections", "ensure_indexes"]
