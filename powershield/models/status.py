"""
Workflow statuses for content collections.
"""

from enum import Enum


class ContactStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class JobStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def status_values(status_enum) -> str:
    """Comma-separated allowed values, for error messages."""
    return ", ".join(s.value for s in status_enum)
