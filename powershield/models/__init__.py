from powershield.models.admin import AdminRole, AdminClaims, ROLE_GRANTS
from powershield.models.status import ContactStatus, JobStatus, ApplicationStatus, status_values

__all__ = [
    "AdminRole",
    "AdminClaims",
    "ROLE_GRANTS",
    "ContactStatus",
    "JobStatus",
    "ApplicationStatus",
    "status_values",
]
