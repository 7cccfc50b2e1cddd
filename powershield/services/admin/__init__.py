from powershield.services.admin.credential_store import CredentialStore
from powershield.services.admin.auth_service import AdminAuthService
from powershield.services.admin.validation import validate_admin_data

__all__ = ["CredentialStore", "AdminAuthService", "validate_admin_data"]
