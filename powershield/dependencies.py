"""
FastAPI dependencies for the PowerShield API.

Provides dependency injection for all services. Services are built once
in the application lifespan by init_all_services() and handed to route
handlers through the getters below.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import PasswordHasher, TokenService
from powershield.config import Settings
from powershield.middleware.auth import AuthMiddleware, require_role
from powershield.models import AdminClaims, AdminRole

# Admin services
from powershield.services.admin.credential_store import CredentialStore
from powershield.services.admin.auth_service import AdminAuthService

# Content services
from powershield.services.user.user_service import UserService
from powershield.services.gallery.gallery_service import GalleryService
from powershield.services.contact.contact_service import ContactService
from powershield.services.careers.job_service import JobService
from powershield.services.careers.application_service import ApplicationService


# ─────────────────────────────────────────────────────────────────
# Global service instances
# ─────────────────────────────────────────────────────────────────

# Admin
_credential_store: Optional[CredentialStore] = None
_admin_auth_service: Optional[AdminAuthService] = None
_auth_middleware: Optional[AuthMiddleware] = None

# Content
_user_service: Optional[UserService] = None
_gallery_service: Optional[GalleryService] = None
_contact_service: Optional[ContactService] = None
_job_service: Optional[JobService] = None
_application_service: Optional[ApplicationService] = None


# ─────────────────────────────────────────────────────────────────
# Initialization functions
# ─────────────────────────────────────────────────────────────────

def init_admin_services(db: AsyncIOMotorDatabase, settings: Settings) -> None:
    """Initialize credential store, login and the auth gate."""
    global _credential_store, _admin_auth_service, _auth_middleware

    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    token_service = TokenService(settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    _credential_store = CredentialStore(db=db, hasher=hasher)
    _admin_auth_service = AdminAuthService(
        credential_store=_credential_store,
        hasher=hasher,
        token_service=token_service,
    )
    _auth_middleware = AuthMiddleware(
        token_service=token_service,
        credential_store=_credential_store,
    )


def init_content_services(db: AsyncIOMotorDatabase, settings: Settings) -> None:
    """Initialize user, gallery, contact and careers services."""
    global _user_service, _gallery_service, _contact_service, _job_service, _application_service

    max_page = settings.MAX_PAGE_SIZE

    _user_service = UserService(db, page_size=settings.USERS_PAGE_SIZE, max_page_size=max_page)
    _gallery_service = GalleryService(
        db,
        page_size=settings.GALLERY_PAGE_SIZE,
        max_page_size=max_page,
        featured_limit=settings.FEATURED_GALLERY_LIMIT,
    )
    _contact_service = ContactService(db, page_size=settings.CONTACTS_PAGE_SIZE, max_page_size=max_page)
    _job_service = JobService(db, page_size=settings.JOBS_PAGE_SIZE, max_page_size=max_page)
    _application_service = ApplicationService(
        db,
        job_service=_job_service,
        page_size=settings.APPLICATIONS_PAGE_SIZE,
        max_page_size=max_page,
    )


def init_all_services(db: AsyncIOMotorDatabase, settings: Settings) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: MongoDB database connection
        settings: Application settings (signing secret, page sizes)
    """
    init_admin_services(db, settings)
    init_content_services(db, settings)


# ─────────────────────────────────────────────────────────────────
# Admin getters
# ─────────────────────────────────────────────────────────────────

def get_credential_store() -> CredentialStore:
    """Get admin credential store."""
    if _credential_store is None:
        raise RuntimeError("Admin services not initialized.")
    return _credential_store


def get_admin_auth_service() -> AdminAuthService:
    """Get admin login service."""
    if _admin_auth_service is None:
        raise RuntimeError("Admin services not initialized.")
    return _admin_auth_service


def get_auth_middleware() -> AuthMiddleware:
    """Get auth middleware instance."""
    if _auth_middleware is None:
        raise RuntimeError("Admin services not initialized.")
    return _auth_middleware


async def require_admin(
    request: Request,
    auth_middleware: Annotated[AuthMiddleware, Depends(get_auth_middleware)]
) -> AdminClaims:
    """Dependency that requires an authenticated, active admin."""
    return await auth_middleware.require_auth(request)


async def require_super_admin(
    admin: Annotated[AdminClaims, Depends(require_admin)]
) -> AdminClaims:
    """Dependency that requires the super_admin role."""
    require_role(admin, AdminRole.SUPER_ADMIN)
    return admin


# ─────────────────────────────────────────────────────────────────
# Content getters
# ─────────────────────────────────────────────────────────────────

def get_user_service() -> UserService:
    """Get user service instance."""
    if _user_service is None:
        raise RuntimeError("Content services not initialized.")
    return _user_service


def get_gallery_service() -> GalleryService:
    """Get gallery service instance."""
    if _gallery_service is None:
        raise RuntimeError("Content services not initialized.")
    return _gallery_service


def get_contact_service() -> ContactService:
    """Get contact service instance."""
    if _contact_service is None:
        raise RuntimeError("Content services not initialized.")
    return _contact_service


def get_job_service() -> JobService:
    """Get job service instance."""
    if _job_service is None:
        raise RuntimeError("Content services not initialized.")
    return _job_service


def get_application_service() -> ApplicationService:
    """Get job application service instance."""
    if _application_service is None:
        raise RuntimeError("Content services not initialized.")
    return _application_service
