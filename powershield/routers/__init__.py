from powershield.routers.admin import router as admin_router
from powershield.routers.users import router as users_router
from powershield.routers.gallery import router as gallery_router
from powershield.routers.contacts import router as contacts_router
from powershield.routers.careers import router as careers_router
from powershield.routers.careers import admin_router as admin_careers_router
from powershield.routers.applications import router as applications_router
from powershield.routers.applications import admin_router as admin_applications_router

__all__ = [
    "admin_router",
    "users_router",
    "gallery_router",
    "contacts_router",
    "careers_router",
    "admin_careers_router",
    "applications_router",
    "admin_applications_router",
]
