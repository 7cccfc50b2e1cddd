from powershield.services.gallery.gallery_service import GalleryService

__all__ = ["GalleryService"]
