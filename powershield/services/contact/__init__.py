from powershield.services.contact.contact_service import ContactService

__all__ = ["ContactService"]
