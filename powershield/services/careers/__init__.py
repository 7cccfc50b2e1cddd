from powershield.services.careers.job_service import JobService
from powershield.services.careers.application_service import ApplicationService

__all__ = ["JobService", "ApplicationService"]
