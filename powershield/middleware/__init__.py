from powershield.middleware.auth import AuthMiddleware, require_role
from powershield.middleware.request_logger import RequestLoggerMiddleware

__all__ = ["AuthMiddleware", "require_role", "RequestLoggerMiddleware"]
