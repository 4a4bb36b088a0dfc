"""
Shared building blocks for the events and payments apps.

    core.services            BaseService, ServiceResult
    core.exceptions          BaseApplicationError and its HTTP-mapped subclasses
    core.exception_handlers  DRF EXCEPTION_HANDLER rendering those errors
    core.models              BaseModel, UUIDPrimaryKeyMixin (import directly;
                             importing models here would load them before the
                             app registry is ready)
    core.views               health_check
"""

from .exceptions import BaseApplicationError, ConflictError
from .services import BaseService, ServiceResult

__all__ = [
    "BaseApplicationError",
    "BaseService",
    "ConflictError",
    "ServiceResult",
]
