"""
Base service layer patterns for business logic encapsulation.

- ServiceResult: result wrapper for expected outcomes (validation, business rules)
- BaseService: base class with a per-service logger and transaction helper

Views handle HTTP concerns, models handle data, services handle logic.
Expected failures come back as ServiceResult.failure(); terminal or
unexpected failures are raised as core.exceptions errors.

Usage:
    from core.services import BaseService, ServiceResult

    class EventService(BaseService):
        @classmethod
        def rename(cls, event, title: str) -> ServiceResult[Event]:
            if not title.strip():
                return ServiceResult.failure("Title required", "TITLE_REQUIRED")

            with cls.atomic():
                event.title = title
                event.save(update_fields=["title", "updated_at"])

            cls.get_logger().info(f"Renamed event {event.id}")
            return ServiceResult.success(event)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    def to_response(self) -> dict[str, Any]:
        """
        Convert to API response format.

        Returns:
            Dict with success status and data or error details
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {
            "success": False,
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Services are stateless and expose classmethods. Use ServiceResult for
    expected failures and raise exceptions for everything else.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get a logger named after the service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around Django's transaction.atomic() that keeps
        transaction boundaries explicit in service code.
        """
        with transaction.atomic():
            yield
