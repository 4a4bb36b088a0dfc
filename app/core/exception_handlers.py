"""
DRF exception handler that understands application errors.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Domain exceptions raised
from services propagate through API views untouched and are rendered here,
so views only catch what they need to translate differently.
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Render BaseApplicationError as its to_dict() payload.

    Anything else falls through to DRF's default handler, which returns
    None for unknown exceptions and lets Django produce a 500.
    """
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'view'}: {exc.message}",
            extra={"error_code": exc.error_code, "details": exc.details},
        )
        return Response(exc.to_dict(), status=exc.http_status)

    return exception_handler(exc, context)
