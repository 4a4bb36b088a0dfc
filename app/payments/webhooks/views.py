"""
Webhook endpoint view for Paystack.

Usage:
    # In urls.py
    from payments.webhooks.views import paystack_webhook

    urlpatterns = [
        path("webhook/paystack/", paystack_webhook, name="paystack_webhook"),
    ]
"""

from __future__ import annotations

import json
import logging

from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from core.exceptions import BaseApplicationError
from payments.adapters import PaystackAdapter
from payments.exceptions import WebhookSignatureError
from payments.webhooks.handlers import dispatch_webhook

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-paystack-signature"


@csrf_exempt
@require_POST
def paystack_webhook(request: HttpRequest) -> HttpResponse:
    """
    Receive and process Paystack webhook events.

    This view:
    1. Verifies the HMAC-SHA512 signature over the raw request body
    2. Parses the JSON body and dispatches on its "event" field
    3. Re-verifies the transaction with Paystack and completes it

    Returns:
        HttpResponse with status:
        - 200: Processed, or already processed (redelivery)
        - 400: Bad signature, bad payload, unsupported event or a
          business rule failure; Paystack should not retry
        - 500: Gateway, transient or unexpected failure; Paystack retries
    """
    payload = request.body

    try:
        PaystackAdapter.verify_webhook_signature(payload, request.headers.get(SIGNATURE_HEADER))
    except WebhookSignatureError:
        logger.warning("Webhook signature verification failed")
        return HttpResponse(status=400)

    try:
        event = json.loads(payload)
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return HttpResponse(status=400)

    if not isinstance(event, dict):
        return HttpResponse(status=400)

    try:
        outcome = dispatch_webhook(event)
    except BaseApplicationError as e:
        log_context = {"event_type": event.get("event"), "error_code": e.error_code}
        if e.http_status < 500:
            logger.warning(f"Webhook rejected: {e.message}", extra=log_context)
            return HttpResponse(status=400)
        logger.error(f"Webhook processing failed: {e.message}", extra=log_context)
        return HttpResponse(status=500)
    except Exception as e:
        logger.exception(f"Unexpected webhook processing error: {e}")
        return HttpResponse(status=500)

    logger.info(
        f"Webhook processed: {outcome.reference}",
        extra={
            "event_type": event.get("event"),
            "reference": outcome.reference,
            "payment_type": outcome.payment_type,
            "already_completed": outcome.already_completed,
        },
    )
    return HttpResponse(status=200)
