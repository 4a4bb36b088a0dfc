"""
Webhook handling for Paystack events.

Webhooks are verified against the raw body, then processed synchronously:
a 500 response is how Paystack is told to retry.

Usage:
    # In urls.py
    from payments.webhooks.views import paystack_webhook

    urlpatterns = [
        path("webhook/paystack/", paystack_webhook, name="paystack_webhook"),
    ]
"""

from payments.webhooks.handlers import dispatch_webhook, register_handler
from payments.webhooks.views import paystack_webhook

__all__ = [
    "dispatch_webhook",
    "paystack_webhook",
    "register_handler",
]
