"""
URL configuration for the payments app.

Routes:
    - POST /chip-in/ - Start a chip-in
    - GET /verify-payment/ - Confirm a payment by reference
    - POST /verify-account/ - Resolve a bank account holder name
    - POST /webhook/paystack/ - Paystack webhook endpoint

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.
"""

from django.urls import path

from payments.views import ChipInView, VerifyBankAccountView, VerifyPaymentView
from payments.webhooks.views import paystack_webhook

app_name = "payments"

urlpatterns = [
    path("chip-in/", ChipInView.as_view(), name="chip-in"),
    path("verify-payment/", VerifyPaymentView.as_view(), name="verify-payment"),
    path("verify-account/", VerifyBankAccountView.as_view(), name="verify-account"),
    # Webhook endpoints
    path("webhook/paystack/", paystack_webhook, name="paystack-webhook"),
]
