"""
URL configuration for the Django application.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/payments/              - Payment endpoints
        chip-in/                   - Start a chip-in donation (POST, authenticated)
        verify-payment/            - Confirm a payment by reference (GET)
        verify-account/            - Resolve a bank account name (POST)
        webhook/paystack/          - Paystack webhook endpoint (POST)
    /api/v1/events/                - Event endpoints
        {id}/payout-account/       - Register the host's payout account (POST)
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("events/", include("events.urls")),
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("admin/", admin.site.urls),
    path("health/", health_check, name="health_check"),
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Events Payments Admin"
admin.site.site_title = "Events Payments"
admin.site.index_title = "Donations, settlements and events"
