"""
Project-wide pytest configuration.

Provides auto-marking by filename and fixtures shared across apps.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import pytest


def pytest_configure():
    """Test-only settings tweaks."""
    from django.conf import settings

    # Use fast password hasher for tests
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full payment journeys)
    - test_views.py, test_services.py, test_tasks.py, etc. → integration
    - test_models.py, test_fees.py, test_adapters.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_handlers.py",
        "test_lifecycle.py",
        "test_confirmation.py",
        "test_settlement_reconciliation.py",
        "test_settlement_worker.py",
        "test_commands.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_fees.py",
        "test_adapters.py",
        "test_paystack_adapter.py",
        "test_payment_types.py",
        "test_exceptions.py",
        "test_exception_handlers.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def user(db):
    """Create a test user."""
    from events.tests.factories import UserFactory

    return UserFactory()


@pytest.fixture
def authenticated_client(api_client, user):
    """API client authenticated as user."""
    api_client.force_authenticate(user=user)
    return api_client
