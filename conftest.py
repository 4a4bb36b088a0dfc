"""
Root pytest configuration for the Django project.

This module supplies safe environment defaults and configures Django before
any test module is imported. App-specific fixtures are defined in each
app's tests/conftest.py.
"""

import os

import django

# Settings read these at import time; real values in the environment win
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("USE_LOCMEM_CACHE", "True")
os.environ.setdefault("SECURE_SSL_REDIRECT", "False")
os.environ.setdefault("ALLOWED_HOSTS", "testserver,localhost")
os.environ.setdefault("PAYSTACK_SECRET_KEY", "sk_test_webhook_secret")
os.environ.setdefault("PAYSTACK_BASE_URL", "https://api.paystack.test")
os.environ.setdefault("FRONT_URL", "https://app.example.test")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()
