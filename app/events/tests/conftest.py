"""
Pytest fixtures for event tests.
"""

import pytest

from events.services import EventService
from events.tests.factories import EventFactory


@pytest.fixture
def event(db, user):
    """Private donation event created by user."""
    return EventFactory(creator=user)


@pytest.fixture
def mock_paystack(mocker):
    """Inject a mocked Paystack adapter into EventService."""
    adapter = mocker.MagicMock()
    EventService.set_paystack_adapter(adapter)
    yield adapter
    EventService.set_paystack_adapter(None)
