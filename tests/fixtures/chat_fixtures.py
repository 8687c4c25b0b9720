"""Fixtures for conversations."""

import pytest

from app.services.conversation_service import ConversationService


@pytest.fixture(scope="function")
def setup_conversation(db, setup_user, setup_other_user):
    return ConversationService(db).get_or_create(setup_user.id, setup_other_user.id)
