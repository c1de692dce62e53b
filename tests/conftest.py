"""
Shared fixtures for the DataChat test suite.
"""
import pytest
from fastapi.testclient import TestClient

from datachat.core.exceptions import ExternalModelUnavailable
from datachat.core.query_bridge import QueryBridge
from datachat.db.session import Store
from datachat.main import create_app
from datachat.services.conversation_service import ConversationService
from datachat.services.ingestion_service import IngestionService


class FakeClaude:
    """Stands in for ClaudeService: returns canned answers, records prompts."""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    def complete(self, prompt, max_tokens=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def store():
    """Fresh in-memory store."""
    return Store()


@pytest.fixture
def fake_claude():
    """Fake model answering with a fenced JSON count query."""
    return FakeClaude(
        '```json\n{"query": "SELECT COUNT(*) FROM table_name", "explanation": "Counts the rows."}\n```'
    )


@pytest.fixture
def offline_bridge():
    """Bridge without a language model."""
    return QueryBridge(claude=None, unavailable_reason="ANTHROPIC_API_KEY is not configured")


@pytest.fixture
def failing_bridge():
    """Bridge whose model always times out."""
    return QueryBridge(claude=FakeClaude(error=ExternalModelUnavailable("Claude request timed out")))


@pytest.fixture
def ingestion(store):
    return IngestionService(store)


@pytest.fixture
def people_dataset(ingestion):
    """CSV dataset with two people."""
    return ingestion.ingest(b"name,age\nAlice,30\nBob,25", "people.csv").dataset


@pytest.fixture
def make_conversation(store):
    """Factory: ConversationService over the shared store with a given bridge."""
    def _make(bridge, **kwargs):
        return ConversationService(store, bridge, **kwargs)
    return _make


@pytest.fixture
def client(store, fake_claude):
    """TestClient over an app wired to the fake model."""
    app = create_app(store=store, bridge=QueryBridge(claude=fake_claude))
    with TestClient(app) as test_client:
        yield test_client
