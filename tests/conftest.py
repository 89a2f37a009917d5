"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Configuration: graph_config, mock_settings
2. Messenger core: messenger, recorder, page_token_resolver
3. Payload builders: payloads
4. Infrastructure: mock_logfire, logfire_capture, test_client
"""

import os
from contextlib import contextmanager
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import logfire

from src.config import Settings
from src.models.config_models import GraphAPIConfig
from src.services.messenger import Messenger

TEST_GRAPH_URL = "https://graph.test"
TEST_VERIFY_TOKEN = "verify-123"
TEST_PAGE_TOKEN = "TOK"


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def graph_config():
    """Graph API config pointing at a fake endpoint."""
    return GraphAPIConfig(base_url=TEST_GRAPH_URL, api_version="v2.6", timeout_seconds=5.0)


@pytest.fixture
def mock_settings(monkeypatch):
    """Mock application settings."""
    settings = Settings(
        facebook_verify_token="test-verify-token",
        facebook_page_access_token="test-page-token",
        facebook_graph_api_url=TEST_GRAPH_URL,
        facebook_graph_api_version="v2.6",
        env="local",
        logfire_token=None,
        sentry_dsn=None,
    )

    monkeypatch.setattr("src.config.get_settings", lambda: settings)
    # Patch where get_settings is used so request handlers see the mock
    monkeypatch.setattr("src.main.get_settings", lambda: settings)
    monkeypatch.setattr("src.api.webhook.get_settings", lambda: settings)
    monkeypatch.setattr("src.logging_config.get_settings", lambda: settings)
    return settings


# =============================================================================
# Messenger Core
# =============================================================================


class Recorder:
    """Collects handler invocations in call order."""

    def __init__(self):
        self.calls: list[tuple[str, object, object]] = []

    async def on_message(self, messenger, message, response):
        self.calls.append(("message", message, response))

    async def on_delivery(self, messenger, delivery, response):
        self.calls.append(("delivery", delivery, response))

    @property
    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.calls]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def page_token_resolver():
    """Resolver returning TOK for every page."""
    return AsyncMock(return_value=TEST_PAGE_TOKEN)


@pytest.fixture
def messenger(graph_config, page_token_resolver, recorder):
    """Messenger with a resolver and recording handlers registered."""
    m = Messenger(verify_token=TEST_VERIFY_TOKEN, config=graph_config)
    m.on_page_token(page_token_resolver)
    m.on_message(recorder.on_message)
    m.on_delivery(recorder.on_delivery)
    return m


# =============================================================================
# Payload Builders
# =============================================================================


class Payloads:
    """Builders for webhook payloads and messaging events."""

    @staticmethod
    def text_event(sender=7, recipient=9, timestamp=1000, text="hi", mid="mid.1"):
        return {
            "sender": {"id": sender},
            "recipient": {"id": recipient},
            "timestamp": timestamp,
            "message": {"mid": mid, "seq": 1, "text": text},
        }

    @staticmethod
    def delivery_event(sender=7, recipient=9, timestamp=1000, watermark=2000):
        return {
            "sender": {"id": sender},
            "recipient": {"id": recipient},
            "timestamp": timestamp,
            "delivery": {"mids": ["mid.1"], "watermark": watermark, "seq": 2},
        }

    @staticmethod
    def unknown_event(sender=7, recipient=9, timestamp=1000):
        return {
            "sender": {"id": sender},
            "recipient": {"id": recipient},
            "timestamp": timestamp,
            "postback": {"payload": "GET_STARTED"},
        }

    @staticmethod
    def make_payload(*entries, object="page"):
        """Build a webhook payload from (page_id, [events]) pairs."""
        return {
            "object": object,
            "entry": [
                {"id": page_id, "time": 1000, "messaging": events}
                for page_id, events in entries
            ],
        }


@pytest.fixture
def payloads():
    return Payloads


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Patches the module-level ``logfire`` of every module that logs, so
    tests can assert on structured log calls.
    """

    @contextmanager
    def mock_span(*args, **kwargs):
        yield MagicMock()

    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warn = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.span = mock_span

    for module in (
        "src.services.messenger",
        "src.services.facebook_service",
        "src.bot",
        "src.api.webhook",
        "src.middleware.correlation_id",
        "src.logging_config",
        "src.main",
    ):
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module


@pytest.fixture
def logfire_capture():
    """
    Capture Logfire logs for testing.

    This fixture patches Logfire to capture log calls for assertion.
    """
    captured_logs = []

    original_info = logfire.info
    original_warn = logfire.warn
    original_error = logfire.error

    def capture_info(*args, **kwargs):
        captured_logs.append(("info", args, kwargs))
        return original_info(*args, **kwargs)

    def capture_warn(*args, **kwargs):
        captured_logs.append(("warn", args, kwargs))
        return original_warn(*args, **kwargs)

    def capture_error(*args, **kwargs):
        captured_logs.append(("error", args, kwargs))
        return original_error(*args, **kwargs)

    with (
        patch("logfire.info", side_effect=capture_info),
        patch("logfire.warn", side_effect=capture_warn),
        patch("logfire.error", side_effect=capture_error),
    ):
        yield captured_logs


@pytest.fixture
def test_client(mock_settings, mock_logfire, messenger):
    """FastAPI TestClient wired to the ``messenger`` fixture."""
    from fastapi.testclient import TestClient

    from src.api.webhook import get_messenger
    from src.main import app

    app.dependency_overrides[get_messenger] = lambda: messenger
    yield TestClient(app)
    app.dependency_overrides.clear()
