"""
Unit tests for ConsoleEventPublisher adapter.

Tests verify the console publisher implements EventPublisher protocol
and logs events in the expected format.
"""

import logging

import pytest

from src.adapters.events.console import ConsoleEventPublisher
from src.domain.ports import Event, EventPublisher


class TestConsoleEventPublisherProtocol:
    """Tests for EventPublisher protocol compliance."""

    def test_implements_event_publisher_protocol(self) -> None:
        """ConsoleEventPublisher implements EventPublisher protocol."""
        publisher = ConsoleEventPublisher()

        def accepts_publisher(p: EventPublisher) -> None:
            pass

        accepts_publisher(publisher)
        assert callable(publisher.publish)

    def test_no_explicit_inheritance(self) -> None:
        """ConsoleEventPublisher uses structural subtyping, not inheritance."""
        assert ConsoleEventPublisher.__bases__ == (object,)


class TestPublish:
    """Tests for publish method."""

    def test_publish_logs_at_info(self, caplog: pytest.LogCaptureFixture) -> None:
        """Each event is one INFO record."""
        publisher = ConsoleEventPublisher()

        with caplog.at_level(logging.INFO):
            publisher.publish(Event(7, "DomainRegistered", "owner-1", {"domain": "example.btc"}))

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO

    def test_publish_format(self, caplog: pytest.LogCaptureFixture) -> None:
        """Log line carries name, height, caller and JSON payload."""
        publisher = ConsoleEventPublisher()

        with caplog.at_level(logging.INFO):
            publisher.publish(
                Event(7, "DisputeResolved", "mod", {"status": True, "domain": "example.btc"})
            )

        assert "[EVENT] DisputeResolved" in caplog.text
        assert "height=7" in caplog.text
        assert "caller=mod" in caplog.text
        assert '{"domain": "example.btc", "status": true}' in caplog.text

    def test_publish_returns_none(self) -> None:
        """Method returns None (fire-and-forget)."""
        publisher = ConsoleEventPublisher()
        assert publisher.publish(Event(1, "E", "c")) is None
