"""
Console event publisher adapter - Implements EventPublisher protocol.

This module provides a console-based implementation of the domain's
event publisher port, logging every committed registry event so that
log shippers and indexers can follow the registry.
"""

import json
import logging

from src.domain.ports import Event

logger = logging.getLogger(__name__)


class ConsoleEventPublisher:
    """
    Implements EventPublisher protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def publish(self, event: Event) -> None:
        """
        Log one committed event at INFO level.

        Args:
            event: Event appended by a successful registry operation
        """
        logger.info(
            "[EVENT] %s height=%d caller=%s %s",
            event.name,
            event.height,
            event.caller,
            json.dumps(event.payload, sort_keys=True),
        )
