"""Generation counters for overlapping requests.

Each load takes a ticket before awaiting the backend; when the result comes
back it is applied only if no newer ticket has been issued since.
"""

from __future__ import annotations

import logging

from stratify.core.metrics import STALE_RESULTS_DISCARDED_TOTAL
from stratify.core.structured_logging import log_json

logger = logging.getLogger(__name__)


class RequestSequencer:
    """Monotonic ticket issuer for one piece of view state."""

    def __init__(self, name: str):
        self.name = name
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def invalidate(self) -> None:
        """Make every outstanding ticket stale."""
        self._latest += 1

    def is_latest(self, ticket: int) -> bool:
        return ticket == self._latest

    def accept(self, ticket: int) -> bool:
        """Like :meth:`is_latest`, but records a discarded result."""
        if ticket == self._latest:
            return True
        STALE_RESULTS_DISCARDED_TOTAL.labels(view=self.name).inc()
        log_json(
            logger,
            logging.DEBUG,
            "stale_result_discarded",
            view=self.name,
            ticket=ticket,
            latest=self._latest,
        )
        return False
