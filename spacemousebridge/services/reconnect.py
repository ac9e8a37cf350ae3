"""Reconnect scheduling policy."""

from __future__ import annotations

import logging

import tenacity

logger = logging.getLogger("spacemousebridge.reconnect")


class ReconnectPolicy:
    """Delays between automatic reconnect attempts.

    The first attempt after a disconnect waits ``first_delay``; every
    attempt after a failure waits ``retry_interval``. A successful
    connection resets the sequence.
    """

    def __init__(self, first_delay: float, retry_interval: float) -> None:
        self.first_delay = first_delay
        self.retry_interval = retry_interval
        self._wait = tenacity.wait_chain(
            tenacity.wait_fixed(first_delay),
            tenacity.wait_fixed(retry_interval),
        )
        self._attempt = 0

    @property
    def attempt(self) -> int:
        return self._attempt

    @property
    def active(self) -> bool:
        """True while a reconnect sequence is in progress."""
        return self._attempt > 0

    def next_delay(self) -> float:
        self._attempt += 1
        retry_state = tenacity.RetryCallState(
            retry_object=tenacity.AsyncRetrying(),
            fn=None,
            args=(),
            kwargs={},
        )
        retry_state.attempt_number = self._attempt
        delay = float(self._wait(retry_state))
        logger.debug("Reconnect attempt %d scheduled in %.1fs", self._attempt, delay)
        return delay

    def reset(self) -> None:
        self._attempt = 0


__all__ = ["ReconnectPolicy"]
