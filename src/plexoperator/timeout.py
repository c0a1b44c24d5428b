"""Timeout class for Kubernetes operations."""

from __future__ import annotations

from datetime import timedelta

from safir.datetime import current_datetime

__all__ = ["Timeout"]


class Timeout:
    """Track a cumulative timeout on a series of operations.

    A driver pass makes several Kubernetes API calls, all of which must
    finish within one overall timeout. Each call is given the time still
    remaining.
    """

    def __init__(self, timeout: timedelta) -> None:
        self._timeout = timeout
        self._start = current_datetime(microseconds=True)

    def left(self) -> float:
        """Return the amount of time remaining in seconds.

        Raises
        ------
        TimeoutError
            Raised if the timeout has expired.
        """
        elapsed = current_datetime(microseconds=True) - self._start
        left = (self._timeout - elapsed).total_seconds()
        if left <= 0.0:
            msg = f"Operation timed out after {elapsed.total_seconds()}s"
            raise TimeoutError(msg)
        return left
