# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Grand-total publication.

`ChangeNotifier` is a single guarded comparison: a settled grand total is
passed to the subscribers only when it differs from the last value they
received. Publishing the same total any number of times notifies once.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

TotalCallback = Callable[[float], None]


class ChangeNotifier:
    """
    Publishes a total to subscribers at most once per distinct value.

    Args:
        callback: Optional first subscriber (`on_total_changed`)
        tolerance: Absolute difference at or below which a new total counts as
            unchanged; 0.0 compares exactly

    Example:
        ```python
        seen = []
        notifier = ChangeNotifier(seen.append)
        notifier.publish(1.0)  # True
        notifier.publish(1.0)  # False
        seen  # [1.0]
        ```
    """

    def __init__(self, callback: Optional[TotalCallback] = None, tolerance: float = 0.0):
        if tolerance < 0:
            raise ValueError("tolerance must be >= 0")
        self.tolerance = tolerance
        self._callbacks: List[TotalCallback] = []
        self._last_value: Optional[float] = None
        if callback is not None:
            self.subscribe(callback)

    @property
    def last_value(self) -> Optional[float]:
        """Last total passed to subscribers; None before the first publication."""
        return self._last_value

    def subscribe(self, callback: TotalCallback) -> None:
        self._callbacks.append(callback)

    def unsubscribe(self, callback: TotalCallback) -> None:
        self._callbacks.remove(callback)

    def has_changed(self, total: float) -> bool:
        if self._last_value is None:
            return True
        return abs(total - self._last_value) > self.tolerance

    def publish(self, total: float) -> bool:
        """
        Notify subscribers if `total` differs from the last published value.

        `last_value` is updated before any subscriber runs. A subscriber that
        raises does not stop the others: every subscriber receives the total,
        then the first exception is re-raised. The same total is not re-sent
        on the next publication.

        Returns:
            True when subscribers were notified
        """
        if not self.has_changed(total):
            return False
        self._last_value = total
        logger.debug(f"Publishing total {total} to {len(self._callbacks)} subscriber(s)")
        error: Optional[Exception] = None
        for callback in list(self._callbacks):
            try:
                callback(total)
            except Exception as e:
                logger.error(f"Subscriber {callback!r} failed on total {total}: {e}")
                if error is None:
                    error = e
        if error is not None:
            raise error
        return True

    def reset(self) -> None:
        """Forget the last published value; the next publication always notifies."""
        self._last_value = None
