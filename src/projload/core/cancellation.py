"""
Cooperative cancellation shared by every step of a load.
"""

from __future__ import annotations

import asyncio
import threading


class CancellationToken:
    """
    Thread-safe cancellation flag.

    One token threads through path resolution, evaluation and the worklist
    drain. Cancellation surfaces as ``asyncio.CancelledError``, never as a
    load diagnostic.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise asyncio.CancelledError("project load cancelled")

