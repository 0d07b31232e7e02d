"""Port for borrowing the process-wide persistence handle."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ConnectionProvider[THandle](Protocol):
    """Hands out the shared persistence handle.

    Callers borrow the handle for the duration of one call and never keep it.
    """

    async def acquire(self) -> THandle: ...
