"""Deferred result objects for adapter writes.

Every write the map forwards to its adapter is wrapped in a
:class:`WriteReceipt`.  For adapters that defer writes the receipt is the only
place a failure shows up: it is never raised where ``set``/``delete`` was
called.  Instead the :class:`WriteTracker` delivers it on an explicit error
channel:

1. the receipt itself (``failed`` / ``exception()`` / ``await receipt``),
2. the map's ``on_write_error`` callback,
3. the tracker's ``failed`` list (bounded; drained by ``drain_failed()``),
4. a ``write_failed`` warning log event.

The tracker also holds a strong reference to every in-flight task so the
event loop cannot garbage-collect a pending write.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable, Generator
from typing import Any

import structlog

from persistmap.interfaces.store_adapter import Key
from persistmap.utils.errors import AdapterError
from persistmap.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

DEFAULT_MAX_FAILED = 100


class WriteReceipt:
    """Handle on one adapter write (``set``, ``delete`` or ``bulk_delete``)."""

    def __init__(self, operation: str, key: Key | None, task: asyncio.Task[None]) -> None:
        self._operation = operation
        self._key = key
        self._task = task

    @property
    def operation(self) -> str:
        return self._operation

    @property
    def key(self) -> Key | None:
        return self._key

    def done(self) -> bool:
        return self._task.done()

    @property
    def failed(self) -> bool:
        return self._task.done() and not self._task.cancelled() and self._task.exception() is not None

    def exception(self) -> BaseException | None:
        """Return the write's failure, or ``None`` if it succeeded or is still running."""
        if not self._task.done() or self._task.cancelled():
            return None
        return self._task.exception()

    def __await__(self) -> Generator[Any, None, None]:
        return self._task.__await__()

    def __repr__(self) -> str:
        if not self._task.done():
            status = "pending"
        elif self.failed:
            status = "failed"
        else:
            status = "ok"
        return f"WriteReceipt({self._operation!r}, key={self._key!r}, {status})"


class WriteTracker:
    """Starts adapter writes as tasks and routes their failures."""

    def __init__(
        self,
        provider_name: str,
        on_error: Callable[[WriteReceipt], None] | None = None,
        max_failed: int = DEFAULT_MAX_FAILED,
    ) -> None:
        self._provider_name = provider_name
        self._on_error = on_error
        self._pending: set[WriteReceipt] = set()
        self._failed: deque[WriteReceipt] = deque(maxlen=max_failed)
        self._last: WriteReceipt | None = None

    @property
    def pending(self) -> frozenset[WriteReceipt]:
        return frozenset(self._pending)

    @property
    def failed(self) -> list[WriteReceipt]:
        return list(self._failed)

    def drain_failed(self) -> list[WriteReceipt]:
        """Return the retained failures, oldest first, and clear them."""
        drained = list(self._failed)
        self._failed.clear()
        return drained

    @property
    def last(self) -> WriteReceipt | None:
        return self._last

    def start(self, operation: str, key: Key | None, write: Awaitable[None]) -> WriteReceipt:
        """Schedule *write* on the running loop and return its receipt."""
        task = asyncio.get_running_loop().create_task(self._guarded(operation, key, write))
        receipt = WriteReceipt(operation, key, task)
        self._last = receipt
        return receipt

    def detach(self, receipt: WriteReceipt) -> None:
        """Track *receipt* as fire-and-forget: failures go to the error channel."""
        self._pending.add(receipt)
        receipt._task.add_done_callback(lambda _task: self._settle(receipt))

    async def flush(self) -> list[WriteReceipt]:
        """Wait for every detached write still in flight; return those that failed."""
        waiting = list(self._pending)
        if waiting:
            await asyncio.gather(*(r._task for r in waiting), return_exceptions=True)
        return [r for r in waiting if r.failed]

    async def _guarded(self, operation: str, key: Key | None, write: Awaitable[None]) -> None:
        try:
            await write
        except Exception as exc:
            raise AdapterError(
                f"{operation} failed for key {key!r}: {exc}",
                provider_name=self._provider_name,
            ) from exc

    def _settle(self, receipt: WriteReceipt) -> None:
        self._pending.discard(receipt)
        exc = receipt.exception()
        if exc is None:
            return
        self._failed.append(receipt)
        _logger.warning(
            "write_failed",
            provider=self._provider_name,
            operation=receipt.operation,
            key=receipt.key,
            error=str(exc),
        )
        if self._on_error is not None:
            self._on_error(receipt)
