"""Single-flight guard and cooperative cancellation for agent runs."""

import threading

from ..errors import GenerationCancelledError


class SingleFlightGuard:
    """Admits one request at a time; concurrent requests are refused, not queued."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def try_acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()


class CancellationToken:
    """Flag checked between emitted tokens to stop a run early."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelledError("Generation stopped")
