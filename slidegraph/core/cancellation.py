import asyncio

from slidegraph.exceptions import ImportCancelledError


class CancellationToken:
    """Cooperative cancellation shared by the session and one running import."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ImportCancelledError()
