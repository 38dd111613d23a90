from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator


class BusyGate:
    """Local flag that keeps a control from submitting twice concurrently.

    Advisory only: two controllers over the same record can still race.
    """

    def __init__(self) -> None:
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[None]:
        self._busy = True
        try:
            yield
        finally:
            self._busy = False
