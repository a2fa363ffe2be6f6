# FILE: vocapp/execution/pending.py
"""
Pending-command store: two-phase propose / approve / reject.

Tokens are random UUIDs. A token is consumed at most once: approve and
reject both remove it. Tokens older than the TTL are invalid even before
the sweeper removes them.
"""
from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Awaitable, Callable, Dict, Optional

from vocapp import config
from vocapp.execution.executor import execute_command
from vocapp.execution.schemas import CommandProposal, ExecutionResult, PendingCommand

logger = logging.getLogger(__name__)

Executor = Callable[[str], Awaitable[ExecutionResult]]


class PendingCommandStore:
    def __init__(self, ttl_s: float = config.PENDING_TTL_S, clock: Callable[[], float] = time.time):
        self.ttl_s = ttl_s
        self._clock = clock
        self._items: Dict[str, PendingCommand] = {}
        self._lock = threading.Lock()

    def _expired(self, item: PendingCommand, now: float) -> bool:
        return now - item.created_at > self.ttl_s

    def propose(self, command: str, message: str) -> CommandProposal:
        token = str(uuid.uuid4())
        with self._lock:
            self._items[token] = PendingCommand(command=command, message=message, created_at=self._clock())
        logger.info(f"[pending] staged command {command!r}")
        return CommandProposal(token=token, command=command, message=message)

    def take(self, token: Optional[str]) -> Optional[PendingCommand]:
        """Remove and return a live entry; None for unknown or expired tokens."""
        if not token:
            return None
        with self._lock:
            item = self._items.pop(token, None)
        if item is None or self._expired(item, self._clock()):
            return None
        return item

    async def approve(self, token: Optional[str], executor: Optional[Executor] = None) -> Optional[ExecutionResult]:
        """Consume ``token`` and run its command. None means invalid or expired."""
        item = self.take(token)
        if item is None:
            return None
        run = executor or execute_command
        return await run(item.command)

    def reject(self, token: Optional[str]) -> bool:
        """Drop ``token`` without running it. False when it was not live."""
        return self.take(token) is not None

    def sweep(self) -> int:
        """Remove expired entries. Returns the count removed."""
        now = self._clock()
        with self._lock:
            stale = [t for t, item in list(self._items.items()) if self._expired(item, now)]
            for token in stale:
                self._items.pop(token, None)
        if stale:
            logger.debug(f"[pending] swept {len(stale)} expired commands")
        return len(stale)

    def __contains__(self, token: str) -> bool:
        with self._lock:
            return token in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


_store: Optional[PendingCommandStore] = None


def get_pending_store() -> PendingCommandStore:
    global _store
    if _store is None:
        _store = PendingCommandStore()
    return _store
