from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Dict, List, Tuple


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class AccountLockRegistry:
    """Per-account mutexes shared by every LedgerService in the process.

    ``hold`` always acquires in ascending id order, so two transfers moving
    funds in opposite directions between the same accounts cannot deadlock.
    An entry lives only while some caller holds or waits on it, so ids that
    are looked up once (or never exist) leave nothing behind.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: Dict[int, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def is_locked(self, account_id: int) -> bool:
        with self._guard:
            entry = self._entries.get(account_id)
            return entry is not None and entry.lock.locked()

    def _checkout(self, account_id: int) -> threading.Lock:
        with self._guard:
            entry = self._entries.get(account_id)
            if entry is None:
                entry = self._entries[account_id] = _Entry()
            entry.holders += 1
            return entry.lock

    def _checkin(self, account_id: int) -> None:
        with self._guard:
            entry = self._entries[account_id]
            entry.holders -= 1
            if not entry.holders:
                del self._entries[account_id]

    @contextmanager
    def hold(self, *account_ids: int) -> Iterator[None]:
        acquired: List[Tuple[int, threading.Lock]] = []
        try:
            for account_id in sorted(set(account_ids)):
                lock = self._checkout(account_id)
                try:
                    lock.acquire()
                except BaseException:
                    self._checkin(account_id)
                    raise
                acquired.append((account_id, lock))
            yield
        finally:
            for account_id, lock in reversed(acquired):
                lock.release()
                self._checkin(account_id)
