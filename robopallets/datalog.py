"""Per-account data log kept in a fixed-size ring buffer."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Hashable, Iterator

from robopallets.support import (
    EventLog,
    Origin,
    PalletError,
    Timestamp,
    WeightInfo,
    ensure_signed,
)


class DatalogError(PalletError):
    """Errors raised by the data log."""


@dataclass(frozen=True)
class NewRecord:
    """New data was added to an account log."""

    sender: Any
    moment: int
    record: bytes


@dataclass(frozen=True)
class Erased:
    """An account log was erased."""

    sender: Any


def _next(value: int, max: int) -> int:
    value += 1
    return 0 if value == max else value


@dataclass
class RingBufferIndex:
    """Start and end pointers of a ring buffer."""

    start: int = 0
    end: int = 0

    def count(self, max: int) -> int:
        """Number of items held between start and end."""
        if self.start <= self.end:
            return self.end - self.start
        return max + self.end - self.start

    def add(self, max: int) -> int:
        """Advance the end pointer and return the slot to write into."""
        slot = self.end
        self.end = _next(self.end, max)
        if self.start == self.end:
            self.start = _next(self.start, max)
        return slot

    def iter(self, max: int) -> Iterator[int]:
        """Yield occupied slots oldest first, advancing start as it goes."""
        while self.start != self.end:
            slot = self.start
            self.start = _next(self.start, max)
            yield slot


@dataclass(frozen=True)
class RingBufferItem:
    """A stored record with the moment it was written."""

    moment: int = 0
    record: bytes = b""


class Datalog:
    """Keeps the last ``window_size - 1`` records of every account."""

    def __init__(
        self,
        window_size: int,
        time: Timestamp | None = None,
        events: EventLog | None = None,
        weight_info: WeightInfo | None = None,
        max_record_size: int | None = None,
    ) -> None:
        if window_size < 1:
            raise ValueError("window size must be positive")
        self.window_size = window_size
        self.time = time if time is not None else Timestamp()
        self.events = events if events is not None else EventLog()
        self.weight_info = weight_info if weight_info is not None else WeightInfo()
        self.max_record_size = max_record_size
        self._index: dict[Hashable, RingBufferIndex] = {}
        self._items: dict[tuple[Hashable, int], RingBufferItem] = {}

    def record(self, origin: Origin, record: bytes) -> None:
        """Store a new record for the sender."""
        sender = ensure_signed(origin)
        record = bytes(record)
        if self.max_record_size is not None and len(record) > self.max_record_size:
            raise DatalogError("RecordTooBig")
        now = self.time.now()
        item = RingBufferItem(now, record)
        index = self._index.setdefault(sender, RingBufferIndex())
        slot = index.add(self.window_size)
        self._items[(sender, slot)] = item
        self.events.deposit(NewRecord(sender, now, record))

    def erase(self, origin: Origin) -> int:
        """Clear the sender's log; return the weight of the erased items."""
        sender = ensure_signed(origin)
        index = self._index.pop(sender, RingBufferIndex())
        count = index.count(self.window_size)
        for slot in index.iter(self.window_size):
            self._items.pop((sender, slot), None)
        self.events.deposit(Erased(sender))
        return self.weight_info.erase(count)

    def data(self, account: Hashable) -> list[RingBufferItem]:
        """The account log, oldest record first."""
        index = self.datalog_index(account)
        return [self.datalog_item(account, slot) for slot in index.iter(self.window_size)]

    def datalog_index(self, account: Hashable) -> RingBufferIndex:
        """A copy of the account's ring buffer pointers."""
        return replace(self._index.get(account, RingBufferIndex()))

    def datalog_item(self, account: Hashable, slot: int) -> RingBufferItem:
        """The item in ``slot`` of the account log, or an empty item."""
        return self._items.get((account, slot), RingBufferItem())