"""Digital twins: registered ids with topic-to-source account mappings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable

from robopallets.support import DispatchError, EventLog, Origin, ensure_signed

_TOPIC_LEN = 32


@dataclass(frozen=True)
class NewDigitalTwin:
    """A new digital twin was registered."""

    sender: Any
    id: int


@dataclass(frozen=True)
class TopicChanged:
    """A digital twin topic got a new source account."""

    sender: Any
    id: int
    topic: bytes
    source: Any


class DigitalTwin:
    """Registry of digital twins and their data sources."""

    def __init__(self, events: EventLog | None = None) -> None:
        self.events = events if events is not None else EventLog()
        self.total: int | None = None
        self._owners: dict[int, Any] = {}
        self._twins: dict[int, dict[bytes, Any]] = {}

    def create(self, origin: Origin) -> int:
        """Register a new digital twin owned by the sender; return its id."""
        sender = ensure_signed(origin)
        twin_id = self.total or 0
        self.total = twin_id + 1
        self._owners[twin_id] = sender
        self.events.deposit(NewDigitalTwin(sender, twin_id))
        return twin_id

    def set_source(self, origin: Origin, id: int, topic: bytes, source: Hashable) -> None:
        """Set the source account for a topic of a twin owned by the sender."""
        sender = ensure_signed(origin)
        topic = bytes(topic)
        if len(topic) != _TOPIC_LEN:
            raise ValueError("topic must be a 32-byte hash")
        if self._owners.get(id) != sender:
            raise DispatchError("sender should be a twin owner")
        self.events.deposit(TopicChanged(sender, id, topic, source))
        self._twins.setdefault(id, {})[topic] = source

    def owner(self, id: int) -> Any:
        """Owner of the twin, or None."""
        return self._owners.get(id)

    def digital_twin(self, id: int) -> dict[bytes, Any] | None:
        """Topics of the twin ordered by topic hash, or None if none were set."""
        twin = self._twins.get(id)
        if twin is None:
            return None
        return dict(sorted(twin.items()))