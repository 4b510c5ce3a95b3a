"""Robot launch: publish a parameter for a robot to act on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from robopallets.support import EventLog, Origin, ensure_signed


@dataclass(frozen=True)
class NewLaunch:
    """A robot was launched with a parameter."""

    sender: Any
    robot: Any
    param: Any


class Launch:
    """Keeps the latest launch parameter and announces launches."""

    def __init__(self, events: EventLog | None = None) -> None:
        self.events = events if events is not None else EventLog()
        self.goal: Any = None

    def launch(self, origin: Origin, robot: Any, param: Any) -> None:
        """Launch ``robot`` with ``param``."""
        sender = ensure_signed(origin)
        self.goal = param
        self.events.deposit(NewLaunch(sender, robot, param))