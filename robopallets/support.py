"""Shared runtime primitives: origins, dispatch errors, events, time and balances."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Hashable, Iterator


class DispatchError(Exception):
    """A call failed; the message names the reason."""

    def __init__(self, message: str = "Other") -> None:
        super().__init__(message)
        self.message = message


class BadOrigin(DispatchError):
    """The call was made from an origin it does not accept."""

    def __init__(self) -> None:
        super().__init__("BadOrigin")


class PalletError(DispatchError):
    """An error variant declared by a pallet."""

    def __init__(self, variant: str) -> None:
        super().__init__(variant)
        self.variant = variant


class OriginKind(Enum):
    SIGNED = "signed"
    ROOT = "root"
    NONE = "none"


@dataclass(frozen=True)
class Origin:
    """Who is dispatching a call."""

    kind: OriginKind
    account: Any = None


def signed(account: Hashable) -> Origin:
    """An origin signed by ``account``."""
    return Origin(OriginKind.SIGNED, account)


def root() -> Origin:
    """The privileged root origin."""
    return Origin(OriginKind.ROOT)


def none() -> Origin:
    """The unsigned origin used by inherents."""
    return Origin(OriginKind.NONE)


def ensure_signed(origin: Origin) -> Any:
    """Return the signing account, or raise BadOrigin."""
    if origin.kind is not OriginKind.SIGNED:
        raise BadOrigin()
    return origin.account


def ensure_root(origin: Origin) -> None:
    """Raise BadOrigin unless the origin is root."""
    if origin.kind is not OriginKind.ROOT:
        raise BadOrigin()


def ensure_none(origin: Origin) -> None:
    """Raise BadOrigin unless the origin is unsigned."""
    if origin.kind is not OriginKind.NONE:
        raise BadOrigin()


@dataclass
class EventLog:
    """Ordered list of events deposited by pallets."""

    events: list = field(default_factory=list)

    def deposit(self, event: Any) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()

    def __iter__(self) -> Iterator[Any]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> Any:
        return self.events[index]


@dataclass
class Timestamp:
    """Settable time source, in milliseconds."""

    moment: int = 0

    def now(self) -> int:
        return self.moment

    def set(self, moment: int) -> None:
        if moment < 0:
            raise ValueError("moment must not be negative")
        self.moment = moment


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise ValueError("amount must not be negative")


class Balances:
    """Reservable currency with free and reserved balances per account."""

    def __init__(self, initial: dict | None = None, existential_deposit: int = 0) -> None:
        self._free: dict = {}
        self._reserved: dict = {}
        self.existential_deposit = existential_deposit
        for account, amount in (initial or {}).items():
            _check_amount(amount)
            self._free[account] = amount
        self.total_issuance = sum(self._free.values())

    def free(self, account: Hashable) -> int:
        return self._free.get(account, 0)

    def reserved(self, account: Hashable) -> int:
        return self._reserved.get(account, 0)

    def _exists(self, account: Hashable) -> bool:
        return account in self._free or account in self._reserved

    def reserve(self, account: Hashable, amount: int) -> None:
        """Move ``amount`` from free to reserved, or raise if funds are short."""
        _check_amount(amount)
        free = self.free(account)
        if free < amount:
            raise DispatchError("InsufficientBalance")
        self._free[account] = free - amount
        self._reserved[account] = self.reserved(account) + amount

    def unreserve(self, account: Hashable, amount: int) -> int:
        """Move up to ``amount`` back to free; return the part that could not be moved."""
        _check_amount(amount)
        actual = min(amount, self.reserved(account))
        if actual:
            self._reserved[account] -= actual
            self._free[account] = self.free(account) + actual
        return amount - actual

    def repatriate_reserved(self, slashed: Hashable, beneficiary: Hashable, amount: int) -> int:
        """Move reserved funds of ``slashed`` into the free balance of ``beneficiary``.

        Returns the part of ``amount`` that could not be moved.
        """
        _check_amount(amount)
        if slashed == beneficiary:
            return self.unreserve(slashed, amount)
        actual = min(amount, self.reserved(slashed))
        if actual:
            self._reserved[slashed] -= actual
            self._free[beneficiary] = self.free(beneficiary) + actual
        return amount - actual

    def slash_reserved(self, account: Hashable, amount: int) -> tuple[int, int]:
        """Remove up to ``amount`` from reserve; return (slashed, not slashed)."""
        _check_amount(amount)
        actual = min(amount, self.reserved(account))
        if actual:
            self._reserved[account] -= actual
        return actual, amount - actual

    def deposit_creating(self, account: Hashable, amount: int) -> int:
        """Issue ``amount`` into ``account``; returns the amount actually deposited."""
        _check_amount(amount)
        if not self._exists(account) and amount < self.existential_deposit:
            return 0
        self._free[account] = self.free(account) + amount
        self.total_issuance += amount
        return amount

    def burn(self, amount: int) -> int:
        """Reduce total issuance by ``amount``, saturating at zero; returns the burnt amount."""
        _check_amount(amount)
        burnt = min(amount, self.total_issuance)
        self.total_issuance -= burnt
        return burnt


@dataclass(frozen=True)
class WeightInfo:
    """Call weights; by default every call weighs nothing."""

    record_weight: int = 0
    erase_base_weight: int = 0
    erase_item_weight: int = 0

    def record(self) -> int:
        return self.record_weight

    def erase(self, window: int) -> int:
        """Weight of erasing a datalog holding ``window`` items."""
        if window < 0:
            raise ValueError("window must not be negative")
        return self.erase_base_weight + self.erase_item_weight * window


class Processing(abc.ABC):
    """Transaction processing of an agreement: locking funds and paying out."""

    @abc.abstractmethod
    def on_start(self, currency: Balances) -> None:
        """Called when the liability starts."""

    @abc.abstractmethod
    def on_finish(self, currency: Balances, success: bool) -> None:
        """Called when the liability finishes."""


class RealWorldOracle(abc.ABC):
    """Someone who can confirm agreement execution in the real world."""

    @abc.abstractmethod
    def is_confirmed(self) -> bool | None:
        """None while undecided, otherwise whether the report is accepted."""


class Report(RealWorldOracle):
    """Report of an executed agreement; carries ``index``, ``sender`` and ``payload``."""

    @abc.abstractmethod
    def verify(self) -> bool:
        """Check the report proof."""


class Agreement(abc.ABC):
    """Agreement on ``technics`` and ``economics`` between ``promisee`` and ``promisor``."""

    @abc.abstractmethod
    def verify(self) -> bool:
        """Check the proofs of both parties."""