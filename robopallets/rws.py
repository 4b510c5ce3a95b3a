"""Web-service subscriptions: free calls paid from subscription weight, sold by auction."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Hashable, Union

from robopallets.support import (
    Balances,
    DispatchError,
    EventLog,
    Origin,
    PalletError,
    Timestamp,
    ensure_root,
    ensure_signed,
    signed,
)

DAYS_TO_MS = 24 * 60 * 60 * 1000

# A daily subscription gives 0.01 TPS while it is active.
_DAILY_UTPS = 10_000
_UTPS_PER_TPS_MS = 1_000_000_000


class RwsError(PalletError):
    """Errors raised by the subscription pallet."""


@dataclass(frozen=True)
class Lifetime:
    """Lifetime subscription giving ``tps`` micro-transactions per second."""

    tps: int


@dataclass(frozen=True)
class Daily:
    """Subscription active for ``days`` days from issue."""

    days: int = 0


Subscription = Union[Lifetime, Daily]


@dataclass
class AuctionLedger:
    """State of one subscription auction."""

    winner: Any = None
    best_price: int = 0
    kind: Subscription = field(default_factory=Daily)

    @classmethod
    def new(cls, kind: Subscription) -> "AuctionLedger":
        return cls(kind=kind)

    @classmethod
    def empty(cls) -> "AuctionLedger":
        return cls()


@dataclass
class SubscriptionLedger:
    """Accumulated free weight and timing of a registered subscription."""

    free_weight: int
    issue_time: int
    last_update: int
    kind: Subscription

    @classmethod
    def new(cls, last_update: int, kind: Subscription) -> "SubscriptionLedger":
        return cls(free_weight=0, issue_time=last_update, last_update=last_update, kind=kind)


@dataclass(frozen=True)
class RuntimeCall:
    """A dispatchable call with its declared weight."""

    weight: int
    function: Callable[[Origin], Any]

    def dispatch(self, origin: Origin) -> Any:
        """Run the call from ``origin``; errors propagate."""
        return self.function(origin)


@dataclass(frozen=True)
class NewBid:
    """A bid was placed on an auction."""

    index: int
    bidder: Any
    amount: int


@dataclass(frozen=True)
class NewCall:
    """A call was dispatched on a subscription; ``result`` is None or the error."""

    sender: Any
    result: DispatchError | None


@dataclass(frozen=True)
class NewDevices:
    """Subscription devices were set."""

    subscription_id: Any
    devices: tuple


@dataclass(frozen=True)
class NewSubscription:
    """A subscription was registered."""

    subscription_id: Any
    subscription: Subscription


@dataclass(frozen=True)
class NewAuction:
    """A subscription auction was started."""

    kind: Subscription
    index: int


class RWS:
    """Subscription auctions and calls paid for by subscription weight."""

    def __init__(
        self,
        currency: Balances,
        time: Timestamp | None = None,
        events: EventLog | None = None,
        reference_call_weight: int = 70_952_000,
        auction_duration: int = 10,
        auction_cost: int = 5_000,
        minimal_bid: int = 100,
        read_weight: int = 0,
        write_weight: int = 0,
    ) -> None:
        if auction_duration < 1:
            raise ValueError("auction duration must be positive")
        self.currency = currency
        self.time = time if time is not None else Timestamp()
        self.events = events if events is not None else EventLog()
        self.reference_call_weight = reference_call_weight
        self.auction_duration = auction_duration
        self.auction_cost = auction_cost
        self.minimal_bid = minimal_bid
        self.read_weight = read_weight
        self.write_weight = write_weight
        self.oracle: Any = None
        self.auction_queue: list[int] = []
        self.auction_next = 0
        self.unspend_bond_value = 0
        self._ledger: dict[Hashable, SubscriptionLedger] = {}
        self._devices: dict[Hashable, list] = {}
        self._auctions: dict[int, AuctionLedger] = {}

    def on_initialize(self, now: int) -> int:
        """Rotate auctions at the end of every auction period; return the weight used."""
        if now % self.auction_duration == 0:
            return self._rotate_auctions()
        return 0

    def call(self, origin: Origin, subscription_id: Hashable, call: RuntimeCall) -> Any:
        """Dispatch ``call`` as the sender, paid for by the subscription's free weight."""
        sender = ensure_signed(origin)
        if sender not in self._devices.get(subscription_id, []):
            raise RwsError("NotLinkedDevice")
        self._update_subscription(subscription_id, call.weight)
        try:
            result = call.dispatch(signed(sender))
        except DispatchError as error:
            self.events.deposit(NewCall(sender, error))
            raise
        self.events.deposit(NewCall(sender, None))
        return result

    def bid(self, origin: Origin, index: int, amount: int) -> None:
        """Place a bid on a live auction, reserving the amount."""
        sender = ensure_signed(origin)
        if index not in self.auction_queue:
            raise RwsError("NotLiveAuction")
        auction = self._auctions.get(index)
        if auction is None:
            raise RwsError("NotExistAuction")
        if auction.winner is not None:
            if not auction.best_price < amount:
                raise RwsError("TooSmallBid")
            self.currency.reserve(sender, amount)
            self.currency.unreserve(auction.winner, auction.best_price)
        else:
            if not self.minimal_bid < amount:
                raise RwsError("TooSmallBid")
            self.currency.reserve(sender, amount)
        self._auctions[index] = replace(auction, winner=sender, best_price=amount)
        self.events.deposit(NewBid(index, sender, amount))

    def set_devices(self, origin: Origin, devices: list) -> None:
        """Set the devices allowed to call on the sender's subscription."""
        sender = ensure_signed(origin)
        self._devices[sender] = list(devices)
        self.events.deposit(NewDevices(sender, tuple(devices)))

    def set_oracle(self, origin: Origin, new: Hashable) -> None:
        """Change the oracle account; root only."""
        ensure_root(origin)
        self.oracle = new

    def set_subscription(self, origin: Origin, target: Hashable, subscription: Subscription) -> None:
        """Register a subscription for ``target``; oracle only."""
        sender = ensure_signed(origin)
        if self.oracle is None or sender != self.oracle:
            raise RwsError("OracleOnlyCall")
        self._ledger[target] = SubscriptionLedger.new(self.time.now(), subscription)
        self.events.deposit(NewSubscription(target, subscription))

    def start_auction(self, origin: Origin, kind: Subscription) -> None:
        """Start a new subscription auction; root only."""
        ensure_root(origin)
        self._new_auction(kind)

    def ledger(self, account: Hashable) -> SubscriptionLedger | None:
        """A copy of the account's subscription ledger, or None."""
        entry = self._ledger.get(account)
        return replace(entry) if entry is not None else None

    def devices(self, account: Hashable) -> list:
        """Devices linked to the subscription."""
        return list(self._devices.get(account, []))

    def auction(self, index: int) -> AuctionLedger | None:
        """A copy of the auction ledger, or None."""
        entry = self._auctions.get(index)
        return replace(entry) if entry is not None else None

    def _new_auction(self, kind: Subscription) -> None:
        index = self.auction_next
        self.auction_next += 1
        self._auctions[index] = AuctionLedger.new(kind)
        self.auction_queue.append(index)
        self.events.deposit(NewAuction(kind, index))

    def _rotate_auctions(self) -> int:
        queue = list(self.auction_queue)
        entries = [(index, self._auctions.get(index, AuctionLedger.empty())) for index in queue]
        finished = [auction for _, auction in entries if auction.winner is not None]
        self.auction_queue = [index for index, auction in entries if auction.winner is None]

        for auction in finished:
            slashed, _ = self.currency.slash_reserved(auction.winner, auction.best_price)
            self.currency.burn(slashed)
            self._ledger[auction.winner] = SubscriptionLedger.new(self.time.now(), auction.kind)

        return self.read_weight * (1 + len(queue)) + self.write_weight * (1 + 2 * len(finished))

    def _update_subscription(self, subscription_id: Hashable, call_weight: int) -> None:
        subscription = self._ledger.get(subscription_id)
        if subscription is None:
            raise RwsError("NoSubscription")

        now = self.time.now()
        kind = subscription.kind
        if isinstance(kind, Lifetime):
            utps = kind.tps
        else:
            expires = subscription.issue_time + kind.days * DAYS_TO_MS
            utps = _DAILY_UTPS if now < expires else 0

        delta = now - subscription.last_update
        if delta < 0:
            raise ValueError("time went backwards")
        subscription.free_weight += (
            self.reference_call_weight * utps * delta // _UTPS_PER_TPS_MS
        )
        subscription.last_update = now

        # The refreshed ledger is kept even when the call cannot be paid for.
        if subscription.free_weight < call_weight:
            raise RwsError("FreeWeightIsNotEnough")
        subscription.free_weight -= call_weight