"""Lighthouse: the block author account, set by an inherent and rewarded per block."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from robopallets.codec import decode_compact, encode_compact
from robopallets.support import (
    Balances,
    EventLog,
    Origin,
    PalletError,
    ensure_none,
)

INHERENT_IDENTIFIER = b"lgthouse"

_ACCOUNT_ID_LEN = 32


class LighthouseError(PalletError):
    """Errors raised by the lighthouse pallet."""


@dataclass(frozen=True)
class BlockReward:
    """An account was rewarded for block production."""

    lighthouse: Any
    amount: int


@dataclass(frozen=True)
class SetLighthouse:
    """The inherent call that sets the lighthouse of a block."""

    lighthouse: Any


def _encode_bytes(data: bytes) -> bytes:
    return encode_compact(len(data)) + data


def _decode_bytes(data: bytes) -> bytes:
    length, consumed = decode_compact(data)
    body = data[consumed : consumed + length]
    if len(body) != length:
        raise ValueError("truncated byte string")
    return bytes(body)


def _decode_account_id(raw: bytes) -> bytes:
    if len(raw) < _ACCOUNT_ID_LEN:
        raise ValueError("raw inherent data too short for an account id")
    return bytes(raw[:_ACCOUNT_ID_LEN])


class InherentError(Exception):
    """Error reported by the lighthouse inherent; always fatal."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f'Other("{self.message}")'

    def __eq__(self, other: object) -> bool:
        return isinstance(other, InherentError) and other.message == self.message

    def __hash__(self) -> int:
        return hash(self.message)

    def encode(self) -> bytes:
        """Wire form: variant index followed by the length-prefixed message."""
        return b"\x00" + _encode_bytes(self.message.encode("utf-8"))

    def is_fatal_error(self) -> bool:
        return True

    @staticmethod
    def try_from(identifier: bytes, data: bytes) -> "InherentError | None":
        """Decode an error reported under ``identifier``, or None if it is not ours."""
        if bytes(identifier) != INHERENT_IDENTIFIER:
            return None
        data = bytes(data)
        if not data or data[0] != 0:
            return None
        try:
            message = _decode_bytes(data[1:]).decode("utf-8")
        except (ValueError, UnicodeDecodeError):
            return None
        return InherentError(message)


class InherentDataProvider:
    """Puts the raw lighthouse account bytes into the block's inherent data."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)

    def provide_inherent_data(self, inherent_data: dict) -> None:
        """Store the encoded account bytes; an identifier may be stored once only."""
        if INHERENT_IDENTIFIER in inherent_data:
            raise ValueError("inherent identifier already exists")
        inherent_data[INHERENT_IDENTIFIER] = _encode_bytes(self.data)

    def try_handle_error(self, identifier: bytes, error: bytes) -> InherentError | None:
        """The decoded error when it belongs to this inherent, otherwise None."""
        if bytes(identifier) != INHERENT_IDENTIFIER:
            return None
        return InherentError.try_from(INHERENT_IDENTIFIER, error)


class Lighthouse:
    """Tracks the block's lighthouse and pays it block rewards and fees."""

    def __init__(
        self,
        currency: Balances,
        block_reward: int,
        events: EventLog | None = None,
        account_decoder: Callable[[bytes], Any] | None = None,
        write_weight: int = 0,
    ) -> None:
        if block_reward < 0:
            raise ValueError("block reward must not be negative")
        self.currency = currency
        self.block_reward = block_reward
        self.events = events if events is not None else EventLog()
        self.account_decoder = account_decoder or _decode_account_id
        self.write_weight = write_weight
        self.lighthouse: Any = None

    def on_initialize(self, n: int) -> int:
        """Forget the previous block's lighthouse; return the weight used."""
        self.lighthouse = None
        return self.write_weight

    def on_finalize(self, n: int) -> None:
        """Issue the block reward to the lighthouse, if one is set."""
        if self.lighthouse is None:
            return
        self.currency.deposit_creating(self.lighthouse, self.block_reward)
        self.events.deposit(BlockReward(self.lighthouse, self.block_reward))

    def set(self, origin: Origin, lighthouse: Any) -> None:
        """Set the lighthouse of the current block; unsigned origin only."""
        ensure_none(origin)
        if self.lighthouse is not None:
            raise LighthouseError("LighthouseAlreadySet")
        self.lighthouse = lighthouse

    def create_inherent(self, data: dict) -> SetLighthouse | None:
        """Build the set call from inherent data, or None if no lighthouse was provided."""
        encoded = data.get(INHERENT_IDENTIFIER)
        if encoded is None:
            return None
        raw = _decode_bytes(bytes(encoded))
        return SetLighthouse(self.account_decoder(raw))

    def check_inherent(self, call: Any, data: dict) -> None:
        """Every lighthouse inherent is accepted."""
        return None

    def is_inherent(self, call: Any) -> bool:
        return isinstance(call, SetLighthouse)

    def on_nonzero_unbalanced(self, amount: int) -> None:
        """Hand withdrawn fees to the lighthouse; without one they are burnt."""
        if self.lighthouse is not None:
            self.currency.deposit_creating(self.lighthouse, amount)
        # The fees were already taken out of circulation; crediting re-adds them.
        self.currency.burn(amount)