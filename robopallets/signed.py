"""Agreements and reports proven by public-key signatures."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any

from nacl.exceptions import CryptoError
from nacl.signing import SigningKey, VerifyKey

from robopallets.codec import SimpleMarket, encode_tuple
from robopallets.support import Agreement, Balances, DispatchError, Processing, Report


class Keypair:
    """A signing key whose public key doubles as the account id."""

    def __init__(self, signing_key: SigningKey) -> None:
        self._signing_key = signing_key
        self.public: bytes = bytes(signing_key.verify_key)

    @staticmethod
    def from_uri(uri: str) -> "Keypair":
        """Derive a deterministic keypair from a secret URI such as ``//Alice``."""
        seed = hashlib.sha256(uri.encode("utf-8")).digest()
        return Keypair(SigningKey(seed))

    def sign(self, message: bytes) -> bytes:
        """Detached signature of ``message``."""
        return self._signing_key.sign(bytes(message)).signature

    def __repr__(self) -> str:
        return f"Keypair(public={self.public.hex()})"


def verify_signature(signature: bytes, message: bytes, account: bytes) -> bool:
    """Whether ``signature`` over ``message`` was made by ``account``."""
    try:
        VerifyKey(bytes(account)).verify(bytes(message), bytes(signature))
    except (CryptoError, ValueError, TypeError):
        return False
    return True


def agreement_proof(technics: Any, economics: Any, pair: Keypair) -> bytes:
    """Sign the encoded technical and economical parameters."""
    return pair.sign(encode_tuple(technics, economics))


def report_proof(index: int, message: Any, pair: Keypair) -> bytes:
    """Sign the encoded report index and payload."""
    return pair.sign(encode_tuple(index, message))


@dataclass(frozen=True)
class SignedAgreement(Agreement, Processing):
    """Agreement that both parties proved by signing its parameters."""

    technics: Any
    economics: Any
    promisee: bytes
    promisor: bytes
    promisee_signature: bytes
    promisor_signature: bytes

    def verify(self) -> bool:
        encoded = encode_tuple(self.technics, self.economics)
        return verify_signature(
            self.promisee_signature, encoded, self.promisee
        ) and verify_signature(self.promisor_signature, encoded, self.promisor)

    def _price(self) -> int | None:
        if self.economics is None:
            return None
        if isinstance(self.economics, SimpleMarket):
            return self.economics.price
        raise TypeError(f"unsupported economics {type(self.economics).__name__}")

    def on_start(self, currency: Balances) -> None:
        """Reserve the price on the promisee's account."""
        price = self._price()
        if price is not None:
            currency.reserve(self.promisee, price)

    def on_finish(self, currency: Balances, success: bool) -> None:
        """Pay the promisor on success, otherwise release the reserve."""
        price = self._price()
        if price is None:
            return
        if success:
            currency.repatriate_reserved(self.promisee, self.promisor, price)
            return
        remaining = currency.unreserve(self.promisee, price)
        if remaining != price:
            # A failed call leaves no trace: put back what was released.
            currency.reserve(self.promisee, price - remaining)
            raise DispatchError("reserved less than expected")


@dataclass(frozen=True)
class SignedReport(Report):
    """Report of agreement execution signed by its sender."""

    index: int
    sender: bytes
    payload: Any
    signature: bytes

    def verify(self) -> bool:
        encoded = encode_tuple(self.index, self.payload)
        return verify_signature(self.signature, encoded, self.sender)

    def is_confirmed(self) -> bool | None:
        """Every report is confirmed."""
        return True