"""Liabilities: agreements between a promisee and a promisor, finalized by reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from robopallets.support import (
    Agreement,
    Balances,
    EventLog,
    Origin,
    PalletError,
    Report,
    ensure_signed,
)


class LiabilityError(PalletError):
    """Errors raised by the liability registry."""


@dataclass(frozen=True)
class NewLiability:
    """A new liability was created."""

    index: int
    technics: Any
    economics: Any
    promisee: Any
    promisor: Any


@dataclass(frozen=True)
class NewReport:
    """A liability report was published."""

    index: int
    report: Any


class Liability:
    """Registry of agreements and the reports that finalize them."""

    def __init__(self, currency: Balances, events: EventLog | None = None) -> None:
        self.currency = currency
        self.events = events if events is not None else EventLog()
        self.next_index = 0
        self._agreements: dict[int, Agreement] = {}
        self._reports: dict[int, Report] = {}

    def create(self, origin: Origin, agreement: Agreement) -> int:
        """Start a liability from a proven agreement; return its index."""
        ensure_signed(origin)
        if not agreement.verify():
            raise LiabilityError("BadAgreementProof")
        agreement.on_start(self.currency)

        index = self.next_index
        self._agreements[index] = agreement
        self.next_index = index + 1

        self.events.deposit(
            NewLiability(
                index,
                agreement.technics,
                agreement.economics,
                agreement.promisee,
                agreement.promisor,
            )
        )
        return index

    def finalize(self, origin: Origin, report: Report) -> None:
        """Publish the report of completed work and settle the agreement."""
        ensure_signed(origin)
        if not report.verify():
            raise LiabilityError("BadReportProof")

        index = report.index
        if index in self._reports:
            raise LiabilityError("AlreadyFinalized")

        agreement = self._agreements.get(index)
        if agreement is None:
            raise LiabilityError("AgreementNotFound")
        if report.sender != agreement.promisor:
            raise LiabilityError("BadReportSender")

        confirmed = report.is_confirmed()
        if confirmed is None:
            raise LiabilityError("OracleIsNotReady")
        agreement.on_finish(self.currency, confirmed)

        self._reports[index] = report
        self.events.deposit(NewReport(index, report))

    def agreement_of(self, index: int) -> Agreement | None:
        """The stored agreement, or None."""
        return self._agreements.get(index)

    def report_of(self, index: int) -> Report | None:
        """The published report, or None."""
        return self._reports.get(index)