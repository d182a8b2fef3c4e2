from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from amount import Amount
from errors import RejectionReason


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    APPLIED = "applied"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Amount] = None

    def __repr__(self) -> str:
        kind = getattr(self.transaction_type, "value", self.transaction_type)
        return f"Transaction({kind}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class ProcessingOutcome:
    result: ProcessingResult
    reason: Optional[RejectionReason] = None
    detail: str = ""

    @classmethod
    def applied(cls) -> "ProcessingOutcome":
        return cls(ProcessingResult.APPLIED)

    @classmethod
    def rejected(cls, reason: RejectionReason, detail: str = "") -> "ProcessingOutcome":
        return cls(ProcessingResult.REJECTED, reason, detail)

    @property
    def is_applied(self) -> bool:
        return self.result == ProcessingResult.APPLIED


@dataclass
class ClientAccount:
    client_id: int
    available: Amount = Amount.ZERO
    held: Amount = Amount.ZERO
    locked: bool = False

    @property
    def total(self) -> Amount:
        return self.available + self.held


@dataclass(frozen=True)
class AccountSnapshot:
    """Read-only view of an account as handed to output adapters."""

    client_id: int
    available: Amount
    held: Amount
    total: Amount
    locked: bool

    @classmethod
    def of(cls, account: ClientAccount) -> "AccountSnapshot":
        return cls(
            client_id=account.client_id,
            available=account.available,
            held=account.held,
            total=account.total,
            locked=account.locked,
        )

    def as_row(self) -> tuple:
        return (
            self.client_id,
            str(self.available),
            str(self.held),
            str(self.total),
            str(self.locked).lower(),
        )


@dataclass
class ProcessingStats:
    """Counters for tracking processing statistics."""

    processed: int = 0
    failed: int = 0
    failures_by_reason: Counter = field(default_factory=Counter)

    def record(self, outcome: ProcessingOutcome) -> None:
        if outcome.is_applied:
            self.processed += 1
        else:
            self.record_failure(outcome.reason)

    def record_failure(self, reason: RejectionReason) -> None:
        self.failed += 1
        self.failures_by_reason[reason] += 1

    def summary(self) -> str:
        line = f"Processed: {self.processed}, Failed: {self.failed}"
        if self.failures_by_reason:
            breakdown = ", ".join(
                f"{reason.value}={count}"
                for reason, count in sorted(self.failures_by_reason.items(), key=lambda item: item[0].value)
            )
            line += f" ({breakdown})"
        return line
