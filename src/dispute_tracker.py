from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Set

from amount import Amount
from errors import DuplicateTransactionIdError, InvalidTransitionError, UnknownTransactionError


class DisputeStatus(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"
    UNKNOWN = "unknown"


@dataclass
class DepositRecord:
    transaction_id: int
    client_id: int
    amount: Amount
    status: DisputeStatus = DisputeStatus.NORMAL


class DisputeTracker:
    """
    Tracks every deposit and its dispute lifecycle:

        NORMAL --dispute--> DISPUTED --resolve--> RESOLVED
                                    \\--chargeback--> CHARGED_BACK

    RESOLVED and CHARGED_BACK are terminal. Also remembers every transaction
    id consumed by a deposit or withdrawal, since ids are unique across the
    whole stream. Nothing is ever removed.
    """

    def __init__(self):
        self._deposits: Dict[int, DepositRecord] = {}
        self._consumed_transaction_ids: Set[int] = set()

    def is_consumed(self, transaction_id: int) -> bool:
        return transaction_id in self._consumed_transaction_ids

    def mark_consumed(self, transaction_id: int) -> None:
        """Reserve an id for a withdrawal (or a deposit, via record_deposit_amount)."""
        if transaction_id in self._consumed_transaction_ids:
            raise DuplicateTransactionIdError(f"tx {transaction_id} already used")
        self._consumed_transaction_ids.add(transaction_id)

    def record_deposit_amount(self, transaction_id: int, amount: Amount, client_id: int) -> None:
        """Remember a deposit's amount and owner for later disputes."""
        self.mark_consumed(transaction_id)
        self._deposits[transaction_id] = DepositRecord(transaction_id, client_id, amount)

    def get_deposit(self, transaction_id: int) -> Optional[DepositRecord]:
        return self._deposits.get(transaction_id)

    def status_of(self, transaction_id: int) -> DisputeStatus:
        deposit = self._deposits.get(transaction_id)
        return deposit.status if deposit is not None else DisputeStatus.UNKNOWN

    def mark_disputed(self, transaction_id: int) -> None:
        self._transition(transaction_id, DisputeStatus.NORMAL, DisputeStatus.DISPUTED)

    def mark_resolved(self, transaction_id: int) -> None:
        self._transition(transaction_id, DisputeStatus.DISPUTED, DisputeStatus.RESOLVED)

    def mark_charged_back(self, transaction_id: int) -> None:
        self._transition(transaction_id, DisputeStatus.DISPUTED, DisputeStatus.CHARGED_BACK)

    def _transition(self, transaction_id: int, expected: DisputeStatus, target: DisputeStatus) -> None:
        deposit = self._deposits.get(transaction_id)
        if deposit is None:
            raise UnknownTransactionError(f"tx {transaction_id} is not a known deposit")
        if deposit.status != expected:
            raise InvalidTransitionError(
                f"tx {transaction_id}: cannot move from {deposit.status.value} to {target.value}"
            )
        deposit.status = target

    def copy_of(self, transaction_id: int) -> Optional[DepositRecord]:
        deposit = self._deposits.get(transaction_id)
        return replace(deposit) if deposit is not None else None

    def restore(self, transaction_id: int, deposit: Optional[DepositRecord]) -> None:
        """Put back a record captured with copy_of(); None forgets the deposit and its id."""
        if deposit is None:
            self._deposits.pop(transaction_id, None)
            self._consumed_transaction_ids.discard(transaction_id)
        else:
            self._deposits[transaction_id] = deposit
