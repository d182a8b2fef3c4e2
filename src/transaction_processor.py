import logging
from contextlib import contextmanager

from amount import Amount
from dispute_tracker import DepositRecord, DisputeStatus, DisputeTracker
from errors import (
    AccountLockedError,
    DuplicateTransactionIdError,
    InsufficientFundsError,
    InsufficientHeldFundsError,
    InvalidAmountError,
    InvalidTransitionError,
    TransactionError,
    UnknownTransactionError,
)
from ledger import Ledger
from models import ProcessingOutcome, Transaction, TransactionType

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to a Ledger and a DisputeTracker, one at a time.

    Every precondition of a record is checked before its first mutation. The
    mutation phase runs inside _atomic(), which restores the touched account
    and deposit record if a step still fails, so a rejected record never
    leaves partial state behind.
    """

    def __init__(self, ledger: Ledger, tracker: DisputeTracker):
        self._ledger = ledger
        self._tracker = tracker

    def process_transaction(self, transaction: Transaction) -> ProcessingOutcome:
        """
        Process a single transaction.

        Returns:
            APPLIED: every effect of the record took place
            REJECTED: nothing changed; reason says why
        """
        try:
            match transaction.transaction_type:
                case TransactionType.DEPOSIT:
                    self._handle_deposit(transaction)
                case TransactionType.WITHDRAWAL:
                    self._handle_withdrawal(transaction)
                case TransactionType.DISPUTE:
                    self._handle_dispute(transaction)
                case TransactionType.RESOLVE:
                    self._handle_resolve(transaction)
                case TransactionType.CHARGEBACK:
                    self._handle_chargeback(transaction)
                case _:
                    raise TransactionError(f"unsupported transaction type {transaction.transaction_type!r}")
        except TransactionError as e:
            logger.warning(f"Rejected {transaction}: {e.reason.value}: {e}")
            return ProcessingOutcome.rejected(e.reason, str(e))
        return ProcessingOutcome.applied()

    def _handle_deposit(self, transaction: Transaction) -> None:
        amount = self._require_amount(transaction)
        self._require_unused_id(transaction)
        self._require_unlocked(transaction)

        with self._atomic(transaction):
            self._ledger.credit_available(transaction.client_id, amount)
            self._tracker.record_deposit_amount(transaction.transaction_id, amount, transaction.client_id)

    def _handle_withdrawal(self, transaction: Transaction) -> None:
        amount = self._require_amount(transaction)
        self._require_unlocked(transaction)
        self._require_unused_id(transaction)

        account = self._ledger.get(transaction.client_id)
        available = account.available if account is not None else Amount.ZERO
        if available < amount:
            raise InsufficientFundsError(
                f"client {transaction.client_id}: available {available} < {amount}"
            )

        with self._atomic(transaction):
            self._ledger.debit_available(transaction.client_id, amount)
            # withdrawals consume their id but never become disputable
            self._tracker.mark_consumed(transaction.transaction_id)

    def _handle_dispute(self, transaction: Transaction) -> None:
        deposit = self._require_deposit(transaction, DisputeStatus.NORMAL)
        account = self._ledger.get(deposit.client_id)
        if account is None or account.available < deposit.amount:
            raise InsufficientFundsError(
                f"Dispute for tx {transaction.transaction_id}: not enough available funds to hold {deposit.amount}"
            )

        with self._atomic(transaction):
            self._ledger.move_available_to_held(deposit.client_id, deposit.amount)
            self._tracker.mark_disputed(deposit.transaction_id)

    def _handle_resolve(self, transaction: Transaction) -> None:
        deposit = self._require_deposit(transaction, DisputeStatus.DISPUTED)
        self._require_held(deposit)

        with self._atomic(transaction):
            self._ledger.move_held_to_available(deposit.client_id, deposit.amount)
            self._tracker.mark_resolved(deposit.transaction_id)

    def _handle_chargeback(self, transaction: Transaction) -> None:
        deposit = self._require_deposit(transaction, DisputeStatus.DISPUTED)
        self._require_held(deposit)

        with self._atomic(transaction):
            self._ledger.remove_held(deposit.client_id, deposit.amount)
            self._tracker.mark_charged_back(deposit.transaction_id)
            self._ledger.lock(deposit.client_id)

    @staticmethod
    def _require_amount(transaction: Transaction) -> Amount:
        amount = transaction.amount
        if not isinstance(amount, Amount) or not amount.is_positive():
            raise InvalidAmountError(
                f"{transaction.transaction_type.value} tx {transaction.transaction_id}: invalid amount {amount}"
            )
        return amount

    def _require_unused_id(self, transaction: Transaction) -> None:
        if self._tracker.is_consumed(transaction.transaction_id):
            raise DuplicateTransactionIdError(
                f"{transaction.transaction_type.value} tx {transaction.transaction_id}: id already used"
            )

    def _require_unlocked(self, transaction: Transaction) -> None:
        if self._ledger.is_locked(transaction.client_id):
            raise AccountLockedError(f"client {transaction.client_id} is locked")

    def _require_deposit(self, transaction: Transaction, expected: DisputeStatus) -> DepositRecord:
        action = transaction.transaction_type.value
        deposit = self._tracker.get_deposit(transaction.transaction_id)
        if deposit is None:
            raise UnknownTransactionError(
                f"{action} for tx {transaction.transaction_id}: no such deposit"
            )
        if deposit.client_id != transaction.client_id:
            raise InvalidTransitionError(
                f"{action} for tx {transaction.transaction_id}: client mismatch "
                f"(expected {deposit.client_id}, got {transaction.client_id})"
            )
        if deposit.status != expected:
            raise InvalidTransitionError(
                f"{action} for tx {transaction.transaction_id}: deposit is {deposit.status.value}"
            )
        return deposit

    def _require_held(self, deposit: DepositRecord) -> None:
        account = self._ledger.get(deposit.client_id)
        if account is None or account.held < deposit.amount:
            raise InsufficientHeldFundsError(
                f"tx {deposit.transaction_id}: not enough held funds to release {deposit.amount}"
            )

    @contextmanager
    def _atomic(self, transaction: Transaction):
        client_id, transaction_id = transaction.client_id, transaction.transaction_id
        account_before = self._ledger.copy_of(client_id)
        deposit_before = self._tracker.copy_of(transaction_id)
        consumed_before = self._tracker.is_consumed(transaction_id)
        try:
            yield
        except Exception:
            logger.error(f"Rolling back partially applied {transaction}")
            self._ledger.restore(client_id, account_before)
            if deposit_before is not None or not consumed_before:
                self._tracker.restore(transaction_id, deposit_before)
            raise
