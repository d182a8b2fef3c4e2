from enum import Enum


class RejectionReason(Enum):
    DUPLICATE_TRANSACTION_ID = "duplicate_transaction_id"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    INVALID_TRANSITION = "invalid_transition"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_HELD_FUNDS = "insufficient_held_funds"
    OVERFLOW = "overflow"
    ACCOUNT_LOCKED = "account_locked"
    INVALID_AMOUNT = "invalid_amount"
    MALFORMED = "malformed"


class TransactionError(Exception):
    """
    Base class for every failure local to a single transaction record.
    The dispatcher converts these into a rejected ProcessingOutcome.
    """

    reason = RejectionReason.MALFORMED


class DuplicateTransactionIdError(TransactionError):
    reason = RejectionReason.DUPLICATE_TRANSACTION_ID


class UnknownTransactionError(TransactionError):
    reason = RejectionReason.UNKNOWN_TRANSACTION


class InvalidTransitionError(TransactionError):
    reason = RejectionReason.INVALID_TRANSITION


class InsufficientFundsError(TransactionError):
    reason = RejectionReason.INSUFFICIENT_FUNDS


class InsufficientHeldFundsError(TransactionError):
    reason = RejectionReason.INSUFFICIENT_HELD_FUNDS


class AccountLockedError(TransactionError):
    reason = RejectionReason.ACCOUNT_LOCKED


class AmountOverflowError(TransactionError, ArithmeticError):
    reason = RejectionReason.OVERFLOW


class InvalidAmountError(TransactionError, ValueError):
    reason = RejectionReason.INVALID_AMOUNT
