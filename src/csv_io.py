import csv
import logging
from typing import Callable, Dict, Iterable, Iterator, Optional, TextIO

from amount import Amount
from errors import RejectionReason, TransactionError
from models import AccountSnapshot, Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

OUTPUT_HEADER = ("client", "available", "held", "total", "locked")

MalformedRowHandler = Callable[[int, RejectionReason], None]


def read_transactions(
    stream: TextIO,
    on_malformed: Optional[MalformedRowHandler] = None,
) -> Iterator[Transaction]:
    """
    Lazily parse CSV rows into Transactions, one row at a time.

    Rows that cannot be parsed are logged, reported to on_malformed with
    their line number, and skipped, including rows the csv module itself
    cannot split. The generator never raises for bad rows.
    """
    reader = csv.DictReader(stream)
    while True:
        row = None
        try:
            row = next(reader)
        except StopIteration:
            return
        except (csv.Error, UnicodeDecodeError) as e:
            reason, error = RejectionReason.MALFORMED, repr(e)
        else:
            try:
                transaction = parse_row(row)
            except TransactionError as e:
                reason, error = e.reason, repr(e)
            except (KeyError, ValueError) as e:
                reason, error = RejectionReason.MALFORMED, repr(e)
            else:
                yield transaction
                continue

        logger.warning(f"Failed to parse row {reader.line_num} {row}: {reason.value}: {error}")
        if on_malformed is not None:
            on_malformed(reader.line_num, reason)


def parse_row(row: Dict[Optional[str], object]) -> Transaction:
    """Parse one CSV row into a Transaction. Amounts on dispute-type rows are ignored."""
    normalized = {
        k.strip().lower(): (v or "").strip()
        for k, v in row.items()
        if isinstance(k, str) and not isinstance(v, list)
    }

    transaction_type = TransactionType(normalized["type"].lower())
    client_id = _parse_id(normalized["client"], MAX_CLIENT_ID, "client")
    transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID, "tx")

    amount = None
    amount_str = normalized.get("amount", "")
    if transaction_type.carries_amount and amount_str:
        amount = Amount.from_decimal(amount_str)

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, upper_bound: int, name: str) -> int:
    parsed = int(value)
    if not 0 <= parsed <= upper_bound:
        raise ValueError(f"{name} id {parsed} out of range 0..{upper_bound}")
    return parsed


def write_snapshot(snapshots: Iterable[AccountSnapshot], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for snapshot in snapshots:
        writer.writerow(snapshot.as_row())
