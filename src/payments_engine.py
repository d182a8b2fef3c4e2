import logging
import sys
from typing import Iterable, List, Optional

from config import EngineConfig
from csv_io import read_transactions
from dispute_tracker import DisputeTracker
from errors import RejectionReason
from ledger import Ledger
from models import AccountSnapshot, ProcessingOutcome, ProcessingStats, Transaction
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Drives a stream of transactions through the processor, strictly in
    input order and one record at a time.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()
        self._ledger = Ledger()
        self._tracker = DisputeTracker()
        self._processor = TransactionProcessor(self._ledger, self._tracker)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def tracker(self) -> DisputeTracker:
        return self._tracker

    def process_file(self, filepath: str) -> List[AccountSnapshot]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")

        with open(filepath, "r", newline="", errors="replace") as f:
            self.process_stream(read_transactions(f, on_malformed=self._record_malformed))

        logger.info("Processing complete")
        if self._config.report_stats:
            print(self._stats.summary(), file=sys.stderr)

        return self.snapshot()

    def process_stream(self, transactions: Iterable[Transaction]) -> None:
        for transaction in transactions:
            self.process_transaction(transaction)

    def process_transaction(self, transaction: Transaction) -> ProcessingOutcome:
        outcome = self._processor.process_transaction(transaction)
        self._stats.record(outcome)
        return outcome

    def snapshot(self) -> List[AccountSnapshot]:
        return self._ledger.snapshot()

    def _record_malformed(self, line_num: int, reason: RejectionReason) -> None:
        self._stats.record_failure(reason)
