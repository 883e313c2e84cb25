import logging
from typing import Iterable, Mapping

from models import Transaction, ClientAccount, ProcessingResult, ProcessingStats
from state import StateManager
from processor import TransactionProcessor
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds transactions to the processor strictly in arrival order.
    Owns all run state; accounts are read back once input is exhausted.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def accounts(self) -> Mapping[int, ClientAccount]:
        return self._state.get_all_accounts()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def execute(self, transaction: Transaction) -> ProcessingResult:
        """Apply a single transaction."""
        result = self._processor.process_transaction(transaction)

        if result == ProcessingResult.SUCCESS:
            self._stats.record_success()
        else:
            self._stats.record_ignored()
        return result

    def process(self, transactions: Iterable[Transaction]) -> Mapping[int, ClientAccount]:
        """Apply every transaction in order and return final account states."""
        for transaction in transactions:
            self.execute(transaction)

        logger.info(
            f"Processed: {self._stats.processed}, "
            f"Ignored: {self._stats.ignored}, "
            f"Accounts: {len(self.accounts)}, "
            f"History: {self._state.history_size()}"
        )
        return self.accounts

    def process_file(self, filepath: str) -> Mapping[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        return self.process(read_transactions(filepath))
