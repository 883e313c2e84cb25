import logging

from models import (
    Transaction,
    TransactionType,
    ClientAccount,
    ProcessingResult,
    UnsupportedTransactionError,
    next_claim_state,
)
from state import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to state, one at a time, in arrival order.
    Business-rule rejections are logged and reported as IGNORED, never raised.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Account state changed
            IGNORED: Rejected by a business rule, state untouched

        Raises:
            UnsupportedTransactionError: transaction kind is not one we know
            ValueError: transfer without an amount
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT | TransactionType.WITHDRAWAL:
                return self._handle_transfer(transaction)
            case TransactionType.DISPUTE | TransactionType.RESOLVE | TransactionType.CHARGEBACK:
                return self._handle_claim(transaction)
            case other:
                raise UnsupportedTransactionError(f"Unsupported transaction type: {other!r}")

    def _handle_transfer(self, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None:
            raise ValueError(f"{transaction.transaction_type.value} tx {transaction.transaction_id} has no amount")

        if self._state.has_transaction(transaction.transaction_id):
            logger.info(f"{transaction!r}: transaction id already recorded, ignoring")
            return ProcessingResult.IGNORED

        account = self._state.get_or_create_account(transaction.client_id)

        if transaction.transaction_type is TransactionType.DEPOSIT:
            applied = account.deposit(transaction.amount)
        else:
            applied = account.withdraw(transaction.amount)

        if not applied:
            logger.info(f"{transaction!r}: insufficient available funds ({account.available})")
            return ProcessingResult.IGNORED

        self._state.store_transaction(transaction)
        return ProcessingResult.SUCCESS

    def _handle_claim(self, transaction: Transaction) -> ProcessingResult:
        original = self._state.get_transaction(transaction.transaction_id)

        if original is None:
            logger.info(f"{transaction!r}: no recorded transfer with this id")
            return ProcessingResult.IGNORED

        if original.client_id != transaction.client_id:
            logger.info(f"{transaction!r}: transfer belongs to client {original.client_id}")
            return ProcessingResult.IGNORED

        new_state = next_claim_state(original.claim_state, transaction.transaction_type)
        if new_state is None:
            logger.info(f"{transaction!r}: not allowed while transfer is {original.claim_state.value}")
            return ProcessingResult.IGNORED

        # The claim state moves even when the balance guard rejects the account effect.
        original.claim_state = new_state

        account = self._state.get_or_create_account(original.client_id)
        if not self._apply_claim(account, transaction.transaction_type, original):
            logger.info(f"{transaction!r}: amount {original.amount} exceeds the guarded balance")
            return ProcessingResult.IGNORED

        return ProcessingResult.SUCCESS

    @staticmethod
    def _apply_claim(account: ClientAccount, transaction_type: TransactionType, original: Transaction) -> bool:
        if transaction_type is TransactionType.DISPUTE:
            return account.dispute(original.amount)
        if transaction_type is TransactionType.RESOLVE:
            return account.resolve(original.amount)
        return account.chargeback(original.amount)
