from dataclasses import replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from models import Transaction, ClientAccount


class StateManager:
    """
    Account table plus the history of applied transfers used for dispute lookups.
    Single writer; nothing here is shared between runs.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, Transaction] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create a zeroed one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def store_transaction(self, transaction: Transaction) -> Transaction:
        """
        Keep a copy of an applied transfer for future claims.
        Returns the stored record, whose claim state later claims mutate.
        """
        record = replace(transaction)
        self._transactions[record.transaction_id] = record
        return record

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve stored transfer by ID."""
        return self._transactions.get(transaction_id)

    def has_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def get_all_accounts(self) -> Mapping[int, ClientAccount]:
        """Read-only snapshot of every account touched so far; later processing does not change it."""
        return MappingProxyType({client_id: replace(account) for client_id, account in self._accounts.items()})

    def history_size(self) -> int:
        return len(self._transactions)
