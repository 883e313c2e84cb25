from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def is_transfer(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)

    @property
    def is_claim(self) -> bool:
        return not self.is_transfer


class ClaimState(Enum):
    UNCLAIMED = "unclaimed"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    SUCCESS = "success"
    IGNORED = "ignored"


class UnsupportedTransactionError(ValueError):
    """Raised when a transaction kind outside the known set reaches the engine."""


_CLAIM_TRANSITIONS = {
    (ClaimState.UNCLAIMED, TransactionType.DISPUTE): ClaimState.DISPUTED,
    (ClaimState.DISPUTED, TransactionType.RESOLVE): ClaimState.UNCLAIMED,
    (ClaimState.DISPUTED, TransactionType.CHARGEBACK): ClaimState.CHARGED_BACK,
}


def next_claim_state(state: ClaimState, transaction_type: TransactionType) -> Optional[ClaimState]:
    """
    Claim lifecycle of a recorded transfer.

    Returns the state after applying the claim, or None when the claim is not
    legal from the current state (including a repeated dispute and anything
    after a chargeback).
    """
    if not transaction_type.is_claim:
        raise UnsupportedTransactionError(f"{transaction_type.value} is not a claim")
    return _CLAIM_TRANSITIONS.get((state, transaction_type))


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None
    claim_state: ClaimState = field(default=ClaimState.UNCLAIMED, compare=False)

    @property
    def disputed(self) -> bool:
        return self.claim_state is ClaimState.DISPUTED

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    """
    Balances for one client.
    Every mutation keeps total == available + held and returns whether it was applied.
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    locked: bool = False

    def deposit(self, amount: Decimal) -> bool:
        self.available += amount
        self.total += amount
        return True

    def withdraw(self, amount: Decimal) -> bool:
        if amount > self.available:
            return False
        self.available -= amount
        self.total -= amount
        return True

    def dispute(self, amount: Decimal) -> bool:
        if amount > self.available:
            return False
        self.available -= amount
        self.held += amount
        return True

    def resolve(self, amount: Decimal) -> bool:
        if amount > self.held:
            return False
        self.held -= amount
        self.available += amount
        return True

    def chargeback(self, amount: Decimal) -> bool:
        if amount > self.held:
            return False
        self.held -= amount
        self.total -= amount
        self.locked = True
        return True


class ProcessingStats:
    """Counters for a single run."""

    def __init__(self):
        self.processed = 0
        self.ignored = 0

    def record_success(self):
        self.processed += 1

    def record_ignored(self):
        self.ignored += 1
