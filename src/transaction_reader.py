import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, List, Optional, TextIO

from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
REQUIRED_COLUMNS = ("type", "client", "tx")


class TransactionParseError(ValueError):
    """A CSV record could not be turned into a Transaction."""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """Lazily yield transactions from a CSV file, in file order."""
    with open(filepath, "r", newline="") as f:
        yield from parse_transactions(f)


def parse_transactions(stream: TextIO) -> Iterator[Transaction]:
    """
    Parse `type,client,tx,amount` records.

    Fields are trimmed, `type` is case-insensitive, and blank or `#` comment
    lines are skipped. The first malformed record raises TransactionParseError.
    """
    line_number = 0

    def data_lines() -> Iterator[str]:
        nonlocal line_number
        for line_number, line in enumerate(stream, start=1):
            stripped = line.strip()
            if stripped and not stripped.startswith("#"):
                yield line

    header: Optional[List[str]] = None

    # line_number is the last physical line the reader consumed for the record.
    for record in csv.reader(data_lines()):
        fields = [value.strip() for value in record]

        if header is None:
            header = [name.lower() for name in fields]
            missing = [name for name in REQUIRED_COLUMNS if name not in header]
            if missing:
                raise TransactionParseError(line_number, f"header is missing columns {missing}")
            logger.debug(f"CSV header: {header}")
            continue

        if len(fields) > len(header):
            raise TransactionParseError(line_number, f"expected at most {len(header)} fields, got {len(fields)}")

        yield parse_row(dict(zip(header, fields)), line_number)


def parse_row(row: Dict[str, str], line_number: int = 0) -> Transaction:
    """Parse a trimmed CSV row into Transaction."""
    type_str = row.get("type", "").lower()
    try:
        transaction_type = TransactionType(type_str)
    except ValueError:
        raise TransactionParseError(line_number, f"unknown transaction type {type_str!r}") from None

    client_id = _parse_id(row.get("client", ""), "client", MAX_CLIENT_ID, line_number)
    transaction_id = _parse_id(row.get("tx", ""), "tx", MAX_TRANSACTION_ID, line_number)

    # Claims carry no amount of their own; anything in the column is dropped.
    amount = None
    if transaction_type.is_transfer:
        amount = _parse_amount(row.get("amount", ""), line_number)

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, name: str, maximum: int, line_number: int) -> int:
    if not (value.isascii() and value.isdigit()):
        raise TransactionParseError(line_number, f"{name} must be an unsigned integer, got {value!r}")
    number = int(value)
    if number > maximum:
        raise TransactionParseError(line_number, f"{name} {number} out of range (max {maximum})")
    return number


def _parse_amount(value: str, line_number: int) -> Decimal:
    if not value:
        raise TransactionParseError(line_number, "amount is required")
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise TransactionParseError(line_number, f"invalid amount {value!r}") from None
    if not amount.is_finite():
        raise TransactionParseError(line_number, f"invalid amount {value!r}")
    return amount
