import sys
import os
import io
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import TransactionType
from transaction_reader import TransactionParseError, parse_transactions, read_transactions


def parse(*lines):
    return list(parse_transactions(io.StringIO("\n".join(lines))))


class TestParseTransactions:
    def test_basic_rows(self):
        transactions = parse(
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "withdrawal, 2, 5, 3.0",
            "dispute, 1, 1,",
        )

        assert [t.transaction_type for t in transactions] == [
            TransactionType.DEPOSIT,
            TransactionType.WITHDRAWAL,
            TransactionType.DISPUTE,
        ]
        assert transactions[0].client_id == 1
        assert transactions[1].transaction_id == 5
        assert transactions[1].amount == Decimal("3.0")
        assert transactions[2].amount is None

    def test_type_is_case_insensitive(self):
        transactions = parse("type,client,tx,amount", "DePoSiT,1,1,2", "CHARGEBACK,1,1,")
        assert transactions[0].transaction_type == TransactionType.DEPOSIT
        assert transactions[1].transaction_type == TransactionType.CHARGEBACK

    def test_claim_without_amount_column(self):
        transactions = parse("type,client,tx,amount", "resolve,1,1")
        assert transactions[0].amount is None

    def test_claim_amount_ignored(self):
        transactions = parse("type,client,tx,amount", "dispute,1,1,42")
        assert transactions[0].amount is None

    def test_comments_and_blank_lines_skipped(self):
        transactions = parse(
            "# exported ledger",
            "type,client,tx,amount",
            "",
            "  # first client",
            "deposit,1,1,1",
        )
        assert len(transactions) == 1

    def test_four_decimal_places_preserved(self):
        transactions = parse("type,client,tx,amount", "deposit,1,1,0.0001")
        assert transactions[0].amount == Decimal("0.0001")

    def test_quoted_field_spanning_lines(self):
        transactions = parse(
            "type,client,tx,amount,note",
            'deposit,1,1,5,"first line',
            'second line"',
            "deposit,1,2,1,plain",
        )

        assert [t.transaction_id for t in transactions] == [1, 2]
        assert transactions[0].amount == Decimal("5")

    def test_line_number_after_multiline_record(self):
        with pytest.raises(TransactionParseError) as exc_info:
            parse(
                "type,client,tx,amount,note",
                'deposit,1,1,5,"spans',
                'two lines"',
                "deposit,1,x,1,",
            )
        assert exc_info.value.line_number == 4

    def test_header_only(self):
        assert parse("type,client,tx,amount") == []

    @pytest.mark.parametrize("row, message", [
        ("refund,1,1,1", "unknown transaction type"),
        ("deposit,x,1,1", "client"),
        ("deposit,-1,1,1", "client"),
        ("deposit,65536,1,1", "out of range"),
        ("deposit,1,4294967296,1", "out of range"),
        ("deposit,1,1,", "amount is required"),
        ("withdrawal,1,1", "amount is required"),
        ("deposit,1,1,abc", "invalid amount"),
        ("deposit,1,1,NaN", "invalid amount"),
        ("deposit,1,1,2,extra", "at most 4 fields"),
    ])
    def test_malformed_rows(self, row, message):
        with pytest.raises(TransactionParseError, match=message) as exc_info:
            parse("type,client,tx,amount", "deposit,1,1,1", row)
        assert exc_info.value.line_number == 3

    def test_missing_header_columns(self):
        with pytest.raises(TransactionParseError, match="header"):
            parse("kind,client,amount", "deposit,1,1")

    def test_parsing_is_lazy(self):
        transactions = parse_transactions(io.StringIO("type,client,tx,amount\ndeposit,1,1,1\nbad,row\n"))
        first = next(transactions)
        assert first.transaction_id == 1
        with pytest.raises(TransactionParseError):
            next(transactions)


class TestReadTransactions:
    def test_reads_file(self, tmp_path):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type, client, tx, amount\ndeposit, 1, 1, 1.5\n")

        transactions = list(read_transactions(str(csv_file)))
        assert transactions[0].amount == Decimal("1.5")

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            list(read_transactions(str(tmp_path / "missing.csv")))
