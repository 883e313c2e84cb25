import os
import sys
import logging
from decimal import Decimal
from typing import List, Mapping, Optional, TextIO

from engine import PaymentsEngine
from models import ClientAccount

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"
OUTPUT_HEADER = "client,available,held,total,locked"


def resolve_log_level() -> int:
    """Log level from PAYMENTS_LOG_LEVEL, WARNING if unset or unknown."""
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())
    if not isinstance(level, int):
        return logging.WARNING
    return level


def configure_logging() -> None:
    logging.basicConfig(
        level=resolve_log_level(),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def format_decimal(value: Decimal) -> str:
    """Format decimal without exponent, removing trailing zeros."""
    normalized = value.normalize()
    return f"{normalized:f}"


def write_accounts(accounts: Mapping[int, ClientAccount], out: TextIO) -> None:
    print(OUTPUT_HEADER, file=out)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        print(
            f"{client_id},"
            f"{format_decimal(account.available)},"
            f"{format_decimal(account.held)},"
            f"{format_decimal(account.total)},"
            f"{str(account.locked).lower()}",
            file=out,
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    configure_logging()

    if len(args) != 1:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    filepath = args[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Malformed input in {filepath}: {e}")
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
