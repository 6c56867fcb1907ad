import csv
from decimal import Decimal
from typing import Iterable, TextIO

from models import ClientAccount, AMOUNT_PRECISION

HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(AMOUNT_PRECISION):f}"


def format_row(account: ClientAccount) -> list:
    return [
        account.client_id,
        format_decimal(account.available),
        format_decimal(account.held),
        format_decimal(account.total),
        str(account.locked).lower(),
    ]


def write_report(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per account, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)
    for account in sorted(accounts, key=lambda a: a.client_id):
        writer.writerow(format_row(account))
