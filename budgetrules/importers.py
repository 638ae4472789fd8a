"""CSV statement import and export."""
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import IO, Iterable, List, Union

import pandas as pd

from .models import Transaction
from budgetrules.utils.exceptions import TransactionImportError
from budgetrules.utils.logger import get_logger

logger = get_logger()

REQUIRED_COLUMNS = {"date", "description", "amount"}
OUTPUT_COLUMNS = ["id", "date", "description", "amount", "category"]


def read_transactions_csv(source: Union[str, Path, IO]) -> List[Transaction]:
    """
    Read transactions from a CSV statement.

    Args:
        source: Path or open text buffer

    Returns:
        List of Transaction objects in file order

    Raises:
        TransactionImportError: Unreadable file, missing columns or bad amounts
    """
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise TransactionImportError(f"Failed to read CSV: {e}") from e

    df.columns = [str(c).strip().lower() for c in df.columns]

    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise TransactionImportError(f"Missing required columns: {sorted(missing)}")

    for column in df.columns:
        df[column] = df[column].str.strip()

    # Row numbers as seen in a spreadsheet (header is row 1)
    amounts = pd.to_numeric(df["amount"], errors="coerce")
    bad_rows = [int(i) + 2 for i in df.index[amounts.isna()]]
    if bad_rows:
        raise TransactionImportError(f"Invalid amount in rows: {bad_rows}")

    if "id" not in df.columns:
        df["id"] = [str(i + 1) for i in range(len(df))]
    if "category" not in df.columns:
        df["category"] = ""

    transactions = []
    for record in df[OUTPUT_COLUMNS].to_dict("records"):
        try:
            amount = Decimal(record["amount"])
        except InvalidOperation as e:
            raise TransactionImportError(f"Invalid amount: {record['amount']!r}") from e

        transactions.append(Transaction(
            id=record["id"],
            date=record["date"],
            description=record["description"],
            amount=amount,
            category=record["category"] or None
        ))

    logger.info(f"Imported {len(transactions)} transactions")
    return transactions


def write_transactions_csv(transactions: Iterable[Transaction], destination: Union[str, Path, IO]) -> None:
    """Write transactions as CSV with the standard column order."""
    rows = [
        {
            "id": txn.id,
            "date": txn.date,
            "description": txn.description,
            "amount": str(txn.amount),
            "category": txn.category or "",
        }
        for txn in transactions
    ]
    df = pd.DataFrame(rows, columns=OUTPUT_COLUMNS)
    df.to_csv(destination, index=False)
    logger.debug(f"Wrote {len(rows)} transactions")
