#!/usr/bin/env python3
"""
Review Reports

Tabular views of reconciliation records for export and summary.
"""

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from ..core.currency import cents_to_decimal_str
from .models import ReconciliationRecord

logger = logging.getLogger(__name__)

MONEY_COLUMNS = [
    "total_sales",
    "total_eftpos",
    "payouts",
    "expected_banking",
    "actual_banking",
    "variance",
]


def records_to_dataframe(records: list[ReconciliationRecord]) -> pd.DataFrame:
    """
    Convert records to a DataFrame, one row per record.

    Money columns hold integer cents; the trading date is parsed into a
    datetime column so it sorts and filters naturally.

    Args:
        records: Records to convert

    Returns:
        DataFrame sorted by trading date (oldest first)
    """
    rows = []
    for record in records:
        summary = record.summary
        rows.append(
            {
                "id": record.id,
                "date": pd.to_datetime(record.date, errors="coerce"),
                "employee_name": record.employee_name,
                "status": record.status.value,
                "total_sales": summary.total_sales.to_cents(),
                "total_eftpos": summary.total_eftpos.to_cents(),
                "payouts": summary.payouts.to_cents(),
                "expected_banking": summary.expected_banking.to_cents(),
                "actual_banking": summary.actual_banking.to_cents(),
                "variance": summary.variance.to_cents(),
                "is_balanced": record.calculations.is_balanced,
                "classification": record.calculations.classification.value,
                "bag_number": record.bag_number,
                "submitted_at": record.submitted_at,
                "reviewed_at": record.reviewed_at,
                "manager_comments": record.manager_comments,
            }
        )

    df = pd.DataFrame(rows)
    if not df.empty:
        df = df.sort_values("date", kind="stable").reset_index(drop=True)

    logger.info("Converted %d records to DataFrame", len(df))
    return df


def summarize_records(df: pd.DataFrame) -> dict[str, Any]:
    """
    Headline statistics for a records DataFrame.

    Returns:
        Dictionary with record count, balanced count, net and absolute variance
        in cents, and a count per status
    """
    if df.empty:
        return {
            "record_count": 0,
            "balanced_count": 0,
            "net_variance_cents": 0,
            "absolute_variance_cents": 0,
            "by_status": {},
        }

    return {
        "record_count": len(df),
        "balanced_count": int(df["is_balanced"].sum()),
        "net_variance_cents": int(df["variance"].sum()),
        "absolute_variance_cents": int(df["variance"].abs().sum()),
        "by_status": {str(k): int(v) for k, v in df["status"].value_counts().sort_index().items()},
    }


def export_records_csv(records: list[ReconciliationRecord], output_file: Path) -> int:
    """
    Write records to CSV with money as decimal dollar strings.

    Args:
        records: Records to export
        output_file: Destination CSV path

    Returns:
        Number of rows written
    """
    df = records_to_dataframe(records)
    if not df.empty:
        for column in MONEY_COLUMNS:
            df[column] = df[column].map(cents_to_decimal_str)
        df["date"] = df["date"].dt.strftime("%Y-%m-%d")

    output_file.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_file, index=False)
    logger.info("Exported %d records to %s", len(df), output_file)
    return len(df)
