"""
County Natality Analysis - Analytic Table Export
Persists the analytic table as Parquet for the regression notebooks

Parquet (via pyarrow) keeps column order and categorical levels. On read
the declared levels are re-applied so downstream code always sees the same
ordinal encoding.
"""

from pathlib import Path

import pandas as pd

from src.processing.schema import ANALYTIC_COLUMNS, ANALYTIC_FIELDS, FieldType
from src.utils.errors import SchemaMismatch, SourceUnavailable
from src.utils.logging import get_logger

logger = get_logger(__name__)

PARQUET_ENGINE = "pyarrow"


def write_analytic_table(df: pd.DataFrame, path: str) -> Path:
    """
    Write the analytic table to Parquet.

    Args:
        df: Validated analytic DataFrame
        path: Output file path (parent directories are created)

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    df.to_parquet(path, engine=PARQUET_ENGINE, index=False)

    logger.info(f"✓ Wrote {len(df)} rows x {len(df.columns)} columns to {path}")
    return path


def read_analytic_table(path: str) -> pd.DataFrame:
    """
    Read an analytic table written by write_analytic_table.

    Args:
        path: Parquet file path

    Returns:
        DataFrame in ANALYTIC_COLUMNS order with declared dtypes
    """
    path = Path(path)
    if not path.is_file():
        raise SourceUnavailable(f"Analytic table not found: {path}", stage="read_analytic_table")

    df = pd.read_parquet(path, engine=PARQUET_ENGINE)

    if list(df.columns) != ANALYTIC_COLUMNS:
        raise SchemaMismatch(
            f"Columns in {path} do not match the analytic layout",
            stage="read_analytic_table",
            records=list(df.columns),
        )

    for spec in ANALYTIC_FIELDS:
        if spec.field_type == FieldType.CATEGORICAL:
            df[spec.name] = df[spec.name].astype(spec.dtype)
        elif spec.field_type == FieldType.TEXT:
            df[spec.name] = df[spec.name].astype("string")

    logger.info(f"Read {len(df)} rows from {path}")
    return df
