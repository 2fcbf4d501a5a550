"""
County Natality Analysis - Column Selection
Projects each cleaned extract to its declared columns and canonical names
"""

import re
from typing import List

import pandas as pd

from src.processing.schema import (
    HEALTH_RANKING_FIELDS,
    NATALITY_FIELDS,
    NATALITY_LOCATION_COLUMN,
    FieldSpec,
    coerce_to_schema,
)
from src.utils.errors import DataQualityViolation
from src.utils.logging import get_logger

logger = get_logger(__name__)

LOCATION_SEPARATOR = ", "


def normalize_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """Lower-case column names and replace whitespace runs with underscores."""
    return df.rename(columns=lambda c: re.sub(r"\s+", "_", str(c).strip()).lower())


def split_location(df: pd.DataFrame, column: str = NATALITY_LOCATION_COLUMN) -> pd.DataFrame:
    """
    Split a "County, ST" label into county and state columns.

    Args:
        df: DataFrame holding the composite label
        column: Name of the composite column

    Returns:
        New DataFrame with 'county' and 'state' added
    """
    labels = df[column].astype(str)
    malformed = labels.str.count(LOCATION_SEPARATOR) != 1
    if malformed.any():
        raise DataQualityViolation(
            f"{int(malformed.sum())} location labels do not split into county and state",
            stage="select_natality",
            records=labels[malformed].tolist(),
        )

    df = df.copy()
    if df.empty:
        df["county"] = pd.Series(dtype=object)
        df["state"] = pd.Series(dtype=object)
        return df

    parts = labels.str.split(LOCATION_SEPARATOR, expand=True)
    df["county"] = parts[0]
    df["state"] = parts[1]
    return df


def _project(df: pd.DataFrame, fields: List[FieldSpec]) -> pd.DataFrame:
    df = df[[f.source for f in fields]]
    df = df.rename(columns={f.source: f.name for f in fields})
    return normalize_column_names(df)


def select_natality(df: pd.DataFrame) -> pd.DataFrame:
    """
    Select and rename natality columns.

    Args:
        df: Cleaned natality DataFrame

    Returns:
        Typed DataFrame with the eight canonical natality columns
    """
    df = _project(split_location(df), NATALITY_FIELDS)
    df = coerce_to_schema(df, NATALITY_FIELDS, stage="select_natality")

    logger.info(f"Selected natality columns: {list(df.columns)}")
    return df


def select_health_rankings(df: pd.DataFrame) -> pd.DataFrame:
    """
    Select and rename health rankings columns.

    Args:
        df: Cleaned health rankings DataFrame

    Returns:
        Typed DataFrame with the eight canonical health rankings columns
    """
    df = _project(df, HEALTH_RANKING_FIELDS)
    df = coerce_to_schema(df, HEALTH_RANKING_FIELDS, stage="select_health_rankings")

    logger.info(f"Selected health rankings columns: {list(df.columns)}")
    return df
