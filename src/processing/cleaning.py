"""
County Natality Analysis - Source Cleaning
Removes non-data rows and columns from the raw extracts

Natality:
- Notes column and footnote rows
- "Not Available" birth rates (converted to missing, then dropped)
- The "Unidentified Counties" pseudo-county

Health rankings:
- State and national aggregate rows
- Counties not eligible for ranking
"""

from typing import List

import numpy as np
import pandas as pd

from config.settings import AGGREGATE_COUNTY_LABELS
from src.processing.schema import (
    NATALITY_BIRTH_RATE_COLUMN,
    NATALITY_LOCATION_COLUMN,
    NATALITY_NOTES_COLUMN,
    RANKINGS_COUNTY_COLUMN,
    RANKINGS_RANKED_COLUMN,
)
from src.utils.logging import get_logger

logger = get_logger(__name__)

NOT_AVAILABLE = "Not Available"
PSEUDO_COUNTY_LABELS: List[str] = ["Unidentified Counties, CT"]


def clean_natality(df: pd.DataFrame) -> pd.DataFrame:
    """
    Clean the raw natality extract.

    The sentinel birth rate is replaced before the completeness filter so
    that suppressed counties are removed with the footnote rows.

    Args:
        df: Raw natality DataFrame (text columns)

    Returns:
        New DataFrame with complete county rows only
    """
    rows_in = len(df)

    df = df.drop(columns=[NATALITY_NOTES_COLUMN])
    df[NATALITY_BIRTH_RATE_COLUMN] = df[NATALITY_BIRTH_RATE_COLUMN].replace(NOT_AVAILABLE, np.nan)
    df = df.dropna()
    df = df[~df[NATALITY_LOCATION_COLUMN].isin(PSEUDO_COUNTY_LABELS)]
    df = df.reset_index(drop=True)

    logger.info(f"Cleaned natality: {rows_in} -> {len(df)} rows")
    return df


def clean_health_rankings(df: pd.DataFrame) -> pd.DataFrame:
    """
    Clean the raw health rankings extract.

    Args:
        df: Raw health rankings DataFrame (text columns)

    Returns:
        New DataFrame with ranked county rows only
    """
    rows_in = len(df)

    df = df[~df[RANKINGS_COUNTY_COLUMN].isin(AGGREGATE_COUNTY_LABELS)]

    ranked = pd.to_numeric(df[RANKINGS_RANKED_COLUMN], errors="coerce")
    df = df[ranked == 1]
    df = df.reset_index(drop=True)

    logger.info(f"Cleaned health rankings: {rows_in} -> {len(df)} rows")
    return df
