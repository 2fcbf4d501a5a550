"""
County Natality Analysis - Source Merge
Joins natality and health rankings tables on (county, state)
"""

import pandas as pd

from src.utils.logging import get_logger

logger = get_logger(__name__)

JOIN_KEYS = ["county", "state"]


def merge_sources(natality: pd.DataFrame, rankings: pd.DataFrame) -> pd.DataFrame:
    """
    Inner-join the two selected tables and keep complete rows only.

    Args:
        natality: Selected natality DataFrame
        rankings: Selected health rankings DataFrame

    Returns:
        Merged DataFrame, one row per matched county
    """
    logger.info(
        f"Merging {len(natality)} natality rows with {len(rankings)} health rankings rows "
        f"on {JOIN_KEYS}"
    )

    merged = natality.merge(rankings, on=JOIN_KEYS, how="inner")
    matched = len(merged)

    merged = merged.dropna().reset_index(drop=True)

    logger.info(f"Merged {matched} matching rows, {len(merged)} complete")
    return merged
