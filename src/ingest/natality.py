"""
County Natality Analysis - Natality Loader
Reads the CDC WONDER natality extract

Data Source:
- CDC WONDER Natality, Expanded (tab-separated export, one row per
  county of residence, trailing footnote rows in the Notes column)
"""

import pandas as pd

from config.settings import get_settings
from src.processing.schema import NATALITY_RAW_COLUMNS
from src.utils.data_sources import read_tabular_source
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

STAGE = "load_natality"


def load_natality(path: str = None) -> pd.DataFrame:
    """
    Load the raw natality extract.

    Args:
        path: Local path of the tab-separated file (default: NATALITY_PATH)

    Returns:
        DataFrame of text columns, one row per county plus footnote rows
    """
    path = path or settings.NATALITY_PATH
    logger.info(f"Loading natality extract from {path}")

    df = read_tabular_source(
        path,
        sep="\t",
        stage=STAGE,
        required_columns=NATALITY_RAW_COLUMNS,
    )

    logger.info(f"Loaded {len(df)} raw natality rows")
    return df
