"""
County Natality Analysis - Health Rankings Loader
Reads the County Health Rankings analytic extract

Data Source:
- County Health Rankings & Roadmaps analytic data (comma-separated).
  Line 1 holds descriptive labels and is skipped; line 2 holds the
  variable codes used as the header. State and national aggregate rows
  are included and filtered later.
"""

import pandas as pd

from config.settings import get_settings
from src.processing.schema import HEALTH_RANKING_RAW_COLUMNS
from src.utils.data_sources import read_tabular_source
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

STAGE = "load_health_rankings"
BANNER_LINES = 1


def load_health_rankings(source: str = None) -> pd.DataFrame:
    """
    Load the raw health rankings extract.

    Args:
        source: Local path or URL (default: HEALTH_RANKINGS_SOURCE)

    Returns:
        DataFrame of text columns including aggregate rows
    """
    source = source or settings.HEALTH_RANKINGS_SOURCE
    logger.info(f"Loading health rankings extract from {source}")

    df = read_tabular_source(
        source,
        sep=",",
        stage=STAGE,
        required_columns=HEALTH_RANKING_RAW_COLUMNS,
        skiprows=BANNER_LINES,
    )

    logger.info(f"Loaded {len(df)} raw health rankings rows")
    return df
