"""
County Natality Analysis - Classification Logic
Converts percentage columns into categorical outcome and predictor variables

High child poverty (logistic outcome):
- no:  (-1, 16.3]
- yes: (16.3, 100]

Urbanicity (ordinal predictor, from percent rural):
- Very High: (-1, 10]
- High:      (10, 20]
- Medium:    (20, 30]
- Low:       (30, 100]

Intervals are left-open/right-closed. Lower bounds sit at -1 so that an
exact 0% lands in the first bucket.
"""

from typing import List, Optional, Tuple

import pandas as pd

from config.settings import get_settings
from src.processing.schema import POVERTY_FLAG_LEVELS, URBANICITY_LEVELS
from src.utils.errors import DataQualityViolation, ParseFailure
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

PERCENT_LOWER_BOUND = -1.0
PERCENT_UPPER_BOUND = 100.0

URBANICITY_BINS: List[Tuple[float, str]] = list(zip([10.0, 20.0, 30.0, PERCENT_UPPER_BOUND], URBANICITY_LEVELS))


def bucketize(
    values: pd.Series,
    bins: List[Tuple[float, str]],
    lower: float,
    right: bool = True,
    stage: str = "derive",
) -> pd.Series:
    """
    Assign each value to the interval it falls in.

    Intervals are (lower, b1], (b1, b2], ... when right=True and
    [lower, b1), [b1, b2), ... otherwise.

    Args:
        values: Numeric values to categorize
        bins: Ordered (upper_bound, label) pairs
        lower: Lower bound of the first interval
        right: Whether intervals are closed on the right
        stage: Stage name reported on failure

    Returns:
        Ordered categorical Series with the bin labels as levels
    """
    labels = [label for _, label in bins]

    if isinstance(values.dtype, pd.CategoricalDtype):
        # Already bucketized with the same levels
        if list(values.cat.categories) == labels:
            return values.copy()
        raise DataQualityViolation(
            f"'{values.name}' is categorical with levels that differ from {labels}",
            stage=stage,
            records=list(values.cat.categories),
        )

    edges = [lower] + [upper for upper, _ in bins]
    if any(b <= a for a, b in zip(edges, edges[1:])):
        raise ValueError(f"Bin edges must be strictly increasing: {edges}")

    numeric = pd.to_numeric(values, errors="coerce")
    unparsed = values.notna() & numeric.isna()
    if unparsed.any():
        raise ParseFailure(
            f"{int(unparsed.sum())} values of '{values.name}' are not numeric",
            stage=stage,
            records=values[unparsed].tolist(),
        )

    result = pd.cut(numeric, bins=edges, labels=labels, right=right, ordered=True)

    outside = numeric.notna() & result.isna()
    if outside.any():
        raise DataQualityViolation(
            f"{int(outside.sum())} values of '{values.name}' fall outside {edges[0]}..{edges[-1]}",
            stage=stage,
            records=numeric[outside].tolist(),
        )

    return result


def classify_child_poverty(poverty_pct: pd.Series, threshold: Optional[float] = None) -> pd.Series:
    """
    Flag counties whose child poverty percentage exceeds the threshold.

    Args:
        poverty_pct: Child poverty percentage (0-100)
        threshold: Cut point (default: POVERTY_THRESHOLD)

    Returns:
        Categorical Series of 'no' / 'yes'
    """
    threshold = settings.POVERTY_THRESHOLD if threshold is None else threshold
    no_label, yes_label = POVERTY_FLAG_LEVELS

    flags = bucketize(
        poverty_pct,
        bins=[(threshold, no_label), (PERCENT_UPPER_BOUND, yes_label)],
        lower=PERCENT_LOWER_BOUND,
    )

    logger.info(f"High child poverty (> {threshold}%): {int((flags == yes_label).sum())} of {len(flags)}")
    return flags


def classify_urbanicity(rural_pct: pd.Series) -> pd.Series:
    """
    Classify urbanicity from the percentage of population living in rural areas.

    Args:
        rural_pct: Rural population percentage (0-100)

    Returns:
        Ordered categorical Series, Very High (most urban) to Low
    """
    levels = bucketize(rural_pct, bins=URBANICITY_BINS, lower=PERCENT_LOWER_BOUND)

    counts = levels.value_counts(sort=False)
    logger.info(f"Urbanicity distribution: {counts.to_dict()}")
    return levels
