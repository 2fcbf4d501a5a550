"""
County Natality Analysis - Descriptive Statistics
Column summaries, codebook and the Box-Cox diagnostic for birth rate

The Box-Cox profile follows the usual construction: for each candidate
lambda the response is transformed, an OLS model is fitted on the linear
predictors, and the profile log-likelihood is

    -n/2 * log(RSS / n) + (lambda - 1) * sum(log y)

The 95% interval keeps every lambda within chi2(1, 0.95) / 2 of the maximum.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd
from scipy import stats

from src.processing.schema import ANALYTIC_FIELDS_BY_NAME
from src.utils.errors import DataQualityViolation
from src.utils.logging import get_logger

logger = get_logger(__name__)

BOXCOX_RESPONSE = "birth_rate"
BOXCOX_PREDICTORS = [
    "mother_age",
    "birth_weight",
    "pre_preg_bmi",
    "birth_interval",
    "single_parent",
    "prenatal_visits",
    "urbanicity",
]
DEFAULT_LAMBDAS = np.round(np.linspace(-2.0, 2.0, 401), 4)


@dataclass
class BoxCoxResult:
    """Profile log-likelihood of the Box-Cox parameter"""
    profile: pd.DataFrame  # columns: lambda, loglik
    lambda_hat: float
    ci_low: float
    ci_high: float


def column_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Count non-missing, distinct and missing values per column.

    Args:
        df: Any DataFrame

    Returns:
        DataFrame indexed by column name with n, distinct, missing
    """
    return pd.DataFrame({
        "n": df.notna().sum(),
        "distinct": df.nunique(dropna=True),
        "missing": df.isna().sum(),
    })


def _is_categorical(values: pd.Series) -> bool:
    return isinstance(values.dtype, pd.CategoricalDtype)


def describe_table(df: pd.DataFrame) -> pd.DataFrame:
    """
    Summarize each column for the codebook.

    Continuous columns get median and [min, max]; categorical columns get
    level counts; text columns get nothing beyond their distinct count.

    Args:
        df: Analytic DataFrame

    Returns:
        DataFrame indexed by column name with kind, median, min, max, summary
    """
    rows = []

    for col in df.columns:
        values = df[col]

        if _is_categorical(values):
            counts = values.value_counts(sort=False)
            summary = "; ".join(f"{level}: {int(count)}" for level, count in counts.items())
            rows.append({"column": col, "kind": "categorical", "summary": summary})

        elif pd.api.types.is_numeric_dtype(values):
            median, low, high = values.median(), values.min(), values.max()
            rows.append({
                "column": col,
                "kind": "continuous",
                "median": median,
                "min": low,
                "max": high,
                "summary": f"{median:.2f} [{low:.2f}, {high:.2f}]",
            })

        else:
            rows.append({"column": col, "kind": "text", "summary": ""})

    return pd.DataFrame(rows, columns=["column", "kind", "median", "min", "max", "summary"]).set_index("column")


def build_codebook(df: pd.DataFrame) -> pd.DataFrame:
    """
    Combine schema metadata with column statistics.

    Args:
        df: Analytic DataFrame

    Returns:
        One row per column: group, type, unit, description, n, distinct,
        missing, summary
    """
    meta = []
    for col in df.columns:
        spec = ANALYTIC_FIELDS_BY_NAME.get(col)
        meta.append({
            "column": col,
            "group": spec.group.value if spec else "",
            "type": spec.field_type.value if spec else str(df[col].dtype),
            "unit": spec.unit if spec else "",
            "description": spec.description if spec else "",
            "levels": ", ".join(spec.levels) if spec and spec.levels else "",
        })

    codebook = (
        pd.DataFrame(meta)
        .set_index("column")
        .join(column_summary(df))
        .join(describe_table(df)[["summary"]])
    )

    logger.info(f"Built codebook for {len(codebook)} columns")
    return codebook


def _design_matrix(df: pd.DataFrame, predictors: List[str]) -> np.ndarray:
    dummies = pd.get_dummies(df[predictors], drop_first=True, dtype=float)
    return np.column_stack([np.ones(len(df)), dummies.to_numpy(dtype=float)])


def boxcox_identifiable(df: pd.DataFrame, predictors: Optional[List[str]] = None) -> bool:
    """True when there are more rows than model coefficients."""
    predictors = BOXCOX_PREDICTORS if predictors is None else predictors
    return len(df) > _design_matrix(df, predictors).shape[1]


def boxcox_profile(
    df: pd.DataFrame,
    response: str = BOXCOX_RESPONSE,
    predictors: Optional[List[str]] = None,
    lambdas: Optional[np.ndarray] = None,
) -> BoxCoxResult:
    """
    Profile the Box-Cox parameter for a linear model of the response.

    Args:
        df: Analytic DataFrame
        response: Strictly positive response column
        predictors: Predictor columns; categoricals enter as treatment dummies
        lambdas: Grid of candidate lambdas (default: -2 to 2 by 0.01)

    Returns:
        BoxCoxResult with the profile, maximizing lambda and 95% interval
    """
    predictors = BOXCOX_PREDICTORS if predictors is None else predictors
    lambdas = DEFAULT_LAMBDAS if lambdas is None else np.asarray(lambdas, dtype=float)

    y = df[response].to_numpy(dtype=float)
    if (y <= 0).any():
        raise DataQualityViolation(
            f"Box-Cox requires a positive '{response}'",
            stage="report",
            records=df.loc[df[response] <= 0].index.tolist(),
        )

    X = _design_matrix(df, predictors)
    n = len(y)
    log_y = np.log(y)
    log_y_sum = log_y.sum()

    logliks = []
    for lam in lambdas:
        z = log_y if abs(lam) < 1e-12 else (y ** lam - 1) / lam
        beta, _, _, _ = np.linalg.lstsq(X, z, rcond=None)
        rss = float(np.sum((z - X @ beta) ** 2))
        logliks.append(-n / 2 * np.log(rss / n) + (lam - 1) * log_y_sum)

    profile = pd.DataFrame({"lambda": lambdas, "loglik": logliks})
    best = profile["loglik"].idxmax()
    cutoff = profile.loc[best, "loglik"] - stats.chi2.ppf(0.95, 1) / 2
    inside = profile.loc[profile["loglik"] >= cutoff, "lambda"]

    result = BoxCoxResult(
        profile=profile,
        lambda_hat=float(profile.loc[best, "lambda"]),
        ci_low=float(inside.min()),
        ci_high=float(inside.max()),
    )

    logger.info(
        f"Box-Cox lambda for {response}: {result.lambda_hat:.2f} "
        f"(95% CI {result.ci_low:.2f} to {result.ci_high:.2f})"
    )
    return result
