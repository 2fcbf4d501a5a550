"""
County Natality Analysis - Derived Variables
Builds the final analytic table from the merged sources

Steps:
1. Rescale fraction columns to percentages (0-100)
2. Derive the high child poverty flag and urbanicity category
3. Coerce identifiers and the outcome to their canonical types
4. Drop the superseded source percentages and order columns

Each step returns a new DataFrame; inputs are never modified.
"""

from typing import List, Optional

import pandas as pd

from src.processing.classification import classify_child_poverty, classify_urbanicity
from src.processing.schema import (
    ANALYTIC_COLUMNS,
    ANALYTIC_FIELDS,
    PERCENT_COLUMNS,
    PROPORTION_COLUMNS,
    FieldType,
)
from src.utils.errors import DataQualityViolation, ParseFailure
from src.utils.logging import get_logger

logger = get_logger(__name__)

STAGE = "derive"
FIPS_WIDTH = 5
SUPERSEDED_COLUMNS = ["chld_pov", "rural"]


def _offending_ids(df: pd.DataFrame, mask: pd.Series) -> list:
    id_col = "fips" if "fips" in df.columns else None
    if id_col is None:
        return df.index[mask].tolist()
    return df.loc[mask, id_col].tolist()


def rescale_proportions(df: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Convert fraction columns (0-1) to percentages (0-100).

    Args:
        df: DataFrame with fraction-valued columns
        columns: Columns to rescale (default: PROPORTION_COLUMNS)

    Returns:
        New DataFrame with rescaled columns
    """
    columns = PROPORTION_COLUMNS if columns is None else columns
    df = df.copy()

    for col in columns:
        df[col] = df[col] * 100

        out_of_range = df[col].notna() & ((df[col] < 0) | (df[col] > 100))
        if out_of_range.any():
            raise DataQualityViolation(
                f"'{col}' has {int(out_of_range.sum())} values outside 0-100 after rescaling",
                stage=STAGE,
                records=_offending_ids(df, out_of_range),
            )

    logger.info(f"Rescaled {len(columns)} proportion columns to percentages")
    return df


def coerce_final_types(df: pd.DataFrame) -> pd.DataFrame:
    """
    Coerce FIPS, birth rate and state to their canonical types.

    - fips: 5-character zero-padded text
    - birth_rate: float
    - state: categorical over the observed state codes

    Args:
        df: Merged DataFrame

    Returns:
        New DataFrame with coerced columns
    """
    df = df.copy()

    fips = df["fips"].astype(str).str.strip()
    bad_fips = ~fips.str.fullmatch(r"\d{1,5}")
    if bad_fips.any():
        raise ParseFailure(
            f"{int(bad_fips.sum())} FIPS codes are not 1-5 digit codes",
            stage=STAGE,
            records=fips[bad_fips].tolist(),
        )
    df["fips"] = fips.str.zfill(FIPS_WIDTH).astype("string")

    birth_rate = pd.to_numeric(df["birth_rate"], errors="coerce")
    bad_rate = df["birth_rate"].notna() & birth_rate.isna()
    if bad_rate.any():
        raise ParseFailure(
            f"{int(bad_rate.sum())} birth rates are not numeric",
            stage=STAGE,
            records=df.loc[bad_rate, "birth_rate"].tolist(),
        )
    df["birth_rate"] = birth_rate.astype("float64")

    df["state"] = df["state"].astype(str).astype("category")

    return df


def derive_analytic_table(merged: pd.DataFrame) -> pd.DataFrame:
    """
    Build the analytic table from the merged sources.

    Args:
        merged: Output of merge_sources

    Returns:
        DataFrame in ANALYTIC_COLUMNS order
    """
    logger.info(f"Deriving analytic table from {len(merged)} merged rows")

    df = rescale_proportions(merged)
    df["hi_chld_pov"] = classify_child_poverty(df["chld_pov"])
    df["urbanicity"] = classify_urbanicity(df["rural"])
    df = coerce_final_types(df)
    df = df.drop(columns=SUPERSEDED_COLUMNS)
    df = df[ANALYTIC_COLUMNS].reset_index(drop=True)

    logger.info(f"Derived analytic table: {len(df)} rows x {len(df.columns)} columns")
    return df


def validate_analytic_table(df: pd.DataFrame, expected_rows: Optional[int] = None) -> pd.DataFrame:
    """
    Check the invariants of the analytic table.

    Raises DataQualityViolation on the first failed check.

    Args:
        df: Analytic DataFrame
        expected_rows: Row count to assert, if known

    Returns:
        The same DataFrame, unchanged
    """
    stage = "validate"

    if list(df.columns) != ANALYTIC_COLUMNS:
        raise DataQualityViolation(
            f"Columns {list(df.columns)} do not match the analytic layout",
            stage=stage,
            records=ANALYTIC_COLUMNS,
        )

    incomplete = df.isna().any()
    if incomplete.any():
        raise DataQualityViolation(
            "Analytic table has missing values",
            stage=stage,
            records=incomplete[incomplete].index.tolist(),
        )

    if df["fips"].nunique() != len(df):
        duplicated = df.loc[df["fips"].duplicated(keep=False), "fips"].unique().tolist()
        raise DataQualityViolation(
            f"FIPS codes are not unique: {df['fips'].nunique()} distinct for {len(df)} rows",
            stage=stage,
            records=duplicated,
        )

    for col in PERCENT_COLUMNS:
        out_of_range = (df[col] < 0) | (df[col] > 100)
        if out_of_range.any():
            raise DataQualityViolation(
                f"'{col}' has values outside 0-100",
                stage=stage,
                records=_offending_ids(df, out_of_range),
            )

    negative = df["birth_rate"] < 0
    if negative.any():
        raise DataQualityViolation(
            "Negative birth rates", stage=stage, records=_offending_ids(df, negative)
        )

    for spec in ANALYTIC_FIELDS:
        if spec.field_type == FieldType.CATEGORICAL and spec.levels:
            if not isinstance(df[spec.name].dtype, pd.CategoricalDtype):
                raise DataQualityViolation(f"'{spec.name}' is not categorical", stage=stage)
            actual = list(df[spec.name].cat.categories)
            if actual != spec.levels:
                raise DataQualityViolation(
                    f"'{spec.name}' levels {actual} differ from {spec.levels}",
                    stage=stage,
                )

    if expected_rows is not None and len(df) != expected_rows:
        raise DataQualityViolation(
            f"Expected {expected_rows} rows, found {len(df)}",
            stage=stage,
        )

    logger.info(f"✓ Analytic table valid: {len(df)} rows, {df['fips'].nunique()} distinct FIPS codes")
    return df
