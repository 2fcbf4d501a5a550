"""
County Natality Analysis - Schema Registry
Single source of truth for every column the pipeline reads or writes

This registry defines:
- Source column labels for each raw extract
- Canonical short names
- Declared types (text, numeric, categorical with levels)
- Units, descriptions and analysis group (used by the codebook)

Raw extracts are read as text and coerced against these declarations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import pandas as pd

from src.utils.errors import ParseFailure
from src.utils.logging import get_logger

logger = get_logger(__name__)


class FieldType(str, Enum):
    """Declared column type"""
    TEXT = "text"
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


class FieldGroup(str, Enum):
    """Role of a column in the planned regressions"""
    IDENTIFIER = "identifier"
    LINEAR = "linear outcome group"
    SHARED = "shared predictor"
    LOGISTIC = "logistic outcome group"
    INTERMEDIATE = "intermediate"


@dataclass
class FieldSpec:
    """
    Declaration of a single column
    """
    name: str  # Canonical column name
    source: str  # Column label in the raw extract
    field_type: FieldType
    description: str
    unit: str = ""
    group: FieldGroup = FieldGroup.INTERMEDIATE
    levels: Optional[List[str]] = None  # Declared categorical levels
    ordered: bool = False  # True for ordinal categoricals

    @property
    def dtype(self):
        if self.field_type == FieldType.CATEGORICAL and self.levels:
            return pd.CategoricalDtype(categories=self.levels, ordered=self.ordered)
        if self.field_type == FieldType.CATEGORICAL:
            return "category"
        if self.field_type == FieldType.NUMERIC:
            return "float64"
        return "string"


# ============================================================================
# RAW: CDC WONDER NATALITY EXTRACT (tab-separated)
# ============================================================================

NATALITY_NOTES_COLUMN = "Notes"
NATALITY_LOCATION_COLUMN = "County of Residence"
NATALITY_BIRTH_RATE_COLUMN = "Birth Rate"

NATALITY_FIELDS: List[FieldSpec] = [
    FieldSpec(
        name="county",
        source="county",
        field_type=FieldType.TEXT,
        description="County of residence, split from the composite location label",
        group=FieldGroup.IDENTIFIER,
    ),
    FieldSpec(
        name="state",
        source="state",
        field_type=FieldType.TEXT,
        description="Two-letter state code, split from the composite location label",
        group=FieldGroup.IDENTIFIER,
    ),
    FieldSpec(
        name="birth_rate",
        source=NATALITY_BIRTH_RATE_COLUMN,
        field_type=FieldType.NUMERIC,
        unit="births per 1,000 population",
        description="Birth rate",
        group=FieldGroup.LINEAR,
    ),
    FieldSpec(
        name="mother_age",
        source="Average Age of Mother (years)",
        field_type=FieldType.NUMERIC,
        unit="years",
        description="Average age of mother",
        group=FieldGroup.LINEAR,
    ),
    FieldSpec(
        name="birth_weight",
        source="Average Birth Weight (grams)",
        field_type=FieldType.NUMERIC,
        unit="grams",
        description="Average birth weight",
        group=FieldGroup.LINEAR,
    ),
    FieldSpec(
        name="pre_preg_bmi",
        source="Average Pre-pregnancy BMI",
        field_type=FieldType.NUMERIC,
        unit="kg/m^2",
        description="Average pre-pregnancy body mass index of mother",
        group=FieldGroup.LINEAR,
    ),
    FieldSpec(
        name="prenatal_visits",
        source="Average Number of Prenatal Visits",
        field_type=FieldType.NUMERIC,
        unit="visits",
        description="Average number of prenatal visits",
        group=FieldGroup.SHARED,
    ),
    FieldSpec(
        name="birth_interval",
        source="Average Interval Since Last Live Birth (months)",
        field_type=FieldType.NUMERIC,
        unit="months",
        description="Average interval since last live birth",
        group=FieldGroup.LINEAR,
    ),
]

# Columns that must be present in the raw natality file
NATALITY_RAW_COLUMNS = [NATALITY_NOTES_COLUMN, NATALITY_LOCATION_COLUMN] + [
    f.source for f in NATALITY_FIELDS if f.name not in ("county", "state")
]


# ============================================================================
# RAW: COUNTY HEALTH RANKINGS ANALYTIC EXTRACT (comma-separated, banner line)
# ============================================================================

RANKINGS_COUNTY_COLUMN = "county"
RANKINGS_RANKED_COLUMN = "county_ranked"

HEALTH_RANKING_FIELDS: List[FieldSpec] = [
    FieldSpec(
        name="fips",
        source="fipscode",
        field_type=FieldType.TEXT,
        description="County FIPS code",
        group=FieldGroup.IDENTIFIER,
    ),
    FieldSpec(
        name="county",
        source=RANKINGS_COUNTY_COLUMN,
        field_type=FieldType.TEXT,
        description="County name",
        group=FieldGroup.IDENTIFIER,
    ),
    FieldSpec(
        name="state",
        source="state",
        field_type=FieldType.TEXT,
        description="Two-letter state code",
        group=FieldGroup.IDENTIFIER,
    ),
    FieldSpec(
        name="chld_pov",
        source="v024_rawvalue",
        field_type=FieldType.NUMERIC,
        unit="fraction",
        description="Children in poverty",
    ),
    FieldSpec(
        name="single_parent",
        source="v082_rawvalue",
        field_type=FieldType.NUMERIC,
        unit="fraction",
        description="Children in single-parent households",
        group=FieldGroup.SHARED,
    ),
    FieldSpec(
        name="chld_mortality",
        source="v129_rawvalue",
        field_type=FieldType.NUMERIC,
        unit="deaths per 100,000",
        description="Child mortality rate",
        group=FieldGroup.LOGISTIC,
    ),
    FieldSpec(
        name="chld_uninsured",
        source="v122_rawvalue",
        field_type=FieldType.NUMERIC,
        unit="fraction",
        description="Uninsured children",
        group=FieldGroup.LOGISTIC,
    ),
    FieldSpec(
        name="rural",
        source="v058_rawvalue",
        field_type=FieldType.NUMERIC,
        unit="fraction",
        description="Population living in a rural area",
    ),
]

HEALTH_RANKING_RAW_COLUMNS = [f.source for f in HEALTH_RANKING_FIELDS] + [RANKINGS_RANKED_COLUMN]

# Fraction-valued columns rescaled to percentages after the join
PROPORTION_COLUMNS = ["chld_pov", "single_parent", "chld_uninsured", "rural"]


# ============================================================================
# ANALYTIC RECORD (final merged table)
# ============================================================================

URBANICITY_LEVELS = ["Very High", "High", "Medium", "Low"]
POVERTY_FLAG_LEVELS = ["no", "yes"]

ANALYTIC_FIELDS: List[FieldSpec] = [
    FieldSpec(
        name="fips",
        source="fipscode",
        field_type=FieldType.TEXT,
        unit="5-digit code",
        description="County FIPS code",
        group=FieldGroup.IDENTIFIER,
    ),
    FieldSpec(
        name="county",
        source="county",
        field_type=FieldType.TEXT,
        description="County name",
        group=FieldGroup.IDENTIFIER,
    ),
    FieldSpec(
        name="state",
        source="state",
        field_type=FieldType.CATEGORICAL,
        description="Two-letter state code",
        group=FieldGroup.IDENTIFIER,
    ),
    FieldSpec(
        name="birth_rate",
        source=NATALITY_BIRTH_RATE_COLUMN,
        field_type=FieldType.NUMERIC,
        unit="births per 1,000 population",
        description="Birth rate (linear regression outcome)",
        group=FieldGroup.LINEAR,
    ),
    FieldSpec(
        name="mother_age",
        source="Average Age of Mother (years)",
        field_type=FieldType.NUMERIC,
        unit="years",
        description="Average age of mother",
        group=FieldGroup.LINEAR,
    ),
    FieldSpec(
        name="birth_weight",
        source="Average Birth Weight (grams)",
        field_type=FieldType.NUMERIC,
        unit="grams",
        description="Average birth weight",
        group=FieldGroup.LINEAR,
    ),
    FieldSpec(
        name="pre_preg_bmi",
        source="Average Pre-pregnancy BMI",
        field_type=FieldType.NUMERIC,
        unit="kg/m^2",
        description="Average pre-pregnancy body mass index of mother",
        group=FieldGroup.LINEAR,
    ),
    FieldSpec(
        name="birth_interval",
        source="Average Interval Since Last Live Birth (months)",
        field_type=FieldType.NUMERIC,
        unit="months",
        description="Average interval since last live birth",
        group=FieldGroup.LINEAR,
    ),
    FieldSpec(
        name="single_parent",
        source="v082_rawvalue",
        field_type=FieldType.NUMERIC,
        unit="percent",
        description="Children in single-parent households",
        group=FieldGroup.SHARED,
    ),
    FieldSpec(
        name="prenatal_visits",
        source="Average Number of Prenatal Visits",
        field_type=FieldType.NUMERIC,
        unit="visits",
        description="Average number of prenatal visits",
        group=FieldGroup.SHARED,
    ),
    FieldSpec(
        name="urbanicity",
        source="v058_rawvalue",
        field_type=FieldType.CATEGORICAL,
        levels=URBANICITY_LEVELS,
        ordered=True,
        description="Urbanicity from percent rural: (-1,10] Very High, (10,20] High, (20,30] Medium, (30,100] Low",
        group=FieldGroup.SHARED,
    ),
    FieldSpec(
        name="hi_chld_pov",
        source="v024_rawvalue",
        field_type=FieldType.CATEGORICAL,
        levels=POVERTY_FLAG_LEVELS,
        ordered=True,
        description="Child poverty above the national average of 16.3% (logistic regression outcome)",
        group=FieldGroup.LOGISTIC,
    ),
    FieldSpec(
        name="chld_mortality",
        source="v129_rawvalue",
        field_type=FieldType.NUMERIC,
        unit="deaths per 100,000",
        description="Child mortality rate",
        group=FieldGroup.LOGISTIC,
    ),
    FieldSpec(
        name="chld_uninsured",
        source="v122_rawvalue",
        field_type=FieldType.NUMERIC,
        unit="percent",
        description="Uninsured children",
        group=FieldGroup.LOGISTIC,
    ),
]

ANALYTIC_COLUMNS = [f.name for f in ANALYTIC_FIELDS]
ANALYTIC_FIELDS_BY_NAME: Dict[str, FieldSpec] = {f.name: f for f in ANALYTIC_FIELDS}
PERCENT_COLUMNS = ["single_parent", "chld_uninsured"]


def coerce_to_schema(df: pd.DataFrame, fields: List[FieldSpec], stage: str) -> pd.DataFrame:
    """
    Coerce each declared column to its declared type.

    Missing values are preserved. A non-missing value that cannot be parsed
    raises ParseFailure naming the column and the offending values.

    Args:
        df: DataFrame with canonical column names
        fields: Field declarations to apply
        stage: Stage name reported on failure

    Returns:
        New DataFrame with typed columns
    """
    df = df.copy()

    for spec in fields:
        if spec.name not in df.columns:
            continue

        values = df[spec.name]

        if spec.field_type == FieldType.NUMERIC:
            parsed = pd.to_numeric(values, errors="coerce")
            bad = values.notna() & parsed.isna()
            if bad.any():
                raise ParseFailure(
                    f"Column '{spec.name}' has {int(bad.sum())} non-numeric values",
                    stage=stage,
                    records=values[bad].unique().tolist(),
                )
            df[spec.name] = parsed.astype("float64")

        elif spec.field_type == FieldType.CATEGORICAL:
            if spec.levels:
                bad = values.notna() & ~values.isin(spec.levels)
                if bad.any():
                    raise ParseFailure(
                        f"Column '{spec.name}' has values outside levels {spec.levels}",
                        stage=stage,
                        records=values[bad].unique().tolist(),
                    )
            df[spec.name] = values.astype(spec.dtype)

        else:
            df[spec.name] = values.astype("string")

    logger.debug(f"Coerced {len(fields)} declared columns for stage {stage}")
    return df
