"""
Pytest configuration and shared fixtures for County Natality Analysis tests.
"""

import numpy as np
import pandas as pd
import pytest

from src.processing.schema import POVERTY_FLAG_LEVELS, URBANICITY_LEVELS

NATALITY_HEADER = [
    "Notes",
    "County of Residence",
    "Birth Rate",
    "Average Age of Mother (years)",
    "Average Birth Weight (grams)",
    "Average Pre-pregnancy BMI",
    "Average Number of Prenatal Visits",
    "Average Interval Since Last Live Birth (months)",
]

NATALITY_ROWS = [
    ["", "Alpha County, AL", "10.5", "28.1", "3250.4", "27.9", "11.2", "30.5"],
    ["", "Beta County, AL", "Not Available", "27.0", "3200.0", "28.0", "10.9", "29.0"],
    ["", "Gamma County, CT", "9.8", "30.2", "3310.2", "26.4", "12.1", "36.2"],
    ["", "Unidentified Counties, CT", "11.0", "29.0", "3300.0", "27.0", "11.5", "33.0"],
    ["", "Delta County, TX", "14.2", "26.9", "3180.7", "29.3", "10.2", "27.4"],
    ["", "Epsilon County, TX", "13.1", "27.5", "3220.0", "28.8", "10.8", "28.9"],
    ["Total", None, None, None, None, None, None, None],
    ["Dataset: Natality, 2016-2022 expanded", None, None, None, None, None, None, None],
]

RANKINGS_HEADER = [
    "fipscode",
    "state",
    "county",
    "county_ranked",
    "v024_rawvalue",
    "v082_rawvalue",
    "v129_rawvalue",
    "v122_rawvalue",
    "v058_rawvalue",
]

RANKINGS_ROWS = [
    ["00000", "US", "United States", None, "0.17", "0.25", "50.1", "0.05", "0.19"],
    ["01000", "AL", "Alabama", None, "0.22", "0.35", "62.3", "0.03", "0.41"],
    ["01001", "AL", "Alpha County", "1", "0.1", "0.25", "55.1", "0.03", "0.0"],
    ["01003", "AL", "Beta County", "1", "0.2", "0.3", "60.0", "0.04", "0.5"],
    ["09001", "CT", "Gamma County", "1", "0.12", "0.2", "40.2", "0.02", "0.15"],
    ["48001", "TX", "Delta County", "1", "0.25", "0.35", "70.3", "0.1", "0.45"],
    ["48003", "TX", "Omega County", "0", "0.3", "0.4", "80.0", "0.12", "0.9"],
]

RANKINGS_BANNER = "State FIPS Code,State Abbreviation,Name,County Ranked (Yes=1/No=0),Children in poverty raw value"


@pytest.fixture
def raw_natality() -> pd.DataFrame:
    """Raw natality extract as read from disk (all text)."""
    return pd.DataFrame(NATALITY_ROWS, columns=NATALITY_HEADER).replace("", np.nan)


@pytest.fixture
def raw_rankings() -> pd.DataFrame:
    """Raw health rankings extract as read from disk (all text)."""
    return pd.DataFrame(RANKINGS_ROWS, columns=RANKINGS_HEADER)


@pytest.fixture
def natality_file(tmp_path):
    """Tab-separated natality extract on disk."""
    path = tmp_path / "natality.txt"
    pd.DataFrame(NATALITY_ROWS, columns=NATALITY_HEADER).to_csv(path, sep="\t", index=False)
    return path


@pytest.fixture
def rankings_file(tmp_path):
    """Comma-separated health rankings extract with a banner line."""
    path = tmp_path / "analytic_data.csv"
    body = pd.DataFrame(RANKINGS_ROWS, columns=RANKINGS_HEADER).to_csv(index=False)
    path.write_text(RANKINGS_BANNER + "\n" + body)
    return path


@pytest.fixture
def analytic_df() -> pd.DataFrame:
    """Synthetic analytic table with a log-linear birth rate."""
    rng = np.random.default_rng(42)
    n = 60

    single_parent = rng.uniform(10, 45, n)
    birth_rate = np.exp(1.0 + 0.1 * (single_parent - 25) + rng.normal(0, 0.02, n))

    return pd.DataFrame({
        "fips": pd.Series([f"{i + 1:05d}" for i in range(n)], dtype="string"),
        "county": pd.Series([f"County {i + 1}" for i in range(n)], dtype="string"),
        "state": pd.Categorical(rng.choice(["AL", "CT", "TX"], n)),
        "birth_rate": birth_rate,
        "mother_age": rng.normal(28, 2, n),
        "birth_weight": rng.normal(3250, 60, n),
        "pre_preg_bmi": rng.normal(27.5, 1.5, n),
        "birth_interval": rng.normal(32, 4, n),
        "single_parent": single_parent,
        "prenatal_visits": rng.normal(11, 0.8, n),
        "urbanicity": pd.Categorical(
            rng.choice(URBANICITY_LEVELS, n), categories=URBANICITY_LEVELS, ordered=True
        ),
        "hi_chld_pov": pd.Categorical(
            rng.choice(POVERTY_FLAG_LEVELS, n), categories=POVERTY_FLAG_LEVELS, ordered=True
        ),
        "chld_mortality": rng.normal(55, 10, n),
        "chld_uninsured": rng.uniform(2, 12, n),
    })
