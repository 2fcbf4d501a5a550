import pandas as pd
import pytest

from src.export.table_export import read_analytic_table, write_analytic_table
from src.processing.schema import ANALYTIC_COLUMNS, POVERTY_FLAG_LEVELS, URBANICITY_LEVELS
from src.utils.errors import SchemaMismatch, SourceUnavailable


def test_round_trip_preserves_layout_and_levels(analytic_df, tmp_path):
    path = write_analytic_table(analytic_df, str(tmp_path / "processed" / "analytic.parquet"))

    result = read_analytic_table(str(path))

    assert len(result) == len(analytic_df)
    assert list(result.columns) == ANALYTIC_COLUMNS

    assert list(result["urbanicity"].cat.categories) == URBANICITY_LEVELS
    assert result["urbanicity"].cat.ordered
    assert list(result["hi_chld_pov"].cat.categories) == POVERTY_FLAG_LEVELS
    assert result["urbanicity"].tolist() == analytic_df["urbanicity"].tolist()
    assert result["hi_chld_pov"].tolist() == analytic_df["hi_chld_pov"].tolist()
    assert result["fips"].tolist() == analytic_df["fips"].tolist()
    assert result["birth_rate"].tolist() == pytest.approx(analytic_df["birth_rate"].tolist())


def test_round_trip_keeps_unused_levels(analytic_df, tmp_path):
    df = analytic_df[analytic_df["urbanicity"] != "Low"].reset_index(drop=True)
    path = write_analytic_table(df, str(tmp_path / "analytic.parquet"))

    result = read_analytic_table(str(path))

    assert list(result["urbanicity"].cat.categories) == URBANICITY_LEVELS


def test_read_missing_file(tmp_path):
    with pytest.raises(SourceUnavailable):
        read_analytic_table(str(tmp_path / "missing.parquet"))


def test_read_rejects_foreign_layout(tmp_path):
    path = tmp_path / "other.parquet"
    pd.DataFrame({"a": [1]}).to_parquet(path)

    with pytest.raises(SchemaMismatch):
        read_analytic_table(str(path))
