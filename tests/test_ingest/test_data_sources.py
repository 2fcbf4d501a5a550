"""
Tests for data source utilities.

These tests verify that:
1. Remote sources are fetched once with requests and a timeout, decoded as UTF-8
2. Request failures and missing files surface as SourceUnavailable
3. Missing columns and ragged rows surface as SchemaMismatch
"""

import pytest
from unittest.mock import patch, MagicMock
import requests

from src.utils.data_sources import is_remote, read_tabular_source
from src.utils.errors import ParseFailure, SchemaMismatch, SourceUnavailable

CSV_TEXT = "banner line, not a header\nfipscode,county\n01001,Alpha County\n01003,Beta County\n"


class TestRemoteSources:
    """Test fetching sources over HTTP."""

    @patch('src.utils.data_sources.requests.get')
    def test_remote_source_uses_requests_with_timeout(self, mock_get):
        mock_response = MagicMock()
        mock_response.text = CSV_TEXT
        mock_response.content = CSV_TEXT.encode()
        mock_get.return_value = mock_response

        df = read_tabular_source(
            "https://example.org/analytic.csv",
            sep=",",
            stage="test",
            required_columns=["fipscode", "county"],
            skiprows=1,
        )

        mock_get.assert_called_once()
        assert "timeout" in mock_get.call_args[1]
        assert list(df.columns) == ["fipscode", "county"]
        assert df["fipscode"].tolist() == ["01001", "01003"]

    @patch('src.utils.data_sources.requests.get')
    def test_remote_timeout_raises_source_unavailable(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout("Connection timed out")

        with pytest.raises(SourceUnavailable) as exc:
            read_tabular_source("https://example.org/a.csv", sep=",", stage="load_test", required_columns=[])

        assert exc.value.stage == "load_test"
        assert mock_get.call_count == 1

    @patch('src.utils.data_sources.requests.get')
    def test_http_error_raises_source_unavailable(self, mock_get):
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Not Found")
        mock_get.return_value = mock_response

        with pytest.raises(SourceUnavailable):
            read_tabular_source("https://example.org/a.csv", sep=",", stage="test", required_columns=[])


class TestLocalSources:
    """Test reading local files."""

    def test_missing_file_raises_source_unavailable(self, tmp_path):
        with pytest.raises(SourceUnavailable):
            read_tabular_source(str(tmp_path / "nope.txt"), sep="\t", stage="test", required_columns=[])

    def test_banner_is_skipped_and_codes_kept_as_text(self, tmp_path):
        path = tmp_path / "analytic.csv"
        path.write_text(CSV_TEXT)

        df = read_tabular_source(str(path), sep=",", stage="test", required_columns=["fipscode"], skiprows=1)

        assert len(df) == 2
        assert df.loc[0, "fipscode"] == "01001"

    def test_missing_column_raises_schema_mismatch(self, tmp_path):
        path = tmp_path / "natality.txt"
        path.write_text("Notes\tCounty of Residence\n\tAlpha County, AL\n")

        with pytest.raises(SchemaMismatch) as exc:
            read_tabular_source(
                str(path), sep="\t", stage="test", required_columns=["County of Residence", "Birth Rate"]
            )

        assert exc.value.records == ["Birth Rate"]

    def test_ragged_rows_raise_schema_mismatch(self, tmp_path):
        path = tmp_path / "natality.txt"
        path.write_text("a\tb\n1\t2\n1\t2\t3\t4\n")

        with pytest.raises(SchemaMismatch):
            read_tabular_source(str(path), sep="\t", stage="test", required_columns=["a", "b"])


def test_is_remote():
    assert is_remote("https://example.org/data.csv")
    assert is_remote("http://example.org/data.csv")
    assert not is_remote("data/raw/natality.txt")
    assert not is_remote("/tmp/analytic.csv")


class TestEncoding:
    """Test that remote and local extracts decode identically."""

    NON_ASCII_CSV = "banner\nfipscode,state,county\n35013,NM,Doña Ana County\n".encode("utf-8")

    @patch('src.utils.data_sources.requests.get')
    def test_remote_without_charset_matches_local(self, mock_get, tmp_path):
        response = requests.Response()
        response.status_code = 200
        response._content = self.NON_ASCII_CSV
        response.headers["Content-Type"] = "text/csv"
        mock_get.return_value = response

        path = tmp_path / "analytic.csv"
        path.write_bytes(self.NON_ASCII_CSV)

        remote = read_tabular_source(
            "https://example.org/analytic.csv", sep=",", stage="test", required_columns=["county"], skiprows=1
        )
        local = read_tabular_source(str(path), sep=",", stage="test", required_columns=["county"], skiprows=1)

        assert remote["county"].tolist() == ["Doña Ana County"]
        assert remote["county"].tolist() == local["county"].tolist()

    def test_invalid_utf8_raises_parse_failure(self, tmp_path):
        path = tmp_path / "analytic.csv"
        path.write_bytes(b"fipscode,county\n35013,Do\xf1a Ana County\n")

        with pytest.raises(ParseFailure):
            read_tabular_source(str(path), sep=",", stage="test", required_columns=["county"])
