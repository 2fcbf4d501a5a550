"""
County Natality Analysis - Data Source Utilities
Helper functions for reading local or remote tabular extracts

Sources are fetched once. There is no retry: any failure aborts the run.
Remote and local extracts are both decoded as UTF-8, whatever charset the
server declares.
"""

import io
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

import pandas as pd
import requests

from config.settings import get_settings
from src.utils.errors import ParseFailure, SchemaMismatch, SourceUnavailable
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

SOURCE_ENCODING = "utf-8"


def is_remote(source: str) -> bool:
    """True when the source is an http(s) URL rather than a local path."""
    return urlparse(str(source)).scheme in ("http", "https")


def fetch_content(url: str, stage: str, timeout: Optional[int] = None) -> bytes:
    """
    Fetch a remote file in a single blocking request.

    The raw body is returned undecoded; requests guesses ISO-8859-1 for
    text responses without a charset.

    Args:
        url: URL to fetch
        stage: Stage name reported on failure
        timeout: Request timeout in seconds (default: HTTP_TIMEOUT_SECONDS)

    Returns:
        Response body as bytes
    """
    timeout = timeout or settings.HTTP_TIMEOUT_SECONDS

    logger.info(f"Fetching: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error(f"Request failed for {url}: {e}")
        raise SourceUnavailable(f"Could not fetch {url}: {e}", stage=stage) from e

    logger.info(f"Fetched {len(response.content)} bytes from {url}")
    return response.content


def read_tabular_source(
    source: str,
    sep: str,
    stage: str,
    required_columns: List[str],
    skiprows: int = 0,
) -> pd.DataFrame:
    """
    Read a delimited extract with every column as text.

    Args:
        source: Local path or http(s) URL
        sep: Field delimiter
        stage: Stage name reported on failure
        required_columns: Columns that must be present in the header
        skiprows: Leading lines to skip before the header (e.g. a banner)

    Returns:
        DataFrame of text columns (missing fields as NaN)
    """
    if is_remote(source):
        handle = io.BytesIO(fetch_content(source, stage=stage))
    else:
        path = Path(source)
        if not path.is_file():
            raise SourceUnavailable(f"File not found: {path}", stage=stage)
        handle = path

    try:
        df = pd.read_csv(handle, sep=sep, skiprows=skiprows, dtype=str, encoding=SOURCE_ENCODING)
    except UnicodeDecodeError as e:
        raise ParseFailure(f"{source} is not valid {SOURCE_ENCODING}: {e}", stage=stage) from e
    except pd.errors.ParserError as e:
        raise SchemaMismatch(f"Inconsistent field counts in {source}: {e}", stage=stage) from e
    except pd.errors.EmptyDataError as e:
        raise SchemaMismatch(f"No header found in {source}", stage=stage) from e
    except OSError as e:
        raise SourceUnavailable(f"Could not open {source}: {e}", stage=stage) from e

    missing = [c for c in required_columns if c not in df.columns]
    if missing:
        raise SchemaMismatch(
            f"Expected columns not present in {source}",
            stage=stage,
            records=missing,
        )

    logger.info(f"Read {len(df)} rows x {len(df.columns)} columns from {source}")
    return df
