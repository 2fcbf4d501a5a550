"""
County Natality Analysis - Pipeline Errors

Every failure is terminal for the run. Each error names the stage that
raised it and, where available, a sample of the offending records.
"""

from typing import Any, List, Optional

MAX_REPORTED_RECORDS = 5


class PipelineError(RuntimeError):
    """Base class for fatal pipeline failures."""

    error_code = "PIPELINE_ERROR"

    def __init__(self, message: str, stage: str = "pipeline", records: Optional[List[Any]] = None):
        self.stage = stage
        self.records = list(records or [])[:MAX_REPORTED_RECORDS]
        self.message = message
        super().__init__(self._format())

    def _format(self) -> str:
        text = f"[{self.stage}] {self.message}"
        if self.records:
            text += f" (records: {self.records})"
        return text


class SourceUnavailable(PipelineError):
    """Raised when an input file or URL cannot be opened."""

    error_code = "SOURCE_UNAVAILABLE"


class SchemaMismatch(PipelineError):
    """Raised when a declared column is missing or rows have inconsistent field counts."""

    error_code = "SCHEMA_MISMATCH"


class ParseFailure(PipelineError):
    """Raised when a value cannot be coerced to its declared type."""

    error_code = "PARSE_FAILURE"


class DataQualityViolation(PipelineError):
    """Raised when an invariant on the data does not hold."""

    error_code = "DATA_QUALITY_VIOLATION"
