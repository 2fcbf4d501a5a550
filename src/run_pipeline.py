"""
County Natality Analysis - Main Pipeline Orchestration

Runs the complete pipeline from raw extracts to the persisted analytic table.

Pipeline stages:
1. Load natality and health rankings extracts
2. Clean both sources
3. Select and rename columns
4. Merge on (county, state)
5. Derive categories, coerce types, validate
6. Report (codebook, statistics, plots) and persist

Usage:
    python -m src.run_pipeline
    python -m src.run_pipeline --natality data/raw/natality_2022.txt --expected-rows 569
    python -m src.run_pipeline --no-plots
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from config.settings import get_settings
from src.export.table_export import write_analytic_table
from src.ingest.health_rankings import load_health_rankings
from src.ingest.natality import load_natality
from src.processing.cleaning import clean_health_rankings, clean_natality
from src.processing.derive import derive_analytic_table, validate_analytic_table
from src.processing.merge import merge_sources
from src.processing.selection import select_health_rankings, select_natality
from src.reporting.report import write_report
from src.utils.data_sources import is_remote
from src.utils.errors import PipelineError
from src.utils.logging import setup_logging

logger = setup_logging("pipeline")
settings = get_settings()


def check_prerequisites(natality_path: str, rankings_source: str) -> bool:
    """
    Check that the input sources can be reached before running.

    Returns:
        True if all checks pass, False otherwise
    """
    logger.info("Checking prerequisites")

    if not Path(natality_path).is_file():
        logger.error(f"Natality extract not found: {natality_path}")
        return False

    if not is_remote(rankings_source) and not Path(rankings_source).is_file():
        logger.error(f"Health rankings extract not found: {rankings_source}")
        return False

    logger.info("Prerequisites check passed")
    return True


def build_analytic_table(
    natality_path: str,
    rankings_source: str,
    expected_rows: Optional[int] = None,
) -> pd.DataFrame:
    """
    Load, clean, select, merge, derive and validate.

    Args:
        natality_path: Natality extract path
        rankings_source: Health rankings path or URL
        expected_rows: Row count to assert, if known

    Returns:
        Validated analytic DataFrame
    """
    natality = select_natality(clean_natality(load_natality(natality_path)))
    rankings = select_health_rankings(clean_health_rankings(load_health_rankings(rankings_source)))

    merged = merge_sources(natality, rankings)
    analytic = derive_analytic_table(merged)

    return validate_analytic_table(analytic, expected_rows=expected_rows)


def run_pipeline(
    natality_path: Optional[str] = None,
    rankings_source: Optional[str] = None,
    output_path: Optional[str] = None,
    report_dir: Optional[str] = None,
    render_plots: bool = True,
    expected_rows: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Run every stage and persist the analytic table.

    The table is written only after validation passes.

    Returns:
        Dict with row/column counts, output path and report artifacts
    """
    natality_path = natality_path or settings.NATALITY_PATH
    rankings_source = rankings_source or settings.HEALTH_RANKINGS_SOURCE
    output_path = output_path or settings.OUTPUT_PATH
    report_dir = report_dir or settings.REPORT_DIR
    if expected_rows is None:
        expected_rows = settings.EXPECTED_ROW_COUNT

    analytic = build_analytic_table(natality_path, rankings_source, expected_rows=expected_rows)
    report = write_report(analytic, report_dir=report_dir, render_plots=render_plots)
    written = write_analytic_table(analytic, output_path)

    return {
        "rows": len(analytic),
        "columns": len(analytic.columns),
        "output_path": written,
        "report": report,
    }


def main():
    """Main pipeline orchestration"""

    parser = argparse.ArgumentParser(
        description="County Natality Analysis - Pipeline Orchestration"
    )

    parser.add_argument(
        "--natality",
        type=str,
        default=settings.NATALITY_PATH,
        help=f"Natality extract, tab-separated (default: {settings.NATALITY_PATH})"
    )

    parser.add_argument(
        "--health-rankings",
        type=str,
        default=settings.HEALTH_RANKINGS_SOURCE,
        help="Health rankings extract, path or URL"
    )

    parser.add_argument(
        "--output",
        type=str,
        default=settings.OUTPUT_PATH,
        help=f"Parquet output path (default: {settings.OUTPUT_PATH})"
    )

    parser.add_argument(
        "--report-dir",
        type=str,
        default=settings.REPORT_DIR,
        help=f"Report directory (default: {settings.REPORT_DIR})"
    )

    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip plot rendering"
    )

    parser.add_argument(
        "--expected-rows",
        type=int,
        default=settings.EXPECTED_ROW_COUNT,
        help="Fail unless the analytic table has this many rows"
    )

    args = parser.parse_args()

    start_time = datetime.now()
    logger.info("=" * 60)
    logger.info("County Natality Analysis - Pipeline Start")
    logger.info(f"Time: {start_time.isoformat()}")
    logger.info(f"Arguments: {vars(args)}")
    logger.info("=" * 60)

    if not check_prerequisites(args.natality, args.health_rankings):
        logger.error("Prerequisites check failed, exiting")
        sys.exit(1)

    try:
        result = run_pipeline(
            natality_path=args.natality,
            rankings_source=args.health_rankings,
            output_path=args.output,
            report_dir=args.report_dir,
            render_plots=not args.no_plots,
            expected_rows=args.expected_rows,
        )

        duration = (datetime.now() - start_time).total_seconds()

        logger.info("=" * 60)
        logger.info("PIPELINE COMPLETE")
        logger.info(f"Analytic table: {result['rows']} rows x {result['columns']} columns")
        logger.info(f"Output: {result['output_path']}")
        logger.info(f"Duration: {duration:.1f} seconds")
        logger.info("=" * 60)

        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        sys.exit(130)

    except PipelineError as e:
        logger.error(
            f"Pipeline failed at stage '{e.stage}': {e.message}",
            extra={"stage": e.stage, "error_code": e.error_code, "records": e.records},
        )
        sys.exit(1)

    except Exception as e:
        logger.error(f"Pipeline failed with unhandled exception: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
