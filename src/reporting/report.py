"""
County Natality Analysis - Report Writer
Writes the codebook, column summary and diagnostic plots

Outputs (under REPORT_DIR):
- codebook.csv
- column_summary.csv
- birth_rate_histogram.png
- birth_rate_violin.png
- birth_rate_qq.png
- birth_rate_boxcox.png
"""

from pathlib import Path
from typing import Any, Dict

import pandas as pd

from config.settings import get_settings
from src.reporting.statistics import boxcox_identifiable, boxcox_profile, build_codebook, column_summary
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


def write_report(df: pd.DataFrame, report_dir: str = None, render_plots: bool = True) -> Dict[str, Any]:
    """
    Write all report artifacts for the analytic table.

    Args:
        df: Validated analytic DataFrame
        report_dir: Output directory (default: REPORT_DIR)
        render_plots: Whether to render PNG plots

    Returns:
        Dict with written paths keyed by artifact and the Box-Cox result
    """
    report_dir = Path(report_dir or settings.REPORT_DIR)
    report_dir.mkdir(parents=True, exist_ok=True)

    logger.info(f"Writing report to {report_dir}")

    outputs: Dict[str, Any] = {}

    codebook = build_codebook(df)
    outputs["codebook"] = report_dir / "codebook.csv"
    codebook.to_csv(outputs["codebook"])

    outputs["column_summary"] = report_dir / "column_summary.csv"
    column_summary(df).to_csv(outputs["column_summary"])

    boxcox = None
    if boxcox_identifiable(df):
        boxcox = boxcox_profile(df)
    else:
        logger.warning(f"Too few rows ({len(df)}) for the Box-Cox model, skipping")
    outputs["boxcox"] = boxcox

    if render_plots:
        from src.reporting import plots

        outputs["histogram"] = plots.plot_birth_rate_histogram(df, report_dir / "birth_rate_histogram.png")
        outputs["violin"] = plots.plot_birth_rate_violin(df, report_dir / "birth_rate_violin.png")
        outputs["qq"] = plots.plot_birth_rate_qq(df, report_dir / "birth_rate_qq.png")
        if boxcox is not None:
            outputs["boxcox_plot"] = plots.plot_boxcox_profile(boxcox, report_dir / "birth_rate_boxcox.png")
    else:
        logger.info("Plot rendering skipped")

    logger.info(f"✓ Report complete: {len(outputs)} artifacts")
    return outputs
