"""
County Natality Analysis - Diagnostic Plots
Distribution plots of birth rate and the Box-Cox profile

All figures are written as PNG files and closed immediately.
"""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
import seaborn as sns  # noqa: E402
from scipy import stats  # noqa: E402

from src.reporting.statistics import BoxCoxResult  # noqa: E402
from src.utils.logging import get_logger  # noqa: E402

logger = get_logger(__name__)

plt.style.use("seaborn-v0_8-whitegrid")
plt.rcParams.update({
    "font.size": 11,
    "axes.labelsize": 12,
    "axes.titlesize": 13,
})

BIRTH_RATE_LABEL = "Birth rate (per 1,000 population)"
FIGSIZE = (8, 5)
DPI = 150


def _save(fig, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=DPI, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Saved plot: {path}")
    return path


def plot_birth_rate_histogram(df: pd.DataFrame, path: Path) -> Path:
    """Histogram of birth rate across counties."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    sns.histplot(x=df["birth_rate"], bins=30, color="steelblue", ax=ax)
    ax.set_xlabel(BIRTH_RATE_LABEL)
    ax.set_ylabel("Counties")
    ax.set_title("Distribution of birth rate")
    return _save(fig, path)


def plot_birth_rate_violin(df: pd.DataFrame, path: Path) -> Path:
    """Violin plot with a box plot overlay per urbanicity level, on a log10 axis."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    sns.violinplot(
        data=df,
        x="birth_rate",
        y="urbanicity",
        color="lightsteelblue",
        inner=None,
        log_scale=True,
        ax=ax,
    )
    sns.boxplot(
        data=df,
        x="birth_rate",
        y="urbanicity",
        width=0.15,
        color="white",
        log_scale=True,
        ax=ax,
    )
    ax.set_xlabel(f"{BIRTH_RATE_LABEL}, log scale")
    ax.set_ylabel("Urbanicity")
    ax.set_title("Birth rate by urbanicity")
    return _save(fig, path)


def plot_birth_rate_qq(df: pd.DataFrame, path: Path) -> Path:
    """Normal quantile-quantile plot of birth rate."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    stats.probplot(df["birth_rate"].to_numpy(dtype=float), dist="norm", plot=ax)
    ax.set_title("Normal Q-Q plot of birth rate")
    return _save(fig, path)


def plot_boxcox_profile(result: BoxCoxResult, path: Path) -> Path:
    """Profile log-likelihood of the Box-Cox parameter with its 95% interval."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    ax.plot(result.profile["lambda"], result.profile["loglik"], color="black")
    ax.axvline(result.lambda_hat, linestyle="--", color="firebrick", label=f"lambda = {result.lambda_hat:.2f}")
    ax.axvspan(result.ci_low, result.ci_high, color="firebrick", alpha=0.1, label="95% interval")
    ax.set_xlabel("lambda")
    ax.set_ylabel("Profile log-likelihood")
    ax.set_title("Box-Cox transformation of birth rate")
    ax.legend()
    return _save(fig, path)
