from __future__ import annotations

"""Matplotlib bar chart of module scores."""

import os
from typing import Optional, Union

import pandas as pd
import matplotlib.pyplot as plt

LEVEL_COLORS = {
    "Excellent": "#22c55e",
    "Good": "#3b82f6",
    "Below Average": "#eab308",
    "Poor": "#f97316",
    "Very Poor": "#ef4444",
}


def plot_scores(
    df: pd.DataFrame,
    *,
    average: Optional[int] = None,
    save_path: Optional[Union[str, "os.PathLike[str]"]] = None,
) -> bool:
    """Draw one bar per module, colored by difficulty level.

    Returns False when there is nothing to plot.
    """
    if df.empty:
        return False
    labels = df["type"].astype("string").tolist()
    scores = df["score"].astype(int).tolist()
    colors = [LEVEL_COLORS.get(str(lvl), "#94a3b8") for lvl in df["level"]]
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.barh(labels, scores, color=colors)
    ax.set_xlim(0, 100)
    ax.invert_yaxis()
    ax.set_xlabel("Score")
    if average is not None:
        ax.axvline(average, color="#1e293b", linestyle="--", linewidth=1)
        ax.set_title(f"Screening results (average {average})")
    else:
        ax.set_title("Screening results")
    if save_path:
        fig.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close(fig)
    return True
