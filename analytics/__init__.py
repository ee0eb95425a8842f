from .config import ReportConfig
from .plots import plot_scores
from .report import format_report, results_frame, summarize_results

__all__ = [
    "ReportConfig",
    "format_report",
    "plot_scores",
    "results_frame",
    "summarize_results",
]
