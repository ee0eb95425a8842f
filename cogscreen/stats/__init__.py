from .metrics import MetricsAccumulator, PerformanceMetrics

__all__ = ["MetricsAccumulator", "PerformanceMetrics"]
