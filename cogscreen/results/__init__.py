from .schema import AssessmentResult, RawMetricKind

__all__ = ["AssessmentResult", "RawMetricKind"]
