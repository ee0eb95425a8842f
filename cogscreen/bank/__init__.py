from .models import AssessmentType, ModuleConfig, Question, QuestionKind
from .questions import build_battery, build_module

__all__ = [
    "AssessmentType",
    "ModuleConfig",
    "Question",
    "QuestionKind",
    "build_battery",
    "build_module",
]
