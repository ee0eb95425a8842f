from .formulas import (
    calculate_difficulty,
    score_accuracy,
    score_visual_processing,
    score_word_recognition,
    score_word_sequencing,
    score_working_memory,
)

__all__ = [
    "calculate_difficulty",
    "score_accuracy",
    "score_visual_processing",
    "score_word_recognition",
    "score_word_sequencing",
    "score_working_memory",
]
