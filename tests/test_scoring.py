import math
import unittest

from cogscreen.scoring.formulas import (
    calculate_difficulty,
    score_accuracy,
    score_visual_processing,
    score_word_recognition,
    score_word_sequencing,
    score_working_memory,
)
from cogscreen.stats.metrics import PerformanceMetrics


def metrics(total=0, correct=0, avg=0.0, span=0) -> PerformanceMetrics:
    return PerformanceMetrics(total_trials=total, correct_answers=correct, average_reaction_time=avg, max_span=span)


class SpeedFormulaTests(unittest.TestCase):
    def test_word_recognition_anchor_points(self) -> None:
        self.assertEqual(score_word_recognition(metrics(avg=500)), 100)
        self.assertEqual(score_word_recognition(metrics(avg=3000)), 10)
        self.assertEqual(score_word_recognition(metrics(avg=1000)), 80)

    def test_word_recognition_clamped(self) -> None:
        self.assertEqual(score_word_recognition(metrics(avg=100)), 100)
        self.assertEqual(score_word_recognition(metrics(avg=9000)), 10)

    def test_word_recognition_non_increasing(self) -> None:
        previous = 101
        for rt in range(0, 5001, 37):
            score = score_word_recognition(metrics(avg=rt))
            self.assertLessEqual(score, previous)
            previous = score

    def test_visual_processing_anchor_points(self) -> None:
        self.assertEqual(score_visual_processing(metrics(avg=400)), 100)
        self.assertEqual(score_visual_processing(metrics(avg=2500)), 5)
        self.assertEqual(score_visual_processing(metrics(avg=10000)), 5)
        self.assertEqual(score_visual_processing(metrics(avg=610)), 90)


class AccuracyFormulaTests(unittest.TestCase):
    def test_matches_rounded_percentage(self) -> None:
        for total in (5, 8, 20, 30):
            for correct in range(total + 1):
                expected = math.floor(correct / total * 100 + 0.5)
                self.assertEqual(score_accuracy(metrics(total=total, correct=correct)), expected)

    def test_half_rounds_up(self) -> None:
        self.assertEqual(score_accuracy(metrics(total=8, correct=1)), 13)

    def test_no_trials(self) -> None:
        self.assertEqual(score_accuracy(metrics()), 0)

    def test_fifteen_of_twenty(self) -> None:
        self.assertEqual(score_accuracy(metrics(total=20, correct=15)), 75)


class SequencingFormulaTests(unittest.TestCase):
    def test_all_correct_ten_seconds(self) -> None:
        self.assertEqual(score_word_sequencing(metrics(total=15, correct=15, avg=10000)), 99)

    def test_penalty_uses_average_over_all_trials(self) -> None:
        # base 50, penalty 2
        self.assertEqual(score_word_sequencing(metrics(total=10, correct=5, avg=20000)), 48)

    def test_floor_at_zero(self) -> None:
        self.assertEqual(score_word_sequencing(metrics(total=10, correct=0, avg=50000)), 0)

    def test_no_trials(self) -> None:
        self.assertEqual(score_word_sequencing(metrics()), 0)


class SpanFormulaTests(unittest.TestCase):
    def test_span_times_ten(self) -> None:
        self.assertEqual(score_working_memory(metrics(span=9)), 90)
        self.assertEqual(score_working_memory(metrics(span=4)), 40)
        self.assertEqual(score_working_memory(metrics(span=0)), 0)

    def test_capped(self) -> None:
        self.assertEqual(score_working_memory(metrics(span=12)), 100)


class DifficultyTests(unittest.TestCase):
    def test_bands(self) -> None:
        self.assertEqual(calculate_difficulty(80), ("Excellent", "None"))
        self.assertEqual(calculate_difficulty(79), ("Good", "Mild"))
        self.assertEqual(calculate_difficulty(40), ("Below Average", "Moderate"))
        self.assertEqual(calculate_difficulty(20), ("Poor", "Severe"))
        self.assertEqual(calculate_difficulty(19), ("Very Poor", "Profound"))


if __name__ == "__main__":
    unittest.main()
