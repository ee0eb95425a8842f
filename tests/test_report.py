import os
import tempfile
import unittest

import matplotlib

matplotlib.use("Agg")

from analytics import ReportConfig, format_report, plot_scores, results_frame, summarize_results
from cogscreen.bank.models import AssessmentType
from cogscreen.results.schema import AssessmentResult


def result(kind: AssessmentType, score: int, raw: int, total: int) -> AssessmentResult:
    return AssessmentResult(type=kind, score=score, raw_metric=raw, total_items=total, completed=True, date="2024-03-01T10:00:00+00:00")


RESULTS = [
    result(AssessmentType.WORD_RECOGNITION, 70, 1250, 20),
    result(AssessmentType.LETTER_ACCURACY, 90, 27, 30),
    result(AssessmentType.WORKING_MEMORY, 30, 3, 5),
    result(AssessmentType.SPELLING_RECOGNITION, 65, 13, 20),
]


class ReportTests(unittest.TestCase):
    def test_frame_columns_and_bands(self) -> None:
        df = results_frame(RESULTS)
        self.assertEqual(len(df), 4)
        self.assertEqual(df["type"].tolist(), ["WordRecognition", "LetterAccuracy", "WorkingMemory", "SpellingRecognition"])
        self.assertEqual(df["level"].tolist(), ["Good", "Excellent", "Poor", "Good"])
        self.assertEqual(df["classification"].tolist(), ["Mild", "None", "Severe", "Mild"])
        self.assertEqual(str(df["date"].dt.tz), "UTC")

    def test_summary(self) -> None:
        summary = summarize_results(results_frame(RESULTS), ReportConfig())
        self.assertEqual(summary["average_score"], 64)
        self.assertEqual((summary["level"], summary["classification"]), ("Good", "Mild"))
        self.assertEqual(summary["strengths"], ["LetterAccuracy", "SpellingRecognition"])
        # slow speed module and a short span are both flagged
        self.assertEqual(summary["weaknesses"], ["WordRecognition", "WorkingMemory"])

    def test_empty_results(self) -> None:
        df = results_frame([])
        self.assertTrue(df.empty)
        summary = summarize_results(df)
        self.assertEqual(summary["average_score"], 0)
        self.assertEqual(summary["level"], "Very Poor")
        self.assertFalse(plot_scores(df))

    def test_format_report(self) -> None:
        df = results_frame(RESULTS)
        text = format_report(df, summarize_results(df))
        self.assertIn("LetterAccuracy", text)
        self.assertIn("Overall: 64/100 (Good), classification: Mild", text)
        self.assertIn("Needs attention: WordRecognition, WorkingMemory", text)
        self.assertIn("avg 1250 ms", text)
        self.assertIn("span 3", text)
        self.assertIn("27/30 correct", text)
        self.assertNotIn("1250/20", text)

    def test_plot_written(self) -> None:
        df = results_frame(RESULTS)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "scores.png")
            self.assertTrue(plot_scores(df, average=64, save_path=path))
            self.assertGreater(os.path.getsize(path), 0)


if __name__ == "__main__":
    unittest.main()
