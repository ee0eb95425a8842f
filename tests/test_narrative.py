import contextlib
import io
import unittest

from cogscreen.bank.models import AssessmentType
from cogscreen.results.schema import AssessmentResult
from cogscreen.summary import FALLBACK_EMPTY, FALLBACK_ERROR, FALLBACK_NO_KEY, NarrativeSummarizer, build_prompt


def result(kind: AssessmentType, score: int, raw: int, total: int) -> AssessmentResult:
    return AssessmentResult(type=kind, score=score, raw_metric=raw, total_items=total, completed=True, date="2024-01-01T00:00:00+00:00")


RESULTS = [
    result(AssessmentType.WORD_RECOGNITION, 87, 812, 20),
    result(AssessmentType.WORKING_MEMORY, 50, 5, 6),
    result(AssessmentType.SPELLING_RECOGNITION, 75, 15, 20),
]


class _Reply:
    def __init__(self, text: str) -> None:
        self.text = text


class _FakeModel:
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.prompts = []

    def generate_content(self, prompt, request_options=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return _Reply(self.text)


class NarrativeTests(unittest.TestCase):
    def test_prompt_lists_each_module(self) -> None:
        prompt = build_prompt(RESULTS)
        self.assertIn("- WordRecognition: Score 87/100 (Excellent) [Speed: 812ms]", prompt)
        self.assertIn("- WorkingMemory: Score 50/100 (Below Average) [Max Span: 5 digits]", prompt)
        self.assertIn("- SpellingRecognition: Score 75/100 (Good) [Accuracy: 15/20]", prompt)

    def test_missing_key(self) -> None:
        summarizer = NarrativeSummarizer(api_key="", api_key_env="COGSCREEN_TEST_UNSET")
        self.assertFalse(summarizer.is_available)
        self.assertEqual(summarizer.generate(RESULTS), FALLBACK_NO_KEY)

    def test_service_failure(self) -> None:
        summarizer = NarrativeSummarizer(api_key="k")
        summarizer._client = _FakeModel(error=ConnectionError("offline"))
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertEqual(summarizer.generate(RESULTS), FALLBACK_ERROR)

    def test_empty_reply(self) -> None:
        summarizer = NarrativeSummarizer(api_key="k")
        summarizer._client = _FakeModel(text="  ")
        self.assertEqual(summarizer.generate(RESULTS), FALLBACK_EMPTY)

    def test_reply_text_returned(self) -> None:
        summarizer = NarrativeSummarizer(api_key="k")
        model = _FakeModel(text="You did well.\n")
        summarizer._client = model
        self.assertEqual(summarizer.generate(RESULTS), "You did well.")
        self.assertIn("educational psychologist", model.prompts[0])

    def test_from_config(self) -> None:
        summarizer = NarrativeSummarizer.from_config({"summary": {"model": "m", "timeout_s": 5, "api_key_env": "COGSCREEN_TEST_UNSET"}})
        self.assertEqual(summarizer.model_name, "m")
        self.assertEqual(summarizer.timeout_s, 5.0)
        self.assertIsNone(summarizer.api_key)


if __name__ == "__main__":
    unittest.main()
