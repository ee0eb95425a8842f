from __future__ import annotations

"""Narrative summary of a finished battery via Google Gemini.

The summary is advisory text only. Every failure path (missing key,
missing client library, transport error, empty reply) degrades to a fixed
fallback string and never touches the computed scores.
"""

import os
from typing import Any, Optional, Sequence

from ..bank.models import AssessmentType
from ..errors import ExternalServiceError
from ..results.schema import AssessmentResult
from ..scoring.formulas import calculate_difficulty


FALLBACK_NO_KEY = "API Key missing. Cannot generate AI analysis."
FALLBACK_ERROR = "An error occurred while communicating with the AI analysis service."
FALLBACK_EMPTY = "Could not generate analysis."

SPEED_MODULES = {AssessmentType.WORD_RECOGNITION, AssessmentType.VISUAL_PROCESSING}

PROMPT_TEMPLATE = """
Act as a professional educational psychologist and dyslexia specialist.
Analyze the following assessment scores for a user.

Data:
{results}

Task:
1. Provide a brief, encouraging summary of the user's cognitive strengths based on high scores.
2. Identify potential areas of dyslexia-related difficulty based on low scores and specific raw metrics (e.g., slow reaction times >1000ms, low memory span <5).
3. Predict the overall Dyslexia Severity (Mild/Moderate/Severe) based on the pattern.
4. Suggest 2 specific, actionable exercises tailored to the weakest areas.

Keep the response under 150 words. Format with clear paragraphs. Talk directly to the user ("You").
"""


def describe_result(result: AssessmentResult) -> str:
    level, _ = calculate_difficulty(result.score)
    if result.type in SPEED_MODULES:
        detail = f"Speed: {result.raw_metric}ms"
    elif result.type is AssessmentType.WORKING_MEMORY:
        detail = f"Max Span: {result.raw_metric} digits"
    else:
        detail = f"Accuracy: {result.raw_metric}/{result.total_items}"
    return f"- {result.type.value}: Score {result.score}/100 ({level}) [{detail}]"


def build_prompt(results: Sequence[AssessmentResult]) -> str:
    return PROMPT_TEMPLATE.format(results="\n".join(describe_result(r) for r in results))


class NarrativeSummarizer:
    """Turns an ordered result list into free text."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = "gemini-2.5-flash",
        timeout_s: float = 20.0,
        api_key_env: str = "API_KEY",
    ) -> None:
        self.api_key = api_key if api_key is not None else os.environ.get(api_key_env)
        self.model_name = model_name
        self.timeout_s = timeout_s
        self._client: Any = None

    @classmethod
    def from_config(cls, cfg: dict) -> "NarrativeSummarizer":
        summary = cfg.get("summary", {})
        return cls(
            model_name=str(summary.get("model", "gemini-2.5-flash")),
            timeout_s=float(summary.get("timeout_s", 20)),
            api_key_env=str(summary.get("api_key_env", "API_KEY")),
        )

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> Any:
        """Lazy-load the Gemini model client."""
        if self._client is None:
            try:
                import google.generativeai as genai
            except ImportError as e:
                raise ExternalServiceError("google-generativeai is not installed") from e
            genai.configure(api_key=self.api_key)
            self._client = genai.GenerativeModel(model_name=self.model_name)
        return self._client

    def _request(self, prompt: str) -> str:
        try:
            response = self.client.generate_content(prompt, request_options={"timeout": self.timeout_s})
            return (getattr(response, "text", "") or "").strip()
        except ExternalServiceError:
            raise
        except Exception as e:
            raise ExternalServiceError(str(e)) from e

    def generate(self, results: Sequence[AssessmentResult]) -> str:
        if not self.is_available:
            return FALLBACK_NO_KEY
        try:
            text = self._request(build_prompt(results))
        except ExternalServiceError as e:
            print(f"[WARN] Summary service failed: {e}")
            return FALLBACK_ERROR
        return text or FALLBACK_EMPTY
