from .narrative import FALLBACK_ERROR, FALLBACK_NO_KEY, FALLBACK_EMPTY, NarrativeSummarizer, build_prompt

__all__ = ["FALLBACK_EMPTY", "FALLBACK_ERROR", "FALLBACK_NO_KEY", "NarrativeSummarizer", "build_prompt"]
