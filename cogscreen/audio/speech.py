from __future__ import annotations

"""Text-to-speech playback for audio-match stimuli.

The assessment core only hands text over; it never waits on or inspects
the playback outcome.
"""

import importlib.util
import subprocess
import sys
from typing import Any, Dict, Optional


class Speaker:
    """Abstract-like speech interface."""

    def __init__(self, rate: float = 0.8) -> None:
        self.rate = rate

    def speak(self, text: str) -> None:
        """Vocalize text; the outcome is not reported back."""
        raise NotImplementedError

    def close(self) -> None:
        """Release resources."""
        pass


class NullSpeaker(Speaker):
    """Silent speaker; remembers what it was asked to say."""

    def __init__(self, rate: float = 0.8) -> None:
        super().__init__(rate=rate)
        self.spoken: list[str] = []

    def speak(self, text: str) -> None:
        self.spoken.append(text)


class Pyttsx3Speaker(Speaker):
    """Concrete Speaker running pyttsx3 in a child process.

    speak() returns at once so reaction timing and input are never held up
    by playback. A new utterance cuts off the one still playing.
    """

    BASE_WORDS_PER_MINUTE = 200
    MAX_STOP_WAIT_S = 0.5

    _SCRIPT = (
        "import sys\n"
        "import pyttsx3\n"
        "e = pyttsx3.init()\n"
        "e.setProperty('rate', int(sys.argv[1]))\n"
        "e.setProperty('volume', float(sys.argv[2]))\n"
        "e.say(' '.join(sys.argv[3:]))\n"
        "e.runAndWait()\n"
    )

    def __init__(self, rate: float = 0.8, volume: float = 0.95) -> None:
        super().__init__(rate=rate)
        if importlib.util.find_spec("pyttsx3") is None:
            raise RuntimeError("pyttsx3 is not installed")
        self.volume = volume
        self._proc: Optional[subprocess.Popen] = None

    def speak(self, text: str) -> None:
        phrase = " ".join(str(text).split())
        if not phrase:
            return
        self._stop_active()
        words_per_minute = int(self.BASE_WORDS_PER_MINUTE * self.rate)
        try:
            self._proc = subprocess.Popen(
                [sys.executable, "-c", self._SCRIPT, str(words_per_minute), str(self.volume), phrase],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            print(f"[WARN] Speech playback failed: {e}")
            self._proc = None

    def _stop_active(self) -> None:
        proc, self._proc = self._proc, None
        if proc is None or proc.poll() is not None:
            return
        proc.terminate()
        try:
            proc.wait(timeout=self.MAX_STOP_WAIT_S)
        except subprocess.TimeoutExpired:
            proc.kill()

    def close(self) -> None:
        self._stop_active()


def make_speaker_from_config(cfg: Dict[str, Any], *, enabled: Optional[bool] = None) -> Speaker:
    """Factory for Speaker from config dict; falls back to silence."""
    speech = cfg.get("speech", {})
    rate = float(speech.get("rate", 0.8))
    if enabled is None:
        enabled = bool(speech.get("enabled", True))
    if not enabled or speech.get("backend", "pyttsx3") == "none":
        return NullSpeaker(rate=rate)
    try:
        return Pyttsx3Speaker(rate=rate)
    except RuntimeError as e:
        print(f"[WARN] Speech disabled: {e}")
        return NullSpeaker(rate=rate)
