import contextlib
import io
import subprocess
import unittest
from unittest import mock

from cogscreen.audio.speech import NullSpeaker, Pyttsx3Speaker, make_speaker_from_config


class Pyttsx3SpeakerTests(unittest.TestCase):
    def setUp(self) -> None:
        spec = mock.patch("importlib.util.find_spec", return_value=object())
        popen = mock.patch("subprocess.Popen")
        spec.start()
        self.popen = popen.start()
        self.addCleanup(spec.stop)
        self.addCleanup(popen.stop)

    def test_speak_launches_child_without_waiting(self) -> None:
        speaker = Pyttsx3Speaker(rate=0.8)
        speaker.speak("  sh ")
        self.popen.assert_called_once()
        args = self.popen.call_args[0][0]
        self.assertEqual(args[-3:], ["160", "0.95", "sh"])
        proc = self.popen.return_value
        proc.wait.assert_not_called()
        proc.communicate.assert_not_called()

    def test_new_utterance_stops_the_playing_one(self) -> None:
        first, second = mock.Mock(), mock.Mock()
        first.poll.return_value = None
        self.popen.side_effect = [first, second]
        speaker = Pyttsx3Speaker()
        speaker.speak("sh")
        speaker.speak("ch")
        first.terminate.assert_called_once()
        self.assertEqual(self.popen.call_count, 2)

    def test_stop_kills_a_stuck_child(self) -> None:
        proc = self.popen.return_value
        proc.poll.return_value = None
        proc.wait.side_effect = subprocess.TimeoutExpired("tts", 0.5)
        speaker = Pyttsx3Speaker()
        speaker.speak("th")
        speaker.close()
        proc.kill.assert_called_once()

    def test_blank_text_is_skipped(self) -> None:
        Pyttsx3Speaker().speak("   ")
        self.popen.assert_not_called()

    def test_launch_failure_is_reported(self) -> None:
        self.popen.side_effect = OSError("no interpreter")
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            Pyttsx3Speaker().speak("sh")
        self.assertIn("[WARN] Speech playback failed", out.getvalue())


class SpeakerFactoryTests(unittest.TestCase):
    def test_disabled_gives_null_speaker(self) -> None:
        self.assertIsInstance(make_speaker_from_config({"speech": {"enabled": False}}), NullSpeaker)
        self.assertIsInstance(make_speaker_from_config({}, enabled=False), NullSpeaker)

    def test_missing_backend_falls_back(self) -> None:
        out = io.StringIO()
        with mock.patch("importlib.util.find_spec", return_value=None), contextlib.redirect_stdout(out):
            speaker = make_speaker_from_config({"speech": {"enabled": True, "backend": "pyttsx3"}})
        self.assertIsInstance(speaker, NullSpeaker)
        self.assertIn("[WARN] Speech disabled", out.getvalue())


if __name__ == "__main__":
    unittest.main()
