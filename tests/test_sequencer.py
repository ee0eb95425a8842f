import unittest

from cogscreen.bank.models import AssessmentType, ModuleConfig, Question, QuestionKind
from cogscreen.errors import InputError
from cogscreen.runners.base_runner import Phase
from cogscreen.runners.sequencer import TrialSequencer
from cogscreen.scoring.formulas import score_accuracy, score_word_sequencing
from cogscreen.stats.metrics import MetricsAccumulator


def selection_module(n: int) -> ModuleConfig:
    questions = tuple(
        Question(id=f"q-{i}", stimulus="Which is correct?", kind=QuestionKind.SELECTION, correct_answer="yes", options=("yes", "no"))
        for i in range(n)
    )
    return ModuleConfig(
        type=AssessmentType.SPELLING_RECOGNITION,
        title="Spelling",
        description="",
        instructions="",
        calculate_score=score_accuracy,
        questions=questions,
    )


def sequence_module(*words: str) -> ModuleConfig:
    questions = tuple(
        Question(id=f"w-{i}", stimulus=w, kind=QuestionKind.SEQUENCE, correct_answer=tuple(w), options=tuple(reversed(w)))
        for i, w in enumerate(words)
    )
    return ModuleConfig(
        type=AssessmentType.WORD_SEQUENCING,
        title="Sequencing",
        description="",
        instructions="",
        calculate_score=score_word_sequencing,
        questions=questions,
    )


class SelectionTests(unittest.TestCase):
    def test_exact_match_and_reaction_time(self) -> None:
        acc = MetricsAccumulator()
        seq = TrialSequencer(selection_module(2), acc)
        seq.begin_trial(1000)
        res = seq.submit("yes", 1750)
        self.assertTrue(res.correct)
        self.assertFalse(res.is_last_trial)
        self.assertEqual(res.reaction_time_ms, 750)
        self.assertIs(seq.phase, Phase.FEEDBACK)
        self.assertEqual(acc.total, 1)

    def test_last_trial_finishes(self) -> None:
        seq = TrialSequencer(selection_module(1), MetricsAccumulator())
        seq.begin_trial(0)
        res = seq.submit("no", 100)
        self.assertFalse(res.correct)
        self.assertTrue(res.is_last_trial)
        self.assertTrue(seq.finish_feedback())
        self.assertIs(seq.phase, Phase.FINISHED)

    def test_fifteen_of_twenty_scores_75(self) -> None:
        acc = MetricsAccumulator()
        seq = TrialSequencer(selection_module(20), acc)
        for i in range(20):
            seq.begin_trial(i * 1000)
            seq.submit("yes" if i < 15 else "no", i * 1000 + 600)
            seq.finish_feedback()
        self.assertTrue(seq.finished)
        snap = acc.snapshot()
        self.assertEqual(snap.total_trials, 20)
        self.assertEqual(snap.correct_answers, 15)
        self.assertEqual(score_accuracy(snap), 75)

    def test_input_rejected_during_feedback(self) -> None:
        seq = TrialSequencer(selection_module(2), MetricsAccumulator())
        seq.begin_trial(0)
        seq.submit("yes", 10)
        with self.assertRaises(InputError):
            seq.submit("yes", 20)

    def test_answer_outside_options_rejected(self) -> None:
        acc = MetricsAccumulator()
        seq = TrialSequencer(selection_module(2), acc)
        seq.begin_trial(0)
        for bad in ("", "Yes", "3"):
            with self.assertRaises(InputError):
                seq.submit(bad, 100)
        self.assertEqual(acc.total, 0)
        self.assertIs(seq.phase, Phase.AWAITING_INPUT)
        self.assertTrue(seq.submit("yes", 200).correct)

    def test_stale_trial_index_rejected(self) -> None:
        seq = TrialSequencer(selection_module(2), MetricsAccumulator())
        seq.begin_trial(0)
        with self.assertRaises(InputError):
            seq.resolve(1, "yes", 100)
        self.assertIs(seq.phase, Phase.AWAITING_INPUT)


class SequencePickTests(unittest.TestCase):
    def test_repeated_letter_disabled_after_one_use(self) -> None:
        acc = MetricsAccumulator()
        seq = TrialSequencer(sequence_module("dog"), acc)
        seq.begin_trial(0)
        self.assertIsNone(seq.submit("d", 100))
        self.assertFalse(seq.is_available("d"))
        with self.assertRaises(InputError):
            seq.submit("d", 150)
        self.assertEqual(seq.picks, ("d",))
        self.assertTrue(seq.is_available("o"))
        self.assertTrue(seq.is_available("g"))
        self.assertEqual(acc.total, 0)

    def test_double_letters_allow_two_picks(self) -> None:
        seq = TrialSequencer(sequence_module("egg"), MetricsAccumulator())
        seq.begin_trial(0)
        seq.submit("e", 10)
        seq.submit("g", 20)
        self.assertTrue(seq.is_available("g"))
        res = seq.submit("g", 30)
        self.assertTrue(res.correct)
        self.assertEqual(res.reaction_time_ms, 30)

    def test_wrong_order_resolves_incorrect(self) -> None:
        seq = TrialSequencer(sequence_module("cat"), MetricsAccumulator())
        seq.begin_trial(0)
        seq.submit("t", 10)
        seq.submit("a", 20)
        res = seq.submit("c", 30)
        self.assertFalse(res.correct)

    def test_unknown_letter_rejected(self) -> None:
        seq = TrialSequencer(sequence_module("cat"), MetricsAccumulator())
        seq.begin_trial(0)
        with self.assertRaises(InputError):
            seq.submit("z", 10)
        self.assertEqual(seq.picks, ())

    def test_clear_input_resets_picks(self) -> None:
        seq = TrialSequencer(sequence_module("cat"), MetricsAccumulator())
        seq.begin_trial(0)
        seq.submit("c", 10)
        seq.clear_input()
        self.assertEqual(seq.picks, ())
        self.assertTrue(seq.is_available("c"))

    def test_picks_reset_between_trials(self) -> None:
        seq = TrialSequencer(sequence_module("cat", "dog"), MetricsAccumulator())
        seq.begin_trial(0)
        for letter in "cat":
            seq.submit(letter, 10)
        seq.finish_feedback()
        seq.begin_trial(20)
        self.assertEqual(seq.picks, ())
        self.assertEqual([opt for opt, ok in seq.option_states() if ok], ["g", "o", "d"])

    def test_resolve_checks_cardinality(self) -> None:
        seq = TrialSequencer(sequence_module("cat"), MetricsAccumulator())
        seq.begin_trial(0)
        with self.assertRaises(InputError):
            seq.resolve(0, ("c", "a"), 100)
        self.assertIs(seq.phase, Phase.AWAITING_INPUT)
        res = seq.resolve(0, ("c", "a", "t"), 100)
        self.assertTrue(res.correct)

    def test_fifteen_words_at_ten_seconds_scores_99(self) -> None:
        words = ["cat", "dog", "sun", "hat", "pen"] * 3
        acc = MetricsAccumulator()
        seq = TrialSequencer(sequence_module(*words), acc)
        for i, word in enumerate(words):
            start = i * 20000
            seq.begin_trial(start)
            for letter in word:
                seq.submit(letter, start + 10000)
            seq.finish_feedback()
        self.assertTrue(seq.finished)
        self.assertEqual(score_word_sequencing(acc.snapshot()), 99)


if __name__ == "__main__":
    unittest.main()
