from __future__ import annotations

"""Question bank: builds the shuffled, immutable question set of each module."""

import random
from typing import Dict, List, Optional, Sequence

from ..scoring.formulas import (
    score_accuracy,
    score_visual_processing,
    score_word_recognition,
    score_word_sequencing,
    score_working_memory,
)
from ..util.randomness import make_rng, shuffled
from .models import AssessmentType, ModuleConfig, Question, QuestionKind


WORD_RECOGNITION_WORDS = [
    ("laugh", ["laugh", "laguh", "luagh", "lahgu"]),
    ("enough", ["enough", "enouhg", "enuogh", "engouh"]),
    ("people", ["people", "poeple", "peolpe", "peopel"]),
    ("beautiful", ["beautiful", "beutiful", "bueatiful", "beautifull"]),
    ("thorough", ["thorough", "through", "thorogh", "thourgh"]),
    ("although", ["although", "allthough", "altho", "althogh"]),
    ("thought", ["thought", "thougth", "thot", "thouhgt"]),
    ("through", ["through", "throuhg", "thruogh", "throgh"]),
    ("writing", ["writing", "writting", "wriiting", "wirting"]),
    ("beginning", ["beginning", "begining", "beggining", "beginnig"]),
    ("different", ["different", "diffrent", "diferent", "differnt"]),
    ("definitely", ["definitely", "definately", "definatly", "definetly"]),
    ("usually", ["usually", "usally", "usualy", "usuallly"]),
    ("restaurant", ["restaurant", "resturant", "restaraunt", "restuarant"]),
    ("mountain", ["mountain", "mountian", "mountan", "mounatin"]),
    ("ocean", ["ocean", "oscean", "ocian", "oceen"]),
    ("camera", ["camera", "camra", "camerra", "cemara"]),
    ("animal", ["animal", "aminal", "animol", "animel"]),
    ("letter", ["letter", "leter", "lettre", "lettur"]),
    ("number", ["number", "numer", "numbre", "numbor"]),
]

MIRROR_LETTERS = ["b", "d", "p", "q"]
HUMP_LETTERS = ["m", "n", "u", "w"]
LETTER_TRIALS = 30

PHONEMES = [
    ("sh", ["sh", "ch", "s", "th"]),
    ("ch", ["ch", "sh", "tc", "k"]),
    ("th", ["th", "f", "v", "d"]),
    ("b", ["b", "d", "p", "g"]),
    ("d", ["d", "b", "t", "p"]),
    ("k", ["k", "g", "c", "t"]),
    ("p", ["p", "b", "q", "d"]),
    ("a", ["a", "e", "o", "u"]),
    ("e", ["e", "i", "a", "y"]),
    ("i", ["i", "e", "y", "l"]),
    ("o", ["o", "a", "u", "e"]),
    ("u", ["u", "n", "v", "w"]),
    ("m", ["m", "n", "w", "h"]),
    ("n", ["n", "m", "u", "h"]),
    ("f", ["f", "th", "v", "ph"]),
    ("br", ["br", "dr", "pr", "gr"]),
    ("st", ["st", "sp", "sl", "ts"]),
    ("pl", ["pl", "bl", "cl", "fl"]),
    ("gr", ["gr", "gl", "br", "cr"]),
    ("sl", ["sl", "st", "cl", "fl"]),
]

SEQUENCE_WORDS = [
    "sky", "fox", "joy",
    "frog", "lamp", "nest",
    "plant", "drink", "storm",
    "garden", "purple", "winter",
    "monkey", "doctor", "yellow",
]

PASSAGE = "The brown dog ran through the park. It chased a red ball. The dog was very happy."
COMPREHENSION_ITEMS = [
    ("What color was the dog?", "Brown", ["Black", "Brown", "White", "Spotted"]),
    ("Where did the dog run?", "Park", ["Street", "House", "Park", "Beach"]),
    ("What did the dog chase?", "Red ball", ["Red ball", "Blue car", "Green stick", "Yellow bird"]),
    ("How did the dog feel?", "Happy", ["Sad", "Angry", "Happy", "Tired"]),
    ("What does 'chased' mean?", "Ran after", ["Ate", "Ran after", "Slept on", "Bit"]),
]

SYMBOLS = ["⭐", "★", "✦", "✧", "✨", "☀", "✸", "✶"]
SYMBOL_CHOICES = 5

SPELLING_PAIRS = [
    ("calendar", "calender"),
    ("library", "libary"),
    ("grammar", "grammer"),
    ("minute", "minite"),
    ("weird", "wierd"),
    ("across", "accross"),
    ("appearance", "appearence"),
    ("argument", "arguement"),
    ("basically", "basicly"),
    ("completely", "completly"),
    ("disappear", "dissapear"),
    ("finally", "finaly"),
    ("foreign", "foriegn"),
    ("forty", "fourty"),
    ("forward", "foward"),
    ("happen", "hapen"),
    ("independent", "independant"),
    ("interest", "intrest"),
    ("little", "litfle"),
    ("really", "realy"),
]


def _word_recognition(rng: random.Random) -> List[Question]:
    return [
        Question(
            id=f"wr-{i}",
            stimulus="Identify:",
            kind=QuestionKind.SELECTION,
            correct_answer=word,
            options=tuple(shuffled(options, rng)),
        )
        for i, (word, options) in enumerate(WORD_RECOGNITION_WORDS)
    ]


def _letter_accuracy(rng: random.Random) -> List[Question]:
    bag = [letter for letter in MIRROR_LETTERS + HUMP_LETTERS for _ in range(4)]
    bag = shuffled(bag, rng)[:LETTER_TRIALS]
    questions = []
    for i, target in enumerate(bag):
        group = MIRROR_LETTERS if target in MIRROR_LETTERS else HUMP_LETTERS
        questions.append(
            Question(
                id=f"la-{i}",
                stimulus=target,
                kind=QuestionKind.SELECTION,
                correct_answer=target,
                options=tuple(shuffled(group, rng)),
            )
        )
    return questions


def _phoneme_matching(rng: random.Random) -> List[Question]:
    return [
        Question(
            id=f"pm-{i}",
            stimulus=f"Tap the sound for /{sound}/",
            kind=QuestionKind.AUDIO_MATCH,
            correct_answer=sound,
            options=tuple(shuffled(options, rng)),
            audio_text=sound,
        )
        for i, (sound, options) in enumerate(PHONEMES)
    ]


def scramble(word: str, rng: random.Random) -> List[str]:
    """Shuffle the letters, swapping the first two if the shuffle is a no-op."""
    letters = shuffled(list(word), rng)
    if "".join(letters) == word and len(word) > 1:
        letters[0], letters[1] = letters[1], letters[0]
    return letters


def _word_sequencing(rng: random.Random) -> List[Question]:
    return [
        Question(
            id=f"ws-{i}",
            stimulus=word,
            kind=QuestionKind.SEQUENCE,
            correct_answer=tuple(word),
            options=tuple(scramble(word, rng)),
        )
        for i, word in enumerate(SEQUENCE_WORDS)
    ]


def _reading_comprehension(rng: random.Random) -> List[Question]:
    return [
        Question(
            id=f"rc-{i + 1}",
            stimulus=PASSAGE,
            kind=QuestionKind.SELECTION,
            correct_answer=answer,
            options=tuple(shuffled(options, rng)),
            prompt=prompt,
        )
        for i, (prompt, answer, options) in enumerate(COMPREHENSION_ITEMS)
    ]


def _visual_processing(rng: random.Random) -> List[Question]:
    bag = [s for s in SYMBOLS for _ in range(3)]
    bag.append(rng.choice(SYMBOLS))
    bag = shuffled(bag, rng)
    questions = []
    for i, target in enumerate(bag):
        options = [target]
        while len(options) < SYMBOL_CHOICES:
            s = rng.choice(SYMBOLS)
            if s not in options:
                options.append(s)
        questions.append(
            Question(
                id=f"vp-{i}",
                stimulus=target,
                kind=QuestionKind.VISUAL_SEARCH,
                correct_answer=target,
                options=tuple(shuffled(options, rng)),
            )
        )
    return questions


def _spelling_recognition(rng: random.Random) -> List[Question]:
    return [
        Question(
            id=f"sr-{i}",
            stimulus="Which is correct?",
            kind=QuestionKind.SELECTION,
            correct_answer=correct,
            options=tuple(shuffled([correct, wrong], rng)),
        )
        for i, (correct, wrong) in enumerate(SPELLING_PAIRS)
    ]


_BUILDERS: Dict[AssessmentType, tuple] = {
    AssessmentType.WORD_RECOGNITION: (
        "Word Recognition Speed",
        "Measures the time taken to identify correct words.",
        "Tap the correct word as fast as possible (20 trials).",
        score_word_recognition,
        _word_recognition,
    ),
    AssessmentType.LETTER_ACCURACY: (
        "Letter Accuracy",
        "Measures ability to correctly identify letters, specifically b/d/p/q.",
        "Tap the letter that matches the target shown (30 trials).",
        score_accuracy,
        _letter_accuracy,
    ),
    AssessmentType.PHONEME_MATCHING: (
        "Phoneme Matching",
        "Measures ability to connect spoken sounds with letters.",
        "Listen to the sound and tap the matching letters (20 trials).",
        score_accuracy,
        _phoneme_matching,
    ),
    AssessmentType.WORD_SEQUENCING: (
        "Word Sequencing",
        "Measures ability to arrange jumbled letters into words.",
        "Tap letters in order to spell the word (15 trials).",
        score_word_sequencing,
        _word_sequencing,
    ),
    AssessmentType.READING_COMPREHENSION: (
        "Reading Comprehension",
        "Measures understanding of written text.",
        "Read the passage and answer 5 questions.",
        score_accuracy,
        _reading_comprehension,
    ),
    AssessmentType.WORKING_MEMORY: (
        "Working Memory Span",
        "Measures capacity to hold sequences of numbers.",
        "Memorize the numbers, then type them in order.",
        score_working_memory,
        None,
    ),
    AssessmentType.VISUAL_PROCESSING: (
        "Visual Processing Speed",
        "Measures speed of matching visual symbols.",
        "Match the symbol as fast as possible (25 trials).",
        score_visual_processing,
        _visual_processing,
    ),
    AssessmentType.SPELLING_RECOGNITION: (
        "Spelling Recognition",
        "Measures ability to identify correctly spelled words.",
        "Tap the correctly spelled word (20 trials).",
        score_accuracy,
        _spelling_recognition,
    ),
}


def build_module(kind: AssessmentType, rng: Optional[random.Random] = None) -> ModuleConfig:
    """Build one module's config with freshly shuffled questions."""
    rng = rng or make_rng()
    title, description, instructions, scorer, generate = _BUILDERS[AssessmentType(kind)]
    questions = tuple(generate(rng)) if generate is not None else ()
    return ModuleConfig(
        type=AssessmentType(kind),
        title=title,
        description=description,
        instructions=instructions,
        calculate_score=scorer,
        questions=questions,
    )


def build_battery(
    rng: Optional[random.Random] = None,
    order: Optional[Sequence[str]] = None,
) -> List[ModuleConfig]:
    """Build the module configs in battery order (or the given order)."""
    rng = rng or make_rng()
    kinds = [AssessmentType(k) for k in order] if order else list(AssessmentType)
    return [build_module(k, rng) for k in kinds]
