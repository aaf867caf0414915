"""True-or-false trivia rounds built from published facts."""

import math
import random
from dataclasses import dataclass

from .models import Fact

FALSE_STATEMENTS = [
    "Humans can breathe underwater if they practice enough.",
    "The Great Wall of China is visible from the Moon with the naked eye.",
    "Goldfish have a memory span of only three seconds.",
    "Humans only use 10% of their brains.",
    "If you touch a baby bird, its mother will reject it.",
    "Lightning never strikes the same place twice.",
    "Different parts of your tongue detect different tastes.",
    "Eating turkey makes you sleepy because of the tryptophan.",
    "Bats are blind.",
    "You lose most of your body heat through your head.",
    "Hair and fingernails continue to grow after death.",
    "Cracking your knuckles causes arthritis.",
    "You need to wait 24 hours before filing a missing person report.",
    "Bulls are enraged by the color red.",
    "Chameleons change color to blend in with their surroundings.",
]

DEFAULT_QUESTIONS = 10


@dataclass(frozen=True)
class TriviaQuestion:
    id: str
    text: str
    category: str
    is_true: bool


class TriviaRound:
    """One game: half real facts, half false statements, in random order.

    With fewer real facts than needed the round is simply shorter.
    """

    def __init__(
        self,
        facts: list[Fact],
        total_questions: int = DEFAULT_QUESTIONS,
        rng: random.Random | None = None,
    ) -> None:
        if total_questions < 1:
            raise ValueError("total_questions must be at least 1")

        rng = rng or random.Random()
        real = rng.sample(facts, min(len(facts), total_questions // 2))
        fake = rng.sample(
            FALSE_STATEMENTS,
            min(len(FALSE_STATEMENTS), math.ceil(total_questions / 2)),
        )

        questions = [TriviaQuestion(f.id, f.text, f.category, True) for f in real]
        questions += [
            TriviaQuestion(f"fake-{i}", text, "Trivia", False)
            for i, text in enumerate(fake)
        ]
        rng.shuffle(questions)

        self.questions = questions
        self.current = 0
        self.score = 0
        self.streak = 0
        self.best_streak = 0

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def finished(self) -> bool:
        return self.current >= self.total

    @property
    def question(self) -> TriviaQuestion | None:
        """The question waiting for an answer, or None when finished."""
        return None if self.finished else self.questions[self.current]

    def answer(self, is_true: bool) -> bool:
        """Answer the current question and move on.

        Returns:
            True if the answer was correct.
        """
        question = self.question
        if question is None:
            raise RuntimeError("The round is already over")

        correct = is_true == question.is_true
        if correct:
            self.score += 1
            self.streak += 1
            self.best_streak = max(self.best_streak, self.streak)
        else:
            self.streak = 0

        self.current += 1
        return correct

    @property
    def percentage(self) -> int:
        if self.total == 0:
            return 0
        return round(self.score / self.total * 100)

    @property
    def verdict(self) -> str:
        """Closing message for the final score."""
        if self.score == self.total:
            return "Perfect Score!"
        if self.score >= self.total * 0.7:
            return "Great Job!"
        if self.score >= self.total * 0.5:
            return "Good Effort!"
        return "Better Luck Next Time!"
