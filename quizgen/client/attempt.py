"""
Quiz attempt engine

Walks an already-fetched, immutable list of questions one at a time:

    Answering(i) --select--> Answering(i)
    Answering(i) --reveal--> Revealed(i)
    Answering(i) / Revealed(i) --next--> Answering(i+1) | Completed
    Answering(i) / Revealed(i) --prev--> Answering(i-1)
    any --reset--> Answering(0)

Illegal transitions raise AttemptStateError and leave the attempt untouched.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, List, Optional, Sequence

from quizgen.schemas.quiz import Question


RESULT_TIERS = (
    (80, "Excellent work!"),
    (60, "Good job!"),
    (40, "Nice try!"),
    (0, "Keep practicing!"),
)


class AttemptStateError(Exception):
    """Transition not allowed in the current state"""


class InvalidAnswerError(ValueError):
    """Selected option is not one of the current question's options"""


class Phase(str, Enum):
    ANSWERING = "answering"
    REVEALED = "revealed"
    COMPLETED = "completed"


@dataclass(frozen=True)
class QuestionResult:
    index: int
    question: str
    selected: Optional[str]
    correct_answer: str
    explanation: str

    @property
    def is_correct(self) -> bool:
        return self.selected == self.correct_answer


@dataclass(frozen=True)
class AttemptResult:
    score: int
    total: int
    percentage: int
    message: str
    questions: List[QuestionResult]


def percentage_of(score: int, total: int) -> int:
    """Whole percentage, halves rounded up"""
    if total <= 0:
        return 0
    value = Decimal(100 * score) / Decimal(total)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def result_message(percentage: int) -> str:
    for lower_bound, message in RESULT_TIERS:
        if percentage >= lower_bound:
            return message
    return RESULT_TIERS[-1][1]


class QuizAttempt:
    """One traversal of a quiz; discard it or reset() to try again"""

    def __init__(self, questions: Sequence[Question]):
        if not questions:
            raise ValueError("A quiz attempt needs at least one question")
        self._questions = tuple(questions)
        self._answers: Dict[int, str] = {}
        self._index = 0
        self._phase = Phase.ANSWERING

    # State inspection

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def index(self) -> int:
        return self._index

    @property
    def total(self) -> int:
        return len(self._questions)

    @property
    def answers(self) -> Dict[int, str]:
        return dict(self._answers)

    @property
    def current_question(self) -> Question:
        return self._questions[self._index]

    @property
    def is_answered(self) -> bool:
        return self._index in self._answers

    @property
    def is_last(self) -> bool:
        return self._index == len(self._questions) - 1

    @property
    def is_completed(self) -> bool:
        return self._phase is Phase.COMPLETED

    def selected(self, index: Optional[int] = None) -> Optional[str]:
        return self._answers.get(self._index if index is None else index)

    # Transitions

    def select(self, option: str) -> None:
        if self._phase is not Phase.ANSWERING:
            raise AttemptStateError(f"Cannot select an answer while {self._phase.value}")
        if option not in self.current_question.options:
            raise InvalidAnswerError(f"{option!r} is not an option of question {self._index + 1}")
        self._answers[self._index] = option

    def reveal(self) -> None:
        if self._phase is not Phase.ANSWERING:
            raise AttemptStateError(f"Cannot reveal while {self._phase.value}")
        if not self.is_answered:
            raise AttemptStateError("Select an answer before checking it")
        self._phase = Phase.REVEALED

    def next(self) -> None:
        if self._phase is Phase.COMPLETED:
            raise AttemptStateError("Quiz is already completed")
        if not self.is_answered:
            raise AttemptStateError("Select an answer before moving on")

        if self.is_last:
            self._phase = Phase.COMPLETED
        else:
            self._index += 1
            self._phase = Phase.ANSWERING

    def prev(self) -> None:
        if self._phase is Phase.COMPLETED:
            raise AttemptStateError("Quiz is already completed")
        if self._index == 0:
            raise AttemptStateError("Already at the first question")
        self._index -= 1
        self._phase = Phase.ANSWERING

    def reset(self) -> None:
        self._answers.clear()
        self._index = 0
        self._phase = Phase.ANSWERING

    # Scoring

    def score(self) -> int:
        return sum(
            1 for i, question in enumerate(self._questions)
            if self._answers.get(i) == question.correct_answer
        )

    def percentage(self) -> int:
        return percentage_of(self.score(), self.total)

    def result(self) -> AttemptResult:
        """
        Score summary with a per-question breakdown

        Available at any point; unanswered questions count as incorrect.
        """
        breakdown = [
            QuestionResult(
                index=i,
                question=question.question,
                selected=self._answers.get(i),
                correct_answer=question.correct_answer,
                explanation=question.explanation,
            )
            for i, question in enumerate(self._questions)
        ]
        score = sum(1 for item in breakdown if item.is_correct)
        percentage = percentage_of(score, self.total)

        return AttemptResult(
            score=score,
            total=self.total,
            percentage=percentage,
            message=result_message(percentage),
            questions=breakdown,
        )
