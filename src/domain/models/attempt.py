from typing import List, Optional

from src.domain.errors import IncompleteAttemptError, QuizAlreadySubmittedError
from src.domain.models.db_models import Quiz, QuestionType


class OptionStatus:
    IDLE = "idle"
    SELECTED = "selected"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class QuizAttempt:
    """
    One page load's worth of answers for a quiz.

    The attempt is in progress until every question has a non-empty answer
    and ``submit()`` is called. Submission is terminal: answers can no longer
    change and the attempt cannot be submitted again. Nothing is persisted.
    """

    def __init__(self, quiz: Quiz):
        self.quiz = quiz
        self.answers: List[str] = [""] * len(quiz.questions)
        self.submitted = False

    def _check_open(self):
        if self.submitted:
            raise QuizAlreadySubmittedError("Quiz has already been submitted")

    def set_answer(self, index: int, value: str) -> None:
        """Record a typed answer (text and number questions) verbatim."""
        self._check_open()
        self.answers[index] = value

    def select_option(self, index: int, option: str) -> None:
        """Select a multiple choice option, replacing any previous selection."""
        self._check_open()
        question = self.quiz.questions[index]
        if option not in question.options:
            raise ValueError(f"{option!r} is not an option of question {question.id}")
        self.answers[index] = option

    def is_complete(self) -> bool:
        return all(answer != "" for answer in self.answers)

    def can_submit(self) -> bool:
        return not self.submitted and self.is_complete()

    def submit(self) -> None:
        self._check_open()
        if not self.is_complete():
            raise IncompleteAttemptError("Every question needs an answer before submitting")
        self.submitted = True

    def option_status(self, index: int, option: str) -> str:
        """Display state of one option; correctness only shows after submission."""
        if self.answers[index] != option:
            return OptionStatus.IDLE
        if not self.submitted:
            return OptionStatus.SELECTED
        if option == self.quiz.questions[index].answer:
            return OptionStatus.CORRECT
        return OptionStatus.INCORRECT

    def is_correct(self, index: int) -> Optional[bool]:
        """Grade one question. Only multiple choice is graded; others give None."""
        question = self.quiz.questions[index]
        if not self.submitted or question.type != QuestionType.MULTIPLE:
            return None
        return self.answers[index] == question.answer

    @classmethod
    def from_form(cls, quiz: Quiz, form) -> "QuizAttempt":
        """
        Rebuild an attempt from a submitted form (``answer-<index>`` fields).

        Unknown multiple choice values are ignored. If several boxes of one
        question were ticked, the last one wins.
        """
        attempt = cls(quiz)
        for index, question in enumerate(quiz.questions):
            values = form.getlist(f"answer-{index}")
            if question.type == QuestionType.MULTIPLE:
                for value in values:
                    if value in question.options:
                        attempt.select_option(index, value)
            elif values:
                attempt.set_answer(index, values[-1])
        return attempt
