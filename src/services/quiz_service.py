from __future__ import annotations

import time
from itertools import count
from typing import Iterator, List, Optional

from flask import current_app
from pydantic import ValidationError

from src.domain.errors import CorruptQuizError, InvalidQuizError, QuizNotFoundError, StorageError
from src.domain.models.api_models import QuizPreview
from src.domain.models.db_models import Quiz
from src.domain.repositories import IQuizRepository
from qb_utils.logger_utils import logger


def _get_repository(repository: Optional[IQuizRepository] = None) -> IQuizRepository:
    """
    Resolve the quiz repository.

    If a specific repository is passed (e.g., from tests), use that.
    Otherwise, fall back to the one registered on the current Flask app.
    """
    if repository is not None:
        return repository
    return current_app.extensions["quiz_repository"]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def timestamp_ids(start_ms: Optional[int] = None) -> Iterator[str]:
    """
    Yield candidate quiz ids: the current millisecond timestamp, then each
    following millisecond. The repository takes the first one that is free.
    """
    start = _now_ms() if start_ms is None else start_ms
    for value in count(start):
        yield str(value)


def parse_quiz(payload) -> Quiz:
    """
    Validate an uploaded document against the quiz format.

    :raises InvalidQuizError: if the payload is not an object or does not validate.
    """
    if not isinstance(payload, dict):
        raise InvalidQuizError(
            "Quiz document must be a JSON object",
            details=[{"loc": [], "msg": "expected a JSON object"}],
        )

    try:
        return Quiz.model_validate(payload)
    except ValidationError as e:
        details = [
            {"loc": list(err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise InvalidQuizError("Quiz document failed validation", details=details) from e


def upload_quiz(payload, repository: Optional[IQuizRepository] = None) -> QuizPreview:
    """
    Validate, store and preview a newly uploaded quiz.

    :param payload: The decoded JSON body of the upload request.
    :param repository: Optional explicit repository (useful for tests).
    :return: The {id, title} preview of the stored quiz.
    """
    repo = _get_repository(repository)
    quiz = parse_quiz(payload)
    quiz_id = repo.create(quiz, timestamp_ids())

    logger.info(
        "Quiz uploaded",
        extra={
            "quiz_id": quiz_id,
            "questions": len(quiz.questions),
            "component": "quiz_service",
        },
    )
    return QuizPreview(id=quiz_id, title=quiz.display_title(quiz_id))


def get_quiz(quiz_id: str, repository: Optional[IQuizRepository] = None) -> Quiz:
    """
    Load a stored quiz.

    :raises QuizNotFoundError: if no quiz is stored under ``quiz_id``.
    :raises CorruptQuizError: if the stored file cannot be parsed.
    """
    repo = _get_repository(repository)
    quiz = repo.get_by_id(quiz_id)
    if quiz is None:
        raise QuizNotFoundError(f"Quiz {quiz_id} not found")
    return quiz


def list_previews(repository: Optional[IQuizRepository] = None) -> List[QuizPreview]:
    """
    Project every stored quiz to a preview, in id order.

    Files that cannot be read or parsed are skipped so one bad upload
    doesn't take the whole listing down.
    """
    repo = _get_repository(repository)
    previews: List[QuizPreview] = []

    for quiz_id in repo.list_ids():
        try:
            quiz = repo.get_by_id(quiz_id)
        except (CorruptQuizError, StorageError) as e:
            logger.warning(
                "Skipping unreadable quiz",
                extra={"quiz_id": quiz_id, "error": str(e), "component": "quiz_service"},
            )
            continue
        if quiz is None:
            continue
        previews.append(QuizPreview(id=quiz_id, title=quiz.display_title(quiz_id)))

    return previews
