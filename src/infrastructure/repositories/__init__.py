import json
import os
from itertools import islice
from typing import Iterable, List, Optional

from pydantic import ValidationError

from src.domain.errors import CorruptQuizError, StorageError
from src.domain.repositories import IQuizRepository
from src.domain.models.db_models import Quiz
from qb_utils.logger_utils import logger
from qb_utils.validation import is_valid_quiz_id


class FileQuizRepository(IQuizRepository):
    """Flat-file implementation of the quiz repository.

    Every quiz lives in ``<storage_root>/<quiz_id>.json``. The storage root is
    created lazily on the first write.
    """

    EXTENSION = ".json"

    def __init__(self, storage_root: str, max_attempts: int = 100):
        self.storage_root = storage_root
        self.max_attempts = max_attempts

    def _path_for(self, quiz_id: str) -> Optional[str]:
        if not is_valid_quiz_id(quiz_id):
            return None
        return os.path.join(self.storage_root, f"{quiz_id}{self.EXTENSION}")

    def _ensure_root(self) -> None:
        try:
            os.makedirs(self.storage_root, exist_ok=True)
        except OSError as exc:
            logger.error(
                "FileQuizRepository.ensure_root.failed",
                extra={"storage_root": self.storage_root, "error": str(exc)},
                exc_info=True,
            )
            raise StorageError(f"Cannot create storage root {self.storage_root}") from exc

    @staticmethod
    def _serialize(quiz: Quiz) -> str:
        return json.dumps(quiz.to_dict(), indent=2, ensure_ascii=False)

    def get_raw(self, quiz_id: str) -> Optional[dict]:
        """Read and parse a stored quiz file without validating its shape."""
        path = self._path_for(quiz_id)
        if path is None or not os.path.isfile(path):
            return None

        try:
            with open(path, "r", encoding="utf-8") as fh:
                content = fh.read()
        except UnicodeDecodeError as exc:
            raise CorruptQuizError(f"Quiz {quiz_id} is not valid UTF-8") from exc
        except OSError as exc:
            raise StorageError(f"Cannot read quiz {quiz_id}") from exc

        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise CorruptQuizError(f"Quiz {quiz_id} is not valid JSON") from exc

    def get_by_id(self, quiz_id: str) -> Optional[Quiz]:
        data = self.get_raw(quiz_id)
        if data is None:
            return None

        try:
            return Quiz.model_validate(data)
        except ValidationError as exc:
            raise CorruptQuizError(f"Quiz {quiz_id} does not match the quiz format") from exc

    def list_ids(self) -> List[str]:
        if not os.path.isdir(self.storage_root):
            return []

        try:
            names = os.listdir(self.storage_root)
        except OSError as exc:
            raise StorageError(f"Cannot list storage root {self.storage_root}") from exc

        ids = []
        for name in names:
            quiz_id, ext = os.path.splitext(name)
            if ext == self.EXTENSION and is_valid_quiz_id(quiz_id):
                ids.append(quiz_id)
        return sorted(ids)

    def save(self, quiz_id: str, quiz: Quiz) -> None:
        path = self._path_for(quiz_id)
        if path is None:
            raise ValueError(f"Invalid quiz id: {quiz_id!r}")

        self._ensure_root()
        try:
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(self._serialize(quiz))
        except OSError as exc:
            raise StorageError(f"Cannot write quiz {quiz_id}") from exc

    def create(self, quiz: Quiz, candidate_ids: Iterable[str]) -> str:
        """
        Store a new quiz under the first candidate id that is not taken.

        Files are opened in exclusive mode, so two writers racing for the same
        id never overwrite each other: the loser moves on to the next candidate.
        """
        self._ensure_root()
        payload = self._serialize(quiz)

        for quiz_id in islice(candidate_ids, self.max_attempts):
            path = self._path_for(quiz_id)
            if path is None:
                raise ValueError(f"Invalid quiz id: {quiz_id!r}")

            try:
                fh = open(path, "x", encoding="utf-8")
            except FileExistsError:
                logger.warning(
                    "FileQuizRepository.create.id_taken",
                    extra={"quiz_id": quiz_id},
                )
                continue
            except OSError as exc:
                raise StorageError(f"Cannot create quiz {quiz_id}") from exc

            try:
                with fh:
                    fh.write(payload)
            except OSError as exc:
                # Don't leave a half-written file behind
                try:
                    os.remove(path)
                except OSError:
                    logger.warning(
                        "FileQuizRepository.create.cleanup_failed",
                        extra={"quiz_id": quiz_id},
                    )
                raise StorageError(f"Cannot write quiz {quiz_id}") from exc

            return quiz_id

        raise StorageError(
            f"No free quiz id after {self.max_attempts} attempts"
        )
