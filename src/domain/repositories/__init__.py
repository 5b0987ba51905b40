from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from ..models.db_models import Quiz

class IQuizRepository(ABC):
    """Interface for a quiz repository."""
    @abstractmethod
    def get_by_id(self, quiz_id: str) -> Optional[Quiz]:
        pass

    @abstractmethod
    def list_ids(self) -> List[str]:
        pass

    @abstractmethod
    def save(self, quiz_id: str, quiz: Quiz) -> None:
        pass

    @abstractmethod
    def create(self, quiz: Quiz, candidate_ids: Iterable[str]) -> str:
        pass
