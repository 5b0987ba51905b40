from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import List, Optional
from enum import Enum

from qb_utils.validation import default_title


class QuestionType(str, Enum):
    TEXT = "text"
    MULTIPLE = "multiple"
    NUMBER = "number"


class Question(BaseModel):
    """A single quiz question. `options` only matters for multiple choice."""
    model_config = ConfigDict(extra="allow")

    id: str
    type: QuestionType
    question: str
    options: List[str] = Field(default_factory=list)
    answer: str

    @field_validator("id", "answer", mode="before")
    @classmethod
    def _numbers_as_strings(cls, value):
        # JSON authors often write "answer": 4 for number questions
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _multiple_needs_options(self):
        if self.type == QuestionType.MULTIPLE and not self.options:
            raise ValueError("multiple choice questions need at least one option")
        return self


class Quiz(BaseModel):
    """A titled collection of questions, stored as one JSON document."""
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    questions: List[Question]

    def display_title(self, quiz_id: str) -> str:
        if self.title and self.title.strip():
            return self.title
        return default_title(quiz_id)

    def to_dict(self):
        """Convert model to a JSON-ready dictionary for the quiz file."""
        data = self.model_dump(mode="json")
        if data.get("title") is None:
            data.pop("title", None)
        return data
