from pydantic import BaseModel, Field

class QuizPreview(BaseModel):
    """The {id, title} projection of a quiz used in listings and upload responses."""
    id: str = Field(..., description="Quiz id, also the stored filename without extension.")
    title: str = Field(..., description="Quiz title, or a placeholder derived from the id.")

    def to_dict(self):
        return self.model_dump()
