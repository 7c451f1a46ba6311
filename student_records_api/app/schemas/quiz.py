"""
Pydantic models for quiz results and the statistics derived from them.

A ``QuizResult`` row links a quiz to a student with the points scored
out of the quiz's maximum.  Rows violating ``0 <= score <= max_score``
or ``max_score > 0`` fail validation and are skipped when the results
file is loaded.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuizResult(BaseModel):
    """One student's result on one quiz."""

    model_config = ConfigDict(frozen=True)

    quiz_id: int
    student_id: int
    score: int = Field(..., ge=0)
    max_score: int = Field(..., gt=0)

    @model_validator(mode="after")
    def check_score_within_max(self) -> "QuizResult":
        if self.score > self.max_score:
            raise ValueError(f"score {self.score} exceeds max_score {self.max_score}")
        return self

    @property
    def percentage(self) -> float:
        return self.score / self.max_score * 100


class QuizStatsRead(BaseModel):
    """Descriptive statistics of raw scores for one quiz."""

    quiz_id: int
    average_score: float
    std_dev: float = Field(..., description="Population standard deviation of the scores")
    min_score: int
    max_score: int
    participants: int
    mixed_max_score: bool = Field(
        False,
        description="True when the quiz's results use different max scores, "
        "in which case the raw-score statistics mix scales",
    )


class StudentStatsRead(BaseModel):
    """Summary of one student's quiz results."""

    student_id: int
    quizzes_taken: int
    average_percentage: float
