"""
Pydantic models for roles, candidates and the model's structured replies.

Field names are snake_case in Python and camelCase on the wire, which is
also the shape the prompts ask the model to answer in.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# Whole-number scores stay ints on the wire
Score = Union[Annotated[int, Field(ge=0, le=100)], Annotated[float, Field(ge=0, le=100)]]
Adjustment = Union[Annotated[int, Field(ge=-20, le=20)], Annotated[float, Field(ge=-20, le=20)]]
ProgressStatus = Literal["idle", "processing", "complete", "error"]

INTERVIEW_QUESTION_COUNT = 10


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ── Category set ────────────────────────────────────────────────────────────

class CategoryModel(CamelModel):
    """Category entries keep any extra keys the client sends."""

    model_config = ConfigDict(extra="allow")


class MainCategory(CategoryModel):
    name: str
    description: str = ""
    weight: int | float


class SubCategory(CategoryModel):
    name: str
    related_to_main: str = ""
    description: str = ""


class CategorySet(CamelModel):
    main_categories: list[MainCategory]
    sub_categories: list[SubCategory] = Field(default_factory=list)
    evaluation_guidance: str = ""

    def to_api(self) -> dict:
        # Only fields actually sent by the model or the client
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    @model_validator(mode="after")
    def _check_weights(self) -> "CategorySet":
        # Weights are guidance for the model, so a bad total is only reported
        total = sum(c.weight for c in self.main_categories)
        if self.main_categories and total != 100:
            logger.warning("Main category weights sum to %s, expected 100", total)
        return self


class Role(CamelModel):
    id: str
    title: str
    description: str
    required_skills: str = ""
    categories: CategorySet
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_api(self) -> dict:
        data = super().to_api()
        data["categories"] = self.categories.to_api()
        return data


# ── Model replies ───────────────────────────────────────────────────────────

class Ranking(CamelModel):
    model_config = ConfigDict(frozen=True)

    overall_score: Score
    main_category_scores: dict[str, Score] = Field(default_factory=dict)
    sub_category_scores: dict[str, Score] = Field(default_factory=dict)
    summary: str
    red_flags: list[str] = Field(default_factory=list)
    interview_questions: list[str] = Field(
        min_length=INTERVIEW_QUESTION_COUNT, max_length=INTERVIEW_QUESTION_COUNT,
    )
    ai_feedback: str = ""


class Recalibration(CamelModel):
    recalibrated_score: Score
    score_adjustment: Adjustment
    adjustment_reason: str = ""
    overall_assessment: str = ""


# ── Candidates & progress ───────────────────────────────────────────────────

class Candidate(CamelModel):
    id: str
    filename: str
    cv_text: str = ""
    ranking: Ranking
    reviewed: bool = False
    interview_notes: str = ""
    recalibration: Optional[Recalibration] = Field(default=None, alias="recalibratedScore")

    @property
    def overall_score(self) -> int | float:
        return self.ranking.overall_score

    def summary_row(self) -> dict:
        return {
            "id": self.id,
            "filename": self.filename,
            "overallScore": self.overall_score,
            "reviewed": self.reviewed,
        }

    def list_row(self) -> dict:
        return {
            "id": self.id,
            "filename": self.filename,
            "overallScore": self.overall_score,
            "mainScores": self.ranking.main_category_scores,
            "subScores": self.ranking.sub_category_scores,
            "reviewed": self.reviewed,
        }

    def detail(self) -> dict:
        ranking = self.ranking
        return {
            **self.list_row(),
            "summary": ranking.summary,
            "redFlags": ranking.red_flags,
            "interviewQuestions": ranking.interview_questions,
            "aiFeedback": ranking.ai_feedback,
            "interviewNotes": self.interview_notes,
            "recalibratedScore": self.recalibration.to_api() if self.recalibration else None,
        }


class ProcessingProgress(CamelModel):
    current: int = 0
    total: int = 0
    current_name: str = ""
    status: ProgressStatus = "idle"


# ── Request bodies ──────────────────────────────────────────────────────────

class SaveRoleRequest(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    required_skills: str = ""


class ConfirmRoleRequest(CamelModel):
    main_categories: list[MainCategory]
    sub_categories: list[SubCategory] = Field(default_factory=list)


class NotesRequest(CamelModel):
    notes: str = ""
