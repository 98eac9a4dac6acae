"""
Rubric definitions for the Interview Grader platform.

This module defines the grading rubric attached to every question in the
question bank, and the part tag (Theory or Coding) that selects the scoring
track for a question.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Part(str, Enum):
    """Top-level question grouping used for separate scoring tracks."""
    THEORY = "Theory"
    CODING = "Coding"

    @property
    def letter(self) -> str:
        """Legacy part letter used by the dashboard contract (A or B)."""
        return "A" if self is Part.THEORY else "B"

    @property
    def label(self) -> str:
        return f"Part {self.letter} ({self.value})"

    @classmethod
    def from_tag(cls, tag, default: Optional["Part"] = None) -> Optional["Part"]:
        """
        Resolve a declared part tag into a Part.

        Accepts the enum itself, the part letters used by the question bank
        ("A"/"B"), or the question type names ("theory"/"coding").

        Args:
            tag: The declared tag, in any of the accepted spellings
            default: Value returned when the tag is missing or unknown

        Returns:
            The resolved Part, or ``default``
        """
        if isinstance(tag, Part):
            return tag
        if tag is None:
            return default
        normalized = str(tag).strip().lower()
        if normalized in ("a", "theory", "part a"):
            return cls.THEORY
        if normalized in ("b", "coding", "part b"):
            return cls.CODING
        return default


class Rubric(BaseModel):
    """
    Grading rubric for a single question.

    Attributes:
        id: Unique identifier for the question
        text: The question as shown to the candidate
        part: Scoring track for the question
        difficulty: Relative difficulty level (easy, medium, hard)
        topic: Topic the question belongs to in the question bank
        keywords: Ordered, de-duplicated concepts a good answer mentions
        reference_answer: Model answer used by reviewers
        max_score: Points awarded for a perfect answer
        language: Programming language for coding questions
        starter_code: Initial code shown to the candidate for coding questions
    """
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    part: Part
    difficulty: str = "medium"
    topic: str = "General"
    keywords: List[str] = Field(default_factory=list)
    reference_answer: str = ""
    max_score: int = 10
    language: Optional[str] = None
    starter_code: Optional[str] = None

    @field_validator("part", mode="before")
    @classmethod
    def _resolve_part(cls, value):
        part = Part.from_tag(value)
        if part is None:
            raise ValueError(f"Unknown part tag: {value!r}")
        return part

    @field_validator("keywords", mode="before")
    @classmethod
    def _dedupe_keywords(cls, value):
        if value is None:
            return []
        seen = set()
        keywords = []
        for keyword in value:
            keyword = str(keyword).strip()
            if keyword and keyword.lower() not in seen:
                seen.add(keyword.lower())
                keywords.append(keyword)
        return keywords

    @field_validator("max_score")
    @classmethod
    def _positive_max_score(cls, value):
        if value <= 0:
            raise ValueError(f"max_score must be positive, got {value}")
        return value
