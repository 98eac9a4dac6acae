"""
Session models for the Interview Grader platform.

This module defines the submission handed to the engine by the HTTP and CLI
layers, the per-answer score produced by the evaluator, and the final session
record that is persisted. Models serialise with camelCase field names, which
is the stable contract consumed by the admin dashboard.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from interview_grader.models.rubric import Part


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenCamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class SessionStatus(str, Enum):
    """Terminal status of a submitted session."""
    COMPLETED = "completed"
    COMPLETED_WITH_VIOLATIONS = "completed_with_violations"
    TERMINATED = "terminated"


class StrongerArea(str, Enum):
    THEORY = "Theory"
    CODING = "Coding"
    BALANCED = "Balanced"


class CandidateInfo(_CamelModel):
    """Candidate details as entered on the registration screen."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    name: Optional[str] = None
    email: Optional[str] = None
    position: Optional[str] = None


class ViolationRecord(_CamelModel):
    """An integrity infraction reported by the proctoring client."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    type: str = "unknown"
    timestamp: Optional[str] = None
    details: Optional[str] = None


class AnswerInput(_FrozenCamelModel):
    """
    A candidate's raw answer to one question.

    Attributes:
        question_id: Identifier used to look the rubric up in the catalog
        raw_text: The answer exactly as submitted
        question_text: Question text as served; only used when the id is unknown
        part: Declared part tag as served; only used when the id is unknown
    """
    question_id: str = ""
    raw_text: str = ""
    question_text: Optional[str] = None
    part: Optional[Part] = None

    @field_validator("raw_text", mode="before")
    @classmethod
    def _text_or_empty(cls, value):
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("question_id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        return "" if value is None else str(value)

    @field_validator("part", mode="before")
    @classmethod
    def _resolve_part(cls, value):
        return Part.from_tag(value)


class AnswerScore(_FrozenCamelModel):
    """Graded, explainable score for one answer."""
    question_id: str
    question_text: str = ""
    topic: str = "General"
    score: int
    max_score: int
    percentage: int
    keyword_coverage: float
    technical_depth: int = 0
    word_count: int = 0
    matched_keywords: List[str] = Field(default_factory=list)
    missing_keywords: List[str] = Field(default_factory=list)
    feedback: str
    detailed_analysis: str
    part: Part
    category: str
    scorable: bool = True


class PenaltySet(_FrozenCamelModel):
    violation_penalty: int = 0
    tab_switch_penalty: int = 0
    termination_penalty: int = 0
    total_penalty: int = 0


class PartSummary(_FrozenCamelModel):
    """
    Rollup of every answer in one part.

    ``score`` and ``percentage`` carry the part's share of the integrity
    penalty once the assembler has applied it; ``average_percentage`` is the
    plain mean of the answer percentages and is never penalised.
    """
    score: float = 0
    max_score: int = 0
    percentage: int = 0
    count: int = 0
    average_percentage: int = 0
    avg_per_question: int = 0


class PartComparison(_FrozenCamelModel):
    stronger_area: StrongerArea
    theory_strength: str
    coding_strength: str
    overall_assessment: str


def _coerce_count(value) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, count)


class SessionSubmission(_FrozenCamelModel):
    """
    Everything the client submits at the end of a session.

    Integrity fields are lenient: missing or malformed values fall back to
    empty/zero defaults instead of failing validation.
    """
    candidate_info: CandidateInfo = Field(default_factory=CandidateInfo)
    answers: List[AnswerInput] = Field(default_factory=list)
    violations: List[ViolationRecord] = Field(default_factory=list)
    tab_switch_count: int = 0
    duration: Optional[Union[int, float, str]] = None
    terminated: bool = False

    @field_validator("candidate_info", mode="before")
    @classmethod
    def _candidate_or_empty(cls, value):
        return value if isinstance(value, (dict, CandidateInfo)) else {}

    @field_validator("violations", mode="before")
    @classmethod
    def _violation_list(cls, value):
        if not isinstance(value, (list, tuple)):
            return []
        records = []
        for item in value:
            if isinstance(item, (dict, ViolationRecord)):
                records.append(item)
            elif item is not None:
                records.append({"type": str(item)})
        return records

    @field_validator("tab_switch_count", mode="before")
    @classmethod
    def _tab_switch_count(cls, value):
        return _coerce_count(value)

    @field_validator("terminated", mode="before")
    @classmethod
    def _terminated_flag(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes")
        return bool(value)

    @field_validator("duration", mode="before")
    @classmethod
    def _duration_or_none(cls, value):
        return value if isinstance(value, (int, float, str)) else None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SessionSubmission":
        """
        Build a submission from the dashboard's submit payload.

        The dashboard sends the served ``questions`` and a parallel ``answers``
        collection, either a list aligned by index or a mapping keyed by index
        or question id.

        Args:
            payload: Decoded JSON body of the submit request

        Returns:
            A validated SessionSubmission
        """
        if "questions" not in payload:
            return cls.model_validate(payload)

        questions = payload.get("questions") or []
        raw_answers = payload.get("answers") or []

        answers = []
        for index, question in enumerate(questions):
            if not isinstance(question, dict):
                question = {"id": str(question)}
            question_id = str(question.get("id") or "")
            if isinstance(raw_answers, dict):
                text = raw_answers.get(str(index), raw_answers.get(question_id, ""))
            elif index < len(raw_answers):
                text = raw_answers[index]
            else:
                text = ""
            answers.append(AnswerInput(
                question_id=question_id,
                raw_text=text,
                question_text=question.get("text") or question.get("question"),
                part=question.get("part") or question.get("type"),
            ))

        return cls(
            candidate_info=payload.get("candidateInfo"),
            answers=answers,
            violations=payload.get("violations"),
            tab_switch_count=payload.get("tabSwitchCount"),
            duration=payload.get("duration"),
            terminated=payload.get("terminated"),
        )


class SessionResult(_FrozenCamelModel):
    """The final, write-once interview record."""
    id: str
    timestamp: str
    submission: SessionSubmission
    per_question: List[AnswerScore] = Field(default_factory=list)
    category_scores: Dict[str, int] = Field(default_factory=dict)
    part_scores: Dict[Part, PartSummary] = Field(default_factory=dict)
    total_score: int = 0
    max_possible_score: int = 0
    percentage: int = 0
    penalties: PenaltySet = Field(default_factory=PenaltySet)
    status: SessionStatus = SessionStatus.COMPLETED
    comparison: Optional[PartComparison] = None

    def part_summary(self, part: Part) -> PartSummary:
        return self.part_scores.get(part, PartSummary())

    def to_record(self) -> Dict[str, Any]:
        """JSON-ready dict using the camelCase storage field names."""
        return self.model_dump(by_alias=True, mode="json")
