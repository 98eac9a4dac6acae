"""Data models for rubrics, scoring profiles and interview sessions."""
from interview_grader.models.rubric import Part, Rubric
from interview_grader.models.session import (
    AnswerInput,
    AnswerScore,
    CandidateInfo,
    PartComparison,
    PartSummary,
    PenaltySet,
    SessionResult,
    SessionStatus,
    SessionSubmission,
    StrongerArea,
    ViolationRecord,
)
