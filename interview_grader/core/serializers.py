"""
JSON views of session results.

``to_submit_response`` is the body returned to the candidate dashboard right
after submission; ``to_admin_summary`` is one row of the admin interview
list. Both keep the field names the dashboard already consumes.
"""
from typing import Any, Dict, Union

from interview_grader.models.rubric import Part
from interview_grader.models.session import AnswerScore, PartSummary, SessionResult
from interview_grader.utils.constants import DISPLAY_QUESTION_LENGTH
from interview_grader.utils.math_utils import round_half_up

SUBMITTED_MESSAGE = "Java Interview scored successfully"
TERMINATED_MESSAGE = "Java Interview terminated and scored"


def _part_results(summary: PartSummary) -> Dict[str, Any]:
    return {
        "score": summary.score,
        "maxScore": summary.max_score,
        "percentage": summary.percentage,
        "questionsCount": summary.count,
        "avgPerQuestion": summary.avg_per_question,
    }


def _feedback_entry(score: AnswerScore) -> Dict[str, Any]:
    return {
        "question": score.question_text[:DISPLAY_QUESTION_LENGTH] + "...",
        "part": score.part.letter,
        "topic": score.topic,
        "category": score.category,
        "score": f"{score.score}/{score.max_score}",
        "feedback": score.feedback,
        "keywordCoverage": f"{round_half_up(score.keyword_coverage)}%",
    }


def to_submit_response(result: SessionResult) -> Dict[str, Any]:
    """
    Build the submit endpoint's response body.

    Args:
        result: The assembled session result

    Returns:
        JSON-ready dict
    """
    submission = result.submission
    theory = result.part_summary(Part.THEORY)
    coding = result.part_summary(Part.CODING)
    comparison = result.comparison

    return {
        "message": TERMINATED_MESSAGE if submission.terminated else SUBMITTED_MESSAGE,
        "interviewId": result.id,
        "score": result.total_score,
        "maxScore": result.max_possible_score,
        "percentage": result.percentage,
        "partAScore": theory.percentage,
        "partBScore": coding.percentage,
        "theoryScore": theory.average_percentage,
        "codingScore": coding.average_percentage,
        "partAResults": _part_results(theory),
        "partBResults": _part_results(coding),
        "categoryScores": dict(result.category_scores),
        "candidateInfo": submission.candidate_info.model_dump(mode="json", exclude_none=True),
        "violations": [v.model_dump(mode="json", exclude_none=True) for v in submission.violations],
        "duration": submission.duration,
        "tabSwitchCount": submission.tab_switch_count,
        "terminated": submission.terminated,
        "interviewStatus": result.status.value,
        "status": result.status.value,
        "penalties": result.penalties.model_dump(by_alias=True),
        "detailedFeedback": [_feedback_entry(score) for score in result.per_question],
        "partSummary": comparison.model_dump(by_alias=True, mode="json") if comparison else None,
    }


def to_admin_summary(record: Union[SessionResult, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Build one admin list row from a stored interview record.

    Accepts either a SessionResult or the camelCase dict a store returns.
    """
    if isinstance(record, SessionResult):
        record = record.to_record()

    submission = record.get("submission") or {}
    candidate = submission.get("candidateInfo") or {}
    part_scores = record.get("partScores") or {}
    theory = part_scores.get(Part.THEORY.value) or {}
    coding = part_scores.get(Part.CODING.value) or {}
    answers = submission.get("answers") or []
    penalties = record.get("penalties") or {}

    return {
        "id": record.get("id"),
        "timestamp": record.get("timestamp"),
        "candidateName": candidate.get("name") or "Unknown",
        "email": candidate.get("email") or "N/A",
        "position": candidate.get("position") or "N/A",
        "score": f"{record.get('totalScore', 0)}/{record.get('maxPossibleScore', 0)} ({record.get('percentage', 0)}%)",
        "partAScore": theory.get("percentage", 0),
        "partBScore": coding.get("percentage", 0),
        "partAQuestions": theory.get("count", 0),
        "partBQuestions": coding.get("count", 0),
        "questionsAnswered": sum(1 for a in answers if (a.get("rawText") or "").strip()),
        "totalQuestions": len(answers),
        "violations": len(submission.get("violations") or []),
        "tabSwitches": submission.get("tabSwitchCount", 0),
        "terminated": bool(submission.get("terminated", False)),
        "status": record.get("status", "completed"),
        "duration": submission.get("duration"),
        "penalties": penalties.get("totalPenalty", 0),
    }
