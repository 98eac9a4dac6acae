"""Aggregate statistics over stored interview records."""
from typing import Any, Callable, Dict, Iterable, List, Optional

from interview_grader.core.catalog import RubricCatalog
from interview_grader.models.rubric import Part
from interview_grader.models.session import SessionStatus
from interview_grader.utils.math_utils import round_half_up


def _part(record: Dict[str, Any], part: Part) -> Dict[str, Any]:
    return (record.get("partScores") or {}).get(part.value) or {}


def _submission(record: Dict[str, Any]) -> Dict[str, Any]:
    return record.get("submission") or {}


def _mean(records: List[Dict[str, Any]], value: Callable[[Dict[str, Any]], float]) -> float:
    if not records:
        return 0
    return sum(value(record) for record in records) / len(records)


def compute_statistics(
    records: Iterable[Dict[str, Any]],
    catalog: Optional[RubricCatalog] = None,
) -> Dict[str, Any]:
    """
    Summarise stored interviews for the admin dashboard.

    Score averages are whole percentages; the violation and tab-switch
    averages keep one decimal.

    Args:
        records: Stored interview records, as returned by a result store
        catalog: Question bank used for the pool sizes

    Returns:
        JSON-ready statistics dict
    """
    records = list(records)
    theory_pool = len(catalog.by_part(Part.THEORY)) if catalog else 0
    coding_pool = len(catalog.by_part(Part.CODING)) if catalog else 0

    def one_decimal(value: float) -> float:
        return round_half_up(value * 10) / 10

    return {
        "totalInterviews": len(records),
        "completedInterviews": sum(1 for r in records if r.get("status") == SessionStatus.COMPLETED.value),
        "terminatedInterviews": sum(1 for r in records if _submission(r).get("terminated")),
        "interviewsWithViolations": sum(1 for r in records if _submission(r).get("violations")),
        "averageScore": round_half_up(_mean(records, lambda r: r.get("percentage") or 0)),
        "averagePartAScore": round_half_up(_mean(records, lambda r: _part(r, Part.THEORY).get("percentage") or 0)),
        "averagePartBScore": round_half_up(_mean(records, lambda r: _part(r, Part.CODING).get("percentage") or 0)),
        "averageTheoryScore": round_half_up(
            _mean(records, lambda r: _part(r, Part.THEORY).get("averagePercentage") or 0)
        ),
        "averageCodingScore": round_half_up(
            _mean(records, lambda r: _part(r, Part.CODING).get("averagePercentage") or 0)
        ),
        "averageViolations": one_decimal(_mean(records, lambda r: len(_submission(r).get("violations") or []))),
        "averageTabSwitches": one_decimal(_mean(records, lambda r: _submission(r).get("tabSwitchCount") or 0)),
        "totalTheoryQuestions": theory_pool,
        "totalCodingQuestions": coding_pool,
        "totalQuestionPool": theory_pool + coding_pool,
    }
