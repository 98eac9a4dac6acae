"""
Session assembly for the Interview Grader platform.

The assembler is the engine's entry point: it takes a ``SessionSubmission``,
scores every answer against the injected catalog, aggregates, applies the
integrity penalties and returns the write-once ``SessionResult``.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from interview_grader.core.aggregator import aggregate
from interview_grader.core.catalog import RubricCatalog
from interview_grader.core.evaluator import AnswerEvaluator
from interview_grader.core.integrity import IntegrityMonitor
from interview_grader.models.rubric import Part
from interview_grader.models.session import (
    PartComparison,
    SessionResult,
    SessionSubmission,
    StrongerArea,
)
from interview_grader.utils.constants import ASSESSMENT_BANDS
from interview_grader.utils.math_utils import percentage

logger = logging.getLogger(__name__)

# Equal part percentages are reported as balanced; neither side claims the stronger area.
BALANCED_PARTS = "Theory and coding performance are evenly matched"

THEORY_STRONGER = "Theory knowledge is your stronger area"
THEORY_WEAKER = "Focus on strengthening theoretical concepts"
CODING_STRONGER = "Coding skills are your stronger area"
CODING_WEAKER = "Practice more coding problems"


def _default_id() -> str:
    return str(uuid.uuid4())


def _default_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def overall_assessment(final_percentage: int) -> str:
    for threshold, message in ASSESSMENT_BANDS:
        if final_percentage >= threshold:
            return message
    return ASSESSMENT_BANDS[-1][1]


def compare_parts(theory_percentage: int, coding_percentage: int, final_percentage: int) -> PartComparison:
    """
    Report which part is the candidate's stronger area.

    Only a strictly higher percentage counts as stronger; equal percentages
    produce the ``BALANCED_PARTS`` message on both sides.
    """
    if theory_percentage > coding_percentage:
        area, theory_msg, coding_msg = StrongerArea.THEORY, THEORY_STRONGER, CODING_WEAKER
    elif coding_percentage > theory_percentage:
        area, theory_msg, coding_msg = StrongerArea.CODING, THEORY_WEAKER, CODING_STRONGER
    else:
        area, theory_msg, coding_msg = StrongerArea.BALANCED, BALANCED_PARTS, BALANCED_PARTS

    return PartComparison(
        stronger_area=area,
        theory_strength=theory_msg,
        coding_strength=coding_msg,
        overall_assessment=overall_assessment(final_percentage),
    )


class SessionAssembler:
    """
    Builds the final session record from a submission.

    Args:
        catalog: Question bank used to look rubrics up by id
        evaluator: Answer evaluator (default scoring profiles when omitted)
        monitor: Integrity monitor (default penalty table when omitted)
        id_factory: Produces the record id
        clock: Produces the record timestamp
    """

    def __init__(
        self,
        catalog: RubricCatalog,
        evaluator: Optional[AnswerEvaluator] = None,
        monitor: Optional[IntegrityMonitor] = None,
        id_factory: Callable[[], str] = _default_id,
        clock: Callable[[], str] = _default_timestamp,
    ):
        self.catalog = catalog
        self.evaluator = evaluator or AnswerEvaluator()
        self.monitor = monitor or IntegrityMonitor()
        self.id_factory = id_factory
        self.clock = clock

    def assemble(self, submission: SessionSubmission) -> SessionResult:
        candidate = submission.candidate_info.name or "Unknown Candidate"
        logger.info(
            f"Evaluating interview for {candidate}: {len(submission.answers)} answers, "
            f"{len(submission.violations)} violations, {submission.tab_switch_count} tab switches"
        )
        if submission.terminated:
            logger.warning(f"Interview for {candidate} was terminated by the proctoring client")

        scores = []
        for answer in submission.answers:
            rubric = self.catalog.get_rubric(answer.question_id)
            if rubric is None:
                logger.warning(f"No rubric for question {answer.question_id!r}; marking it unscorable")
                scores.append(self.evaluator.evaluate_unscorable(answer))
            else:
                scores.append(self.evaluator.evaluate(rubric, answer.raw_text))

        aggregation = aggregate(scores)
        penalties = self.monitor.compute_penalties(
            submission.violations, submission.tab_switch_count, submission.terminated
        )
        status = self.monitor.resolve_status(submission.tab_switch_count, submission.terminated)

        total_score = self.monitor.apply_penalty(aggregation.total_score, penalties)
        final_percentage = percentage(total_score, aggregation.max_possible_score)
        part_scores = self.monitor.apply_part_penalties(aggregation.part_scores, penalties)

        comparison = compare_parts(
            part_scores[Part.THEORY].percentage,
            part_scores[Part.CODING].percentage,
            final_percentage,
        )

        result = SessionResult(
            id=self.id_factory(),
            timestamp=self.clock(),
            submission=submission,
            per_question=scores,
            category_scores=aggregation.category_scores,
            part_scores=part_scores,
            total_score=total_score,
            max_possible_score=aggregation.max_possible_score,
            percentage=final_percentage,
            penalties=penalties,
            status=status,
            comparison=comparison,
        )

        logger.info(
            f"Scoring complete for {candidate}: {total_score}/{aggregation.max_possible_score} "
            f"({final_percentage}%), status={status.value}, total penalty={penalties.total_penalty}"
        )
        return result
