"""
Session integrity rules.

The proctoring client reports violation records, a tab-switch counter and a
termination flag. This module turns them into score penalties and the
session's terminal status. Status is decided once, at submission time:

    terminated flag set            -> terminated
    tab switches >= threshold      -> completed_with_violations
    otherwise                      -> completed
"""
import logging
from typing import Dict, List, Optional, Sequence

from interview_grader.models.rubric import Part
from interview_grader.models.session import PartSummary, PenaltySet, SessionStatus
from interview_grader.utils import constants
from interview_grader.utils.math_utils import percentage

logger = logging.getLogger(__name__)


class IntegrityMonitor:
    """Computes penalties and terminal status from integrity counters."""

    def __init__(
        self,
        violation_penalty: int = constants.VIOLATION_PENALTY_PER_RECORD,
        violation_cap: int = constants.VIOLATION_PENALTY_CAP,
        tab_switch_penalty: int = constants.TAB_SWITCH_PENALTY_PER_SWITCH,
        tab_switch_cap: int = constants.TAB_SWITCH_PENALTY_CAP,
        termination_penalty: int = constants.TERMINATION_PENALTY,
        tab_switch_threshold: int = constants.TAB_SWITCH_VIOLATION_THRESHOLD,
    ):
        self.violation_penalty = violation_penalty
        self.violation_cap = violation_cap
        self.tab_switch_penalty = tab_switch_penalty
        self.tab_switch_cap = tab_switch_cap
        self.termination_penalty = termination_penalty
        self.tab_switch_threshold = tab_switch_threshold

    def compute_penalties(
        self,
        violations: Optional[Sequence] = None,
        tab_switch_count: Optional[int] = 0,
        terminated: bool = False,
    ) -> PenaltySet:
        violation_count = len(violations or [])
        tab_switches = max(0, tab_switch_count or 0)

        violation_penalty = min(violation_count * self.violation_penalty, self.violation_cap)
        tab_switch_penalty = min(tab_switches * self.tab_switch_penalty, self.tab_switch_cap)
        termination_penalty = self.termination_penalty if terminated else 0

        return PenaltySet(
            violation_penalty=violation_penalty,
            tab_switch_penalty=tab_switch_penalty,
            termination_penalty=termination_penalty,
            total_penalty=violation_penalty + tab_switch_penalty + termination_penalty,
        )

    def resolve_status(self, tab_switch_count: Optional[int] = 0, terminated: bool = False) -> SessionStatus:
        if terminated:
            return SessionStatus.TERMINATED
        if (tab_switch_count or 0) >= self.tab_switch_threshold:
            return SessionStatus.COMPLETED_WITH_VIOLATIONS
        return SessionStatus.COMPLETED

    @staticmethod
    def apply_penalty(total_score: float, penalties: PenaltySet) -> float:
        return max(0, total_score - penalties.total_penalty)

    def apply_part_penalties(
        self,
        part_scores: Dict[Part, PartSummary],
        penalties: PenaltySet,
    ) -> Dict[Part, PartSummary]:
        """
        Split the total penalty equally across the parts that have answers.

        With both parts answered each part carries half of the penalty, so the
        part deductions add up to the session deduction. Part scores floor at
        zero independently.
        """
        answered: List[Part] = [part for part, summary in part_scores.items() if summary.count > 0]
        share = penalties.total_penalty / len(answered) if answered else 0

        penalized = {}
        for part, summary in part_scores.items():
            if summary.count == 0:
                penalized[part] = summary
                continue
            score = max(0, summary.score - share)
            penalized[part] = summary.model_copy(update={
                "score": score,
                "percentage": percentage(score, summary.max_score),
            })
        if penalties.total_penalty:
            logger.debug(f"Applied part penalty share of {share} across {len(answered)} part(s)")
        return penalized


_default_monitor = IntegrityMonitor()


def compute_penalties(violations=None, tab_switch_count=0, terminated=False) -> PenaltySet:
    return _default_monitor.compute_penalties(violations, tab_switch_count, terminated)


def resolve_status(tab_switch_count=0, terminated=False) -> SessionStatus:
    return _default_monitor.resolve_status(tab_switch_count, terminated)
