"""Rollups of per-answer scores into part and category summaries."""
from collections import OrderedDict
from typing import Dict, List, Sequence

from interview_grader.models.rubric import Part
from interview_grader.models.session import AnswerScore, PartSummary
from interview_grader.utils.math_utils import percentage, round_half_up


class Aggregation:
    """
    Result of aggregating a session's answer scores.

    Attributes:
        part_scores: Unpenalised totals for every part (always both parts)
        category_scores: Mean answer percentage per category that has answers
        total_score: Sum of all answer scores
        max_possible_score: Sum of all answer max scores
    """

    def __init__(
        self,
        part_scores: Dict[Part, PartSummary],
        category_scores: Dict[str, int],
        total_score: int,
        max_possible_score: int,
    ):
        self.part_scores = part_scores
        self.category_scores = category_scores
        self.total_score = total_score
        self.max_possible_score = max_possible_score

    def parts_with_answers(self) -> List[Part]:
        return [part for part, summary in self.part_scores.items() if summary.count > 0]


def _mean_percentage(values: Sequence[int]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def aggregate(scores: Sequence[AnswerScore]) -> Aggregation:
    """
    Roll answer scores up by part and by category.

    Args:
        scores: Every AnswerScore of the session, in submission order

    Returns:
        The Aggregation for the session
    """
    part_scores = {}
    for part in Part:
        in_part = [s for s in scores if s.part is part]
        part_total = sum(s.score for s in in_part)
        part_max = sum(s.max_score for s in in_part)
        part_scores[part] = PartSummary(
            score=part_total,
            max_score=part_max,
            percentage=percentage(part_total, part_max),
            count=len(in_part),
            average_percentage=_mean_percentage([s.percentage for s in in_part]),
            avg_per_question=round_half_up(part_total / len(in_part)) if in_part else 0,
        )

    by_category: "OrderedDict[str, List[int]]" = OrderedDict()
    for score in scores:
        by_category.setdefault(score.category, []).append(score.percentage)
    category_scores = {
        category: _mean_percentage(values) for category, values in by_category.items()
    }

    return Aggregation(
        part_scores=part_scores,
        category_scores=category_scores,
        total_score=sum(s.score for s in scores),
        max_possible_score=sum(s.max_score for s in scores),
    )
