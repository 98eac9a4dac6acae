"""
Answer evaluation for the Interview Grader platform.

This module turns one (rubric, raw answer) pair into an explainable
``AnswerScore``. Scoring is a fixed lexical heuristic built from four
components:

- keyword coverage: share of the rubric keywords found in the answer
- length: a step table over the answer's character length
- technical depth: hits against a part-specific domain vocabulary
- structure: bonuses for examples, enumeration and causal reasoning

The components are combined with part-specific weights and scaled into the
rubric's ``max_score``. Evaluation is pure and deterministic.
"""
import logging
from typing import Dict, List, Optional, Tuple

from interview_grader.core.classifier import Classifier
from interview_grader.models.rubric import Part, Rubric
from interview_grader.models.scoring import ScoringProfile
from interview_grader.models.session import AnswerInput, AnswerScore
from interview_grader.utils.constants import (
    DEFAULT_MAX_SCORE,
    NO_ANSWER_ANALYSIS,
    NO_ANSWER_FEEDBACK,
    SCORING_PROFILES,
    UNSCORABLE_ANALYSIS,
    UNSCORABLE_FEEDBACK,
)
from interview_grader.utils.math_utils import percentage, round_half_up

logger = logging.getLogger(__name__)


class AnswerEvaluator:
    """
    Scores candidate answers against rubrics.

    Attributes:
        profiles: Scoring tables keyed by part
        classifier: Resolves the reporting category of each question
    """

    def __init__(
        self,
        profiles: Optional[Dict[Part, ScoringProfile]] = None,
        classifier: Optional[Classifier] = None,
    ):
        self.profiles = profiles or SCORING_PROFILES
        self.classifier = classifier or Classifier()

    def evaluate(self, rubric: Rubric, answer_text: Optional[str]) -> AnswerScore:
        """
        Score a single answer.

        Args:
            rubric: Grading rubric of the question
            answer_text: The candidate's raw answer

        Returns:
            The graded AnswerScore
        """
        part, category = self.classifier.classify(rubric)
        base = {
            "question_id": rubric.id,
            "question_text": rubric.text,
            "topic": rubric.topic,
            "max_score": rubric.max_score,
            "part": part,
            "category": category,
        }

        if not answer_text or not answer_text.strip():
            return AnswerScore(
                score=0,
                percentage=0,
                keyword_coverage=0,
                feedback=NO_ANSWER_FEEDBACK,
                detailed_analysis=NO_ANSWER_ANALYSIS,
                missing_keywords=list(rubric.keywords),
                **base
            )

        profile = self.profiles[part]
        answer = answer_text.lower().strip()

        matched, missing = self._match_keywords(answer, rubric.keywords)
        if rubric.keywords:
            coverage = len(matched) / len(rubric.keywords) * 100
        else:
            coverage = profile.default_coverage

        length_points = profile.length_points(len(answer))
        technical_depth = sum(1 for term in profile.vocabulary if term in answer)
        depth_points = min(technical_depth * profile.depth_multiplier, profile.depth_cap)
        structure_points = self._structure_bonus(answer, profile)
        word_count = len([word for word in answer.split() if len(word) > 2])

        weights = profile.weights
        composite = (
            coverage * weights.keyword
            + length_points * weights.length
            + depth_points * weights.depth
            + structure_points * weights.structure
        )
        score = self._normalize(composite, profile, rubric.max_score)

        logger.debug(
            f"Scored {rubric.id}: coverage={coverage:.1f} length={length_points} "
            f"depth={depth_points} structure={structure_points} composite={composite:.2f} score={score}"
        )

        feedback, analysis = self._compose_feedback(
            part, coverage, len(matched), len(rubric.keywords), word_count, technical_depth
        )

        return AnswerScore(
            score=score,
            percentage=percentage(score, rubric.max_score),
            keyword_coverage=round(coverage, 2),
            technical_depth=technical_depth,
            word_count=word_count,
            matched_keywords=matched,
            missing_keywords=missing,
            feedback=feedback,
            detailed_analysis=analysis,
            **base
        )

    def evaluate_unscorable(self, answer: AnswerInput, max_score: int = DEFAULT_MAX_SCORE) -> AnswerScore:
        """
        Produce the explicit zero score for a question missing from the catalog.

        The question keeps its ``max_score`` so the session total is not
        silently shrunk by the failed lookup.
        """
        part, category = self.classifier.classify_text(answer.question_text, answer.part)
        return AnswerScore(
            question_id=answer.question_id,
            question_text=answer.question_text or "",
            topic="Unknown",
            score=0,
            max_score=max_score,
            percentage=0,
            keyword_coverage=0,
            word_count=len([word for word in answer.raw_text.split() if len(word) > 2]),
            feedback=UNSCORABLE_FEEDBACK,
            detailed_analysis=UNSCORABLE_ANALYSIS.format(question_id=answer.question_id or "<missing>"),
            part=part,
            category=category,
            scorable=False,
        )

    @staticmethod
    def _match_keywords(answer: str, keywords: List[str]) -> Tuple[List[str], List[str]]:
        matched, missing = [], []
        for keyword in keywords:
            if keyword.lower() in answer:
                matched.append(keyword)
            else:
                missing.append(keyword)
        return matched, missing

    @staticmethod
    def _structure_bonus(answer: str, profile: ScoringProfile) -> float:
        bonus = 0
        for marker in profile.structure_markers:
            if any(phrase in answer for phrase in marker.phrases):
                bonus += marker.bonus
        return bonus

    @staticmethod
    def _normalize(composite: float, profile: ScoringProfile, max_score: int) -> int:
        """Scale the composite against the part's attainable ceiling into [0, max_score]."""
        scaled = round_half_up(composite / profile.composite_ceiling * max_score)
        return max(0, min(scaled, max_score))

    @staticmethod
    def _compose_feedback(
        part: Part,
        coverage: float,
        matches: int,
        total_keywords: int,
        word_count: int,
        technical_depth: int,
    ) -> Tuple[str, str]:
        is_theory = part is Part.THEORY
        label = part.label
        feedback = []
        analysis = []

        if coverage >= 80:
            feedback.append(f"Excellent {'conceptual' if is_theory else 'technical'} coverage")
            analysis.append(f"Strong {label} understanding ({matches}/{total_keywords} key concepts)")
        elif coverage >= 60:
            feedback.append(f"Good {'theoretical' if is_theory else 'implementation'} knowledge")
            analysis.append(f"Solid {label} grasp ({matches}/{total_keywords} key concepts)")
        elif coverage >= 40:
            feedback.append(f"Basic {'conceptual' if is_theory else 'coding'} understanding")
            analysis.append(f"Some {label} knowledge gaps ({matches}/{total_keywords} concepts found)")
        else:
            feedback.append(f"Limited {'theoretical' if is_theory else 'practical'} knowledge")
            analysis.append(f"Significant {label} knowledge gaps (only {matches}/{total_keywords} concepts)")

        if is_theory:
            if word_count >= 40:
                feedback.append("Comprehensive theoretical explanation")
            elif word_count >= 20:
                feedback.append("Adequate theoretical detail")
            else:
                feedback.append("Needs more theoretical depth")
        else:
            if word_count >= 30:
                feedback.append("Well-explained implementation approach")
            elif word_count >= 15:
                feedback.append("Basic implementation understanding")
            else:
                feedback.append("Needs clearer implementation explanation")

        if technical_depth >= 5:
            feedback.append(f"Good {'theoretical' if is_theory else 'technical'} depth")
        elif technical_depth >= 3:
            feedback.append(f"Moderate {'conceptual' if is_theory else 'technical'} content")
        else:
            feedback.append(f"Needs more {'theoretical' if is_theory else 'technical'} detail")

        analysis.append(f"{technical_depth} technical terms across {word_count} substantive words")

        return ", ".join(feedback), ". ".join(analysis)


_default_evaluator = AnswerEvaluator()


def evaluate(rubric: Rubric, answer_text: Optional[str]) -> AnswerScore:
    """Score an answer with the default scoring profiles."""
    return _default_evaluator.evaluate(rubric, answer_text)
