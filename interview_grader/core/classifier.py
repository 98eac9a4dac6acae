"""
Question classification for reporting.

Every question belongs to exactly one part (taken from its rubric) and one
reporting category. Categories are resolved by an ordered rule table matched
against the lower-cased question text; the first matching rule wins, so the
order of ``CATEGORY_RULES`` is significant.
"""
from typing import Iterable, Optional, Tuple

from interview_grader.models.rubric import Part, Rubric
from interview_grader.utils.constants import FALLBACK_CATEGORY


class CategoryRule:
    """Assigns ``category`` when any of ``substrings`` occurs in the question text."""

    def __init__(self, category: str, substrings: Iterable[str]):
        self.category = category
        self.substrings = tuple(s.lower() for s in substrings)

    def matches(self, text: str) -> bool:
        return any(s in text for s in self.substrings)

    def __repr__(self):
        return f"CategoryRule({self.category!r}, {self.substrings!r})"


CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule("Frameworks", ("spring", "hibernate", "framework")),
    CategoryRule("Concurrency", ("thread", "concurrent", "synchroniz", "deadlock")),
    CategoryRule("Java 8+", ("stream", "lambda", "optional", "sealed")),
    CategoryRule("System Design", ("microservices", "design", "architect", "circuit")),
    CategoryRule("Coding", ("algorithm", "implement", "cache", "fibonacci")),
    CategoryRule("Testing & DevOps", ("test", "ci/cd", "mock")),
)

CATEGORIES = tuple(rule.category for rule in CATEGORY_RULES) + (FALLBACK_CATEGORY,)


class Classifier:
    """Resolves the (part, category) pair for a question."""

    def __init__(self, rules: Tuple[CategoryRule, ...] = CATEGORY_RULES, fallback: str = FALLBACK_CATEGORY):
        self.rules = rules
        self.fallback = fallback

    def category_for(self, text: Optional[str]) -> str:
        lowered = (text or "").lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return rule.category
        return self.fallback

    def classify(self, rubric: Rubric) -> Tuple[Part, str]:
        return rubric.part, self.category_for(rubric.text)

    def classify_text(self, text: Optional[str], part: Optional[Part] = None) -> Tuple[Part, str]:
        """
        Classify a question that has no rubric.

        Unknown questions still need a part so they can be counted; without a
        declared tag they are counted as Theory.
        """
        resolved = Part.from_tag(part, default=Part.THEORY)
        return resolved, self.category_for(text)


_default_classifier = Classifier()


def classify(rubric: Rubric) -> Tuple[Part, str]:
    return _default_classifier.classify(rubric)
