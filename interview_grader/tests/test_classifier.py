import pytest

from interview_grader.core.catalog import RubricCatalog
from interview_grader.core.classifier import CATEGORIES, CategoryRule, Classifier, classify
from interview_grader.models.rubric import Part, Rubric


def _rubric(text, part="A"):
    return Rubric(id="Q", text=text, part=part)


@pytest.mark.parametrize("text, category", [
    ("How does Spring Boot auto-configuration work?", "Frameworks"),
    ("Explain dirty checking in Hibernate.", "Frameworks"),
    ("What is Livelock vs Deadlock?", "Concurrency"),
    ("Difference between synchronized block and StampedLock?", "Concurrency"),
    ("How do you create a custom Spliterator for parallel streams?", "Java 8+"),
    ("Explain Java sealed classes.", "Java 8+"),
    ("Explain Saga pattern in microservices.", "System Design"),
    ("How to design a resilient circuit breaker?", "System Design"),
    ("Implement LRU Cache using LinkedHashMap.", "Coding"),
    ("Print the first ten Fibonacci numbers.", "Coding"),
    ("How do you mock a repository in a unit test?", "Testing & DevOps"),
    ("What are Soft, Weak, and Phantom references in Java?", "General"),
])
def test_category_rules(text, category):
    assert classify(_rubric(text)) == (Part.THEORY, category)


def test_first_matching_rule_wins():
    # Mentions both a framework and threads; Frameworks is checked first
    part, category = classify(_rubric("How does the Spring framework manage thread pools?"))
    assert category == "Frameworks"


def test_part_comes_from_rubric():
    part, _ = classify(_rubric("Implement binary search.", part="coding"))
    assert part is Part.CODING


def test_custom_rule_table():
    classifier = Classifier(rules=(CategoryRule("Databases", ("sql", "index")),), fallback="Other")

    assert classifier.category_for("Explain a covering INDEX") == "Databases"
    assert classifier.category_for("Explain closures") == "Other"
    assert classifier.category_for(None) == "Other"


def test_every_packaged_question_is_classified():
    catalog = RubricCatalog.default()
    for rubric in catalog.all_rubrics():
        part, category = classify(rubric)
        assert part is rubric.part
        assert category in CATEGORIES
