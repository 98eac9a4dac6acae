from interview_grader.core.aggregator import aggregate
from interview_grader.models.rubric import Part
from interview_grader.models.session import AnswerScore


def _score(question_id, part, category, score, max_score=10):
    return AnswerScore(
        question_id=question_id,
        score=score,
        max_score=max_score,
        percentage=round(score / max_score * 100),
        keyword_coverage=0,
        feedback="",
        detailed_analysis="",
        part=part,
        category=category,
    )


def test_part_rollups():
    aggregation = aggregate([
        _score("T1", Part.THEORY, "Concurrency", 6),
        _score("T2", Part.THEORY, "Frameworks", 9),
        _score("C1", Part.CODING, "Coding", 5),
    ])

    theory = aggregation.part_scores[Part.THEORY]
    assert theory.score == 15
    assert theory.max_score == 20
    assert theory.percentage == 75
    assert theory.count == 2
    assert theory.average_percentage == 75
    assert theory.avg_per_question == 8

    coding = aggregation.part_scores[Part.CODING]
    assert coding.score == 5
    assert coding.percentage == 50
    assert coding.count == 1

    assert aggregation.total_score == 20
    assert aggregation.max_possible_score == 30
    assert aggregation.parts_with_answers() == [Part.THEORY, Part.CODING]


def test_category_means_only_cover_answered_categories():
    aggregation = aggregate([
        _score("T1", Part.THEORY, "Concurrency", 6),
        _score("T2", Part.THEORY, "Concurrency", 7),
        _score("C1", Part.CODING, "Coding", 10),
    ])

    # (60 + 70) / 2 = 65
    assert aggregation.category_scores == {"Concurrency": 65, "Coding": 100}
    assert list(aggregation.category_scores) == ["Concurrency", "Coding"]


def test_means_round_half_up():
    aggregation = aggregate([
        _score("T1", Part.THEORY, "General", 5),
        _score("T2", Part.THEORY, "General", 2),
    ])

    # (50 + 20) / 2 = 35 and 7 / 2 = 3.5 -> 4
    assert aggregation.category_scores["General"] == 35
    assert aggregation.part_scores[Part.THEORY].avg_per_question == 4


def test_empty_session_reports_both_parts():
    aggregation = aggregate([])

    assert set(aggregation.part_scores) == {Part.THEORY, Part.CODING}
    assert aggregation.part_scores[Part.THEORY].count == 0
    assert aggregation.part_scores[Part.CODING].percentage == 0
    assert aggregation.category_scores == {}
    assert aggregation.total_score == 0
    assert aggregation.max_possible_score == 0
    assert aggregation.parts_with_answers() == []
