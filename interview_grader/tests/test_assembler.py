import unittest
import uuid

import pytest

from conftest import FIXED_ID, FIXED_TIMESTAMP, WORKED_ANSWER
from interview_grader.core.assembler import (
    BALANCED_PARTS,
    SessionAssembler,
    compare_parts,
    overall_assessment,
)
from interview_grader.models.rubric import Part
from interview_grader.models.session import (
    AnswerInput,
    SessionStatus,
    SessionSubmission,
    StrongerArea,
)


def _submission(**overrides):
    data = {
        "answers": [
            AnswerInput(question_id="T1", raw_text=WORKED_ANSWER),
            AnswerInput(question_id="C1", raw_text=""),
        ],
    }
    data.update(overrides)
    return SessionSubmission(**data)


def test_clean_session(assembler):
    result = assembler.assemble(_submission())

    assert result.id == FIXED_ID
    assert result.timestamp == FIXED_TIMESTAMP
    assert [s.question_id for s in result.per_question] == ["T1", "C1"]
    assert result.total_score == 6
    assert result.max_possible_score == 20
    assert result.percentage == 30
    assert result.status is SessionStatus.COMPLETED
    assert result.penalties.total_penalty == 0
    assert result.category_scores == {"Concurrency": 60, "Coding": 0}
    assert result.part_summary(Part.THEORY).percentage == 60
    assert result.part_summary(Part.CODING).percentage == 0
    assert result.comparison.stronger_area is StrongerArea.THEORY


def test_tab_switches_mark_violations(assembler):
    result = assembler.assemble(_submission(tab_switch_count=2, violations=[{"type": "tab_switch"}]))

    assert result.status is SessionStatus.COMPLETED_WITH_VIOLATIONS
    assert result.penalties.violation_penalty == 2
    assert result.penalties.tab_switch_penalty == 6
    assert result.penalties.total_penalty == 8
    # 6 points minus an 8 point penalty floors at zero
    assert result.total_score == 0
    assert result.percentage == 0
    # each answered part carries half of the penalty
    assert result.part_summary(Part.THEORY).score == 2
    assert result.part_summary(Part.THEORY).percentage == 20
    assert result.part_summary(Part.CODING).score == 0


def test_termination_overrides_status(assembler):
    result = assembler.assemble(_submission(tab_switch_count=0, terminated=True))

    assert result.status is SessionStatus.TERMINATED
    assert result.penalties.termination_penalty == 30
    assert result.penalties.total_penalty == 30
    assert result.total_score == 0


def test_unknown_question_is_counted_but_unscorable(assembler):
    submission = _submission(answers=[
        AnswerInput(question_id="T1", raw_text=WORKED_ANSWER),
        AnswerInput(question_id="X99", raw_text="a guess", question_text="Implement a heap", part="B"),
    ])
    result = assembler.assemble(submission)

    unknown = result.per_question[1]
    assert unknown.scorable is False
    assert unknown.part is Part.CODING
    assert result.max_possible_score == 20
    assert result.part_summary(Part.CODING).count == 1


def test_empty_submission(assembler):
    result = assembler.assemble(SessionSubmission())

    assert result.total_score == 0
    assert result.max_possible_score == 0
    assert result.percentage == 0
    assert result.per_question == []
    assert result.comparison.stronger_area is StrongerArea.BALANCED


def test_default_ids_are_unique_uuids(catalog):
    assembler = SessionAssembler(catalog)

    ids = [assembler.assemble(_submission()).id for _ in range(50)]

    assert len(set(ids)) == 50
    assert all(uuid.UUID(record_id).version == 4 for record_id in ids)


class TestPartComparison(unittest.TestCase):

    def test_theory_stronger(self):
        comparison = compare_parts(70, 40, 55)
        self.assertIs(comparison.stronger_area, StrongerArea.THEORY)
        self.assertEqual(comparison.theory_strength, "Theory knowledge is your stronger area")
        self.assertEqual(comparison.coding_strength, "Practice more coding problems")

    def test_coding_stronger(self):
        comparison = compare_parts(40, 70, 55)
        self.assertIs(comparison.stronger_area, StrongerArea.CODING)
        self.assertEqual(comparison.theory_strength, "Focus on strengthening theoretical concepts")
        self.assertEqual(comparison.coding_strength, "Coding skills are your stronger area")

    def test_tie_is_balanced(self):
        comparison = compare_parts(50, 50, 50)
        self.assertIs(comparison.stronger_area, StrongerArea.BALANCED)
        self.assertEqual(comparison.theory_strength, BALANCED_PARTS)
        self.assertEqual(comparison.coding_strength, BALANCED_PARTS)


@pytest.mark.parametrize("final, message", [
    (100, "Excellent Java knowledge"),
    (80, "Excellent Java knowledge"),
    (79, "Good Java understanding with room for improvement"),
    (65, "Good Java understanding with room for improvement"),
    (64, "Needs significant improvement in Java concepts and coding"),
    (0, "Needs significant improvement in Java concepts and coding"),
])
def test_overall_assessment_bands(final, message):
    assert overall_assessment(final) == message
