"""
Rubric catalog for the Interview Grader platform.

The catalog is the immutable question bank: it is loaded once from YAML,
validated, and then injected wherever rubrics are needed. Configuration
errors (unknown part tags, non-positive max scores, duplicate ids) are raised
here at load time so that scoring never has to deal with them.
"""
import logging
import os
import random
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml
from pydantic import ValidationError

from interview_grader.models.rubric import Part, Rubric
from interview_grader.utils.constants import PART_DESCRIPTIONS, PART_TITLES, PART_TOPICS

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_BANK = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "question_bank.yaml")


class CatalogValidationError(ValueError):
    """Raised when the question bank contains an invalid rubric."""


class RubricCatalog:
    """Read-only lookup of rubrics by question id."""

    def __init__(self, rubrics: Iterable[Rubric]):
        by_id: Dict[str, Rubric] = {}
        for rubric in rubrics:
            if rubric.id in by_id:
                raise CatalogValidationError(f"Duplicate question id in catalog: {rubric.id}")
            by_id[rubric.id] = rubric
        self._rubrics = by_id

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "RubricCatalog":
        """
        Build a catalog from raw question records.

        Records use the question bank field names: ``question`` (or ``text``),
        ``expectedAnswer``/``expectedSolution`` (or ``reference_answer``),
        ``maxScore`` (or ``max_score``), ``starterCode``, and a ``part`` or
        ``type`` tag.

        Raises:
            CatalogValidationError: If any record is not a valid rubric
        """
        rubrics = []
        for index, record in enumerate(records):
            try:
                rubrics.append(Rubric(**_normalize_record(record)))
            except (ValidationError, TypeError) as e:
                record_id = record.get("id", f"#{index}") if isinstance(record, Mapping) else f"#{index}"
                raise CatalogValidationError(f"Invalid rubric {record_id}: {e}") from e
        return cls(rubrics)

    @classmethod
    def from_yaml(cls, path: str) -> "RubricCatalog":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        records = []
        if isinstance(data, list):
            records = data
        else:
            for section in ("theory", "coding", "questions"):
                records.extend(data.get(section) or [])

        catalog = cls.from_records(records)
        logger.info(
            f"Loaded question bank from {path}: {len(catalog.by_part(Part.THEORY))} theory, "
            f"{len(catalog.by_part(Part.CODING))} coding questions"
        )
        return catalog

    @classmethod
    def default(cls, path: Optional[str] = None) -> "RubricCatalog":
        """Load the configured question bank, or the one shipped with the package."""
        return cls.from_yaml(path or DEFAULT_QUESTION_BANK)

    def get_rubric(self, question_id: Optional[str]) -> Optional[Rubric]:
        if not question_id:
            return None
        return self._rubrics.get(question_id)

    def all_rubrics(self) -> List[Rubric]:
        return list(self._rubrics.values())

    def by_part(self, part: Part) -> List[Rubric]:
        return [rubric for rubric in self._rubrics.values() if rubric.part is part]

    def __len__(self):
        return len(self._rubrics)

    def __contains__(self, question_id):
        return question_id in self._rubrics

    def select_questions(
        self,
        theory_count: int,
        coding_count: int,
        rng: Optional[random.Random] = None,
    ) -> Dict[str, Any]:
        """
        Pick a structured question set: a shuffled slice of each part.

        Args:
            theory_count: Number of Part A questions to serve
            coding_count: Number of Part B questions to serve
            rng: Random source; pass a seeded ``random.Random`` for reproducible sets

        Returns:
            Dict with ``partA``, ``partB``, ``totalQuestions`` and ``structure``
        """
        rng = rng or random.Random()
        selected = {}
        for part, count in ((Part.THEORY, theory_count), (Part.CODING, coding_count)):
            pool = self.by_part(part)
            rng.shuffle(pool)
            selected[part] = [
                _serve_question(rubric, part, position)
                for position, rubric in enumerate(pool[:max(0, count)], 1)
            ]

        return {
            "partA": selected[Part.THEORY],
            "partB": selected[Part.CODING],
            "totalQuestions": len(selected[Part.THEORY]) + len(selected[Part.CODING]),
            "structure": {
                f"part{part.letter}": {
                    "title": f"Part {part.letter}: {PART_TITLES[part]}",
                    "count": len(selected[part]),
                    "description": PART_DESCRIPTIONS[part],
                    "topics": PART_TOPICS[part],
                }
                for part in (Part.THEORY, Part.CODING)
            },
        }


def _normalize_record(record: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(record, Mapping):
        raise TypeError(f"question record must be a mapping, got {type(record).__name__}")
    return {
        "id": record.get("id"),
        "text": record.get("text") or record.get("question"),
        "part": record.get("part") or record.get("type"),
        "difficulty": record.get("difficulty", "medium"),
        "topic": record.get("topic", "General"),
        "keywords": record.get("keywords") or [],
        "reference_answer": (
            record.get("reference_answer")
            or record.get("expectedAnswer")
            or record.get("expectedSolution")
            or ""
        ),
        "max_score": record.get("max_score", record.get("maxScore", 10)),
        "language": record.get("language"),
        "starter_code": record.get("starter_code") or record.get("starterCode"),
    }


def _serve_question(rubric: Rubric, part: Part, position: int) -> Dict[str, Any]:
    served = {
        "id": rubric.id,
        "label": f"{part.letter}{position}",
        "partNumber": position,
        "part": part.letter,
        "partTitle": PART_TITLES[part],
        "text": rubric.text,
        "difficulty": rubric.difficulty,
        "topic": rubric.topic,
        "type": part.value.lower(),
        "maxScore": rubric.max_score,
        "keywords": list(rubric.keywords),
        "expectedAnswer": rubric.reference_answer,
    }
    if part is Part.CODING:
        served["language"] = rubric.language or "java"
        served["starterCode"] = rubric.starter_code
    return served
