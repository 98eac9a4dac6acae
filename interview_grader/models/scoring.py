"""
Scoring profile definitions.

A scoring profile holds the fixed tables the evaluator applies to one part:
length tiers, the technical vocabulary, the depth multiplier and cap, and the
component weights. Profiles are plain configuration; the evaluator never
derives thresholds on its own.
"""
import math
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LengthTier(BaseModel):
    """One step of the length table: answers of at least ``min_chars`` earn ``points``."""
    model_config = ConfigDict(frozen=True)

    min_chars: int = Field(..., ge=0)
    points: float = Field(..., ge=0)


class StructureMarker(BaseModel):
    """A group of marker phrases worth a fixed bonus when any of them appears."""
    model_config = ConfigDict(frozen=True)

    name: str
    phrases: Tuple[str, ...]
    bonus: float = Field(..., ge=0)


class ComponentWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: float
    length: float
    depth: float
    structure: float

    @model_validator(mode="after")
    def _sum_to_one(self):
        total = self.keyword + self.length + self.depth + self.structure
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Component weights must sum to 1.0, got {total}")
        return self


class ScoringProfile(BaseModel):
    """
    Fixed scoring tables for one part.

    Attributes:
        length_tiers: Step table ordered from the longest threshold down
        length_floor: Points for answers shorter than every tier
        vocabulary: Domain terms counted for technical depth
        depth_multiplier: Points per vocabulary hit
        depth_cap: Ceiling for the depth component
        weights: Weights of the four components
        structure_markers: Marker groups shared with the other part
        default_coverage: Coverage assumed when a rubric has no keywords
    """
    model_config = ConfigDict(frozen=True)

    length_tiers: Tuple[LengthTier, ...]
    length_floor: float
    vocabulary: Tuple[str, ...]
    depth_multiplier: float
    depth_cap: float
    weights: ComponentWeights
    structure_markers: Tuple[StructureMarker, ...]
    default_coverage: float = 50.0

    @model_validator(mode="after")
    def _tiers_descending(self):
        thresholds = [tier.min_chars for tier in self.length_tiers]
        if thresholds != sorted(thresholds, reverse=True):
            raise ValueError("Length tiers must be ordered from the highest threshold down")
        return self

    def length_points(self, length: int) -> float:
        for tier in self.length_tiers:
            if length >= tier.min_chars:
                return tier.points
        return self.length_floor

    @property
    def max_length_points(self) -> float:
        return max([tier.points for tier in self.length_tiers] + [self.length_floor])

    @property
    def max_structure_bonus(self) -> float:
        return sum(marker.bonus for marker in self.structure_markers)

    @property
    def composite_ceiling(self) -> float:
        """Highest weighted composite an answer can reach under this profile."""
        return (
            100 * self.weights.keyword
            + self.max_length_points * self.weights.length
            + self.depth_cap * self.weights.depth
            + self.max_structure_bonus * self.weights.structure
        )
