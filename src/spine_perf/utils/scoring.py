"""Score formulas shared by every category analyzer.

Every category score is a saturating ratio: at or below the ideal value it is
100, above it it falls off as ``ideal / actual``. Penalty multipliers inflate
the "actual" side for the more expensive sub-cases before the ratio is taken.
"""

from collections.abc import Callable, Sequence
from typing import TypeVar

from spine_perf.utils import clamp
from spine_perf.utils.constants import (
    DEFAULT_PERFORMANCE_FACTORS,
    DEFAULT_SCORE_WEIGHTS,
    PerformanceFactors,
    ScoreWeights,
)

T = TypeVar("T")

MAX_SCORE = 100.0


def saturating_score(ideal: float, actual: float) -> float:
    """100 * clamp(ideal / max(actual, ideal), 0, 1)."""
    if ideal <= 0:
        raise ValueError(f"ideal must be positive, got {ideal!r}")
    return MAX_SCORE * clamp(ideal / max(actual, ideal), 0.0, 1.0)


def calculate_bone_score(
    total_bones: int,
    max_depth: int,
    factors: PerformanceFactors = DEFAULT_PERFORMANCE_FACTORS,
) -> float:
    """Penalize bone count above the ideal and depth above the depth factor."""
    count_ratio = saturating_score(factors["ideal_bone_count"], total_bones) / MAX_SCORE
    depth_ratio = saturating_score(factors["bone_depth_factor"], max_depth) / MAX_SCORE
    return MAX_SCORE * count_ratio * depth_ratio


def calculate_mesh_score(
    mesh_count: int,
    total_vertices: float,
    deformed_count: int,
    weighted_count: int,
    factors: PerformanceFactors = DEFAULT_PERFORMANCE_FACTORS,
) -> float:
    """
    Score mesh cost from aggregate counts.

    Deformed and weighted meshes scale the vertex total by their share of
    the active meshes times their penalty factors.
    """
    if mesh_count == 0:
        return MAX_SCORE

    deformed_share = deformed_count / mesh_count
    weighted_share = weighted_count / mesh_count
    cost_multiplier = (
        1.0
        + (factors["mesh_deformed_factor"] - 1.0) * deformed_share
        + (factors["mesh_weighted_factor"] - 1.0) * weighted_share
    )
    return saturating_score(factors["ideal_vertex_count"], total_vertices * cost_multiplier)


def calculate_clipping_score(
    mask_count: int,
    total_vertices: float,
    complex_masks: int,
    factors: PerformanceFactors = DEFAULT_PERFORMANCE_FACTORS,
) -> float:
    """Score clipping by effective mask count and total mask vertices."""
    if mask_count == 0:
        return MAX_SCORE

    effective_masks = mask_count + complex_masks * (factors["complex_mask_factor"] - 1.0)
    mask_ratio = saturating_score(factors["ideal_clipping_mask_count"], effective_masks) / MAX_SCORE
    vertex_ratio = (
        saturating_score(factors["ideal_clipping_vertex_count"], total_vertices) / MAX_SCORE
    )
    return MAX_SCORE * mask_ratio * vertex_ratio


def calculate_blend_mode_score(
    non_normal_count: int,
    additive_count: int,
    factors: PerformanceFactors = DEFAULT_PERFORMANCE_FACTORS,
) -> float:
    """Score non-normal blend modes; additive ones weigh extra."""
    effective = non_normal_count + additive_count * (factors["additive_blend_factor"] - 1.0)
    return saturating_score(factors["ideal_blend_mode_count"], effective)


def constraint_family_weights(
    factors: PerformanceFactors = DEFAULT_PERFORMANCE_FACTORS,
) -> dict[str, float]:
    """Per-family constraint weights keyed by family name."""
    return {
        "ik": factors["ik_weight"],
        "transform": factors["transform_weight"],
        "path": factors["path_weight"],
        "physics": factors["physics_weight"],
    }


def calculate_constraint_score(
    counts: dict[str, int],
    factors: PerformanceFactors = DEFAULT_PERFORMANCE_FACTORS,
) -> float:
    """Score the weighted constraint load (sum of count * family weight)."""
    weights = constraint_family_weights(factors)
    load = sum(counts.get(family, 0) * weight for family, weight in weights.items())
    return saturating_score(factors["ideal_constraint_load"], load)


def calculate_overall_score(
    scores: dict[str, float],
    weights: ScoreWeights = DEFAULT_SCORE_WEIGHTS,
) -> float:
    """Weighted sum of category scores, clamped to [0, 100]."""
    total = sum(scores[category] * weight for category, weight in weights.items())
    return clamp(total, 0.0, MAX_SCORE)


def median_score(scores: Sequence[float]) -> float:
    """
    Element at index ``n // 2`` of the ascending scores.

    For an even count this is the upper-middle value, not the mean of the
    two middle values. An empty sequence scores 100.
    """
    if not scores:
        return MAX_SCORE
    ordered = sorted(scores)
    return ordered[len(ordered) // 2]


def rank_by_score(items: Sequence[T], key: Callable[[T], float]) -> list[T]:
    """Sort descending by score; ties keep their input order."""
    return sorted(items, key=key, reverse=True)
