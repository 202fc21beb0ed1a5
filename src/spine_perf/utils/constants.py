"""Tuning constants and configuration for performance scoring.

The numbers here are policy, not mechanism: every analyzer accepts overrides,
and ``resolve_config`` merges partial overrides onto these defaults.
"""

import math
from typing import TypedDict


class PerformanceFactors(TypedDict):
    """Ideal values and penalty multipliers used by the category scores."""

    ideal_bone_count: int
    bone_depth_factor: int
    ideal_vertex_count: int
    mesh_deformed_factor: float
    mesh_weighted_factor: float
    high_vertex_mesh_threshold: int
    complex_mesh_vertex_threshold: int
    ideal_clipping_mask_count: int
    ideal_clipping_vertex_count: int
    complex_mask_vertex_threshold: int
    complex_mask_factor: float
    ideal_blend_mode_count: int
    additive_blend_factor: float
    ideal_constraint_load: float
    ik_weight: float
    transform_weight: float
    path_weight: float
    physics_weight: float


class ScoreWeights(TypedDict):
    """Share of each category in the overall animation score."""

    skeleton: float
    mesh: float
    clipping: float
    blend_mode: float
    constraint: float


class AnalysisThresholds(TypedDict):
    """Cut-offs for the summary stats and recommendations."""

    high_vertex_count: int
    poor_score: float
    max_bone_depth: int
    max_bone_count: int
    physics_animation_share: float
    deformed_mesh_count: int
    non_normal_blend_count: int


class AnalysisConfig(TypedDict):
    """Full configuration for one analysis run."""

    sample_rate: float
    factors: PerformanceFactors
    weights: ScoreWeights
    thresholds: AnalysisThresholds


DEFAULT_SAMPLE_RATE: float = 30.0  # Samples per second of animation time

DEFAULT_PERFORMANCE_FACTORS: PerformanceFactors = {
    "ideal_bone_count": 30,  # Bones before the skeleton score decays
    "bone_depth_factor": 5,  # Hierarchy depth before the skeleton score decays
    "ideal_vertex_count": 300,  # Effective mesh vertices per animation
    "mesh_deformed_factor": 1.5,  # Cost multiplier for deform-keyed meshes
    "mesh_weighted_factor": 2.0,  # Cost multiplier for bone-weighted meshes
    "high_vertex_mesh_threshold": 50,
    "complex_mesh_vertex_threshold": 20,  # ...and deformed or weighted
    "ideal_clipping_mask_count": 1,
    "ideal_clipping_vertex_count": 16,
    "complex_mask_vertex_threshold": 4,  # Masks above this are "complex"
    "complex_mask_factor": 2.0,
    "ideal_blend_mode_count": 2,
    "additive_blend_factor": 1.5,
    "ideal_constraint_load": 3.0,  # Weighted active constraints
    "ik_weight": 1.0,
    "transform_weight": 0.8,
    "path_weight": 1.2,
    "physics_weight": 1.5,
}

DEFAULT_SCORE_WEIGHTS: ScoreWeights = {
    "skeleton": 0.15,
    "mesh": 0.25,
    "clipping": 0.20,
    "blend_mode": 0.15,
    "constraint": 0.25,
}

DEFAULT_THRESHOLDS: AnalysisThresholds = {
    "high_vertex_count": 500,  # Animation total vertices
    "poor_score": 55.0,  # Overall score below this is "poor"
    "max_bone_depth": 5,
    "max_bone_count": 50,
    "physics_animation_share": 0.5,
    "deformed_mesh_count": 3,
    "non_normal_blend_count": 2,
}

# Factors that divide or act as an "ideal" must stay strictly positive
_POSITIVE_FACTORS = (
    "ideal_bone_count",
    "bone_depth_factor",
    "ideal_vertex_count",
    "ideal_clipping_mask_count",
    "ideal_clipping_vertex_count",
    "ideal_blend_mode_count",
    "ideal_constraint_load",
)

# Penalty multipliers: 1.0 means "no extra cost"
_MULTIPLIER_FACTORS = (
    "mesh_deformed_factor",
    "mesh_weighted_factor",
    "complex_mask_factor",
    "additive_blend_factor",
)


def validate_factors(factors: PerformanceFactors) -> None:
    """Raise ValueError if a factor would make a score undefined."""
    for key in _POSITIVE_FACTORS:
        if factors[key] <= 0:
            raise ValueError(f"{key} must be positive, got {factors[key]!r}")
    for key in _MULTIPLIER_FACTORS:
        if factors[key] < 1:
            raise ValueError(f"{key} must be >= 1, got {factors[key]!r}")
    for key in ("ik_weight", "transform_weight", "path_weight", "physics_weight"):
        if factors[key] < 0:
            raise ValueError(f"{key} must not be negative, got {factors[key]!r}")


def validate_weights(weights: ScoreWeights) -> None:
    """Raise ValueError unless the category weights are non-negative and sum to 1."""
    if any(w < 0 for w in weights.values()):
        raise ValueError(f"Score weights must not be negative: {weights!r}")
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ValueError(f"Score weights must sum to 1.0, got {total}")


def _reject_unknown(section: str, overrides: dict, known: dict) -> None:
    unknown = set(overrides) - set(known)
    if unknown:
        raise ValueError(f"Unknown {section}: {sorted(unknown)}")


def resolve_factors(overrides: dict | None = None) -> PerformanceFactors:
    """Merge partial factor overrides onto the defaults."""
    overrides = overrides or {}
    _reject_unknown("performance factors", overrides, DEFAULT_PERFORMANCE_FACTORS)
    factors: PerformanceFactors = {**DEFAULT_PERFORMANCE_FACTORS, **overrides}  # type: ignore[typeddict-item]
    validate_factors(factors)
    return factors


def resolve_config(overrides: dict | None = None) -> AnalysisConfig:
    """Build a validated AnalysisConfig from partial overrides.

    Nested sections merge key by key, so ``{"factors": {"ik_weight": 2.0}}``
    keeps every other default.
    """
    overrides = overrides or {}
    unknown = set(overrides) - set(AnalysisConfig.__annotations__)
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")

    sample_rate = float(overrides.get("sample_rate", DEFAULT_SAMPLE_RATE))
    if not sample_rate > 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate!r}")

    weight_overrides = overrides.get("weights") or {}
    _reject_unknown("score weights", weight_overrides, DEFAULT_SCORE_WEIGHTS)
    weights: ScoreWeights = {**DEFAULT_SCORE_WEIGHTS, **weight_overrides}  # type: ignore[typeddict-item]
    validate_weights(weights)

    threshold_overrides = overrides.get("thresholds") or {}
    _reject_unknown("thresholds", threshold_overrides, DEFAULT_THRESHOLDS)
    thresholds: AnalysisThresholds = {**DEFAULT_THRESHOLDS, **threshold_overrides}  # type: ignore[typeddict-item]

    return {
        "sample_rate": sample_rate,
        "factors": resolve_factors(overrides.get("factors")),
        "weights": weights,
        "thresholds": thresholds,
    }
