"""Blend mode usage analysis."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from spine_perf.analyzers.active import ActiveComponentSet
from spine_perf.model import Animation, BlendMode, Pose
from spine_perf.utils.constants import PerformanceFactors, resolve_factors
from spine_perf.utils.scoring import calculate_blend_mode_score


@dataclass(frozen=True)
class BlendModeMetrics:
    active_non_normal_count: int
    active_additive_count: int
    active_multiply_count: int
    score: float


@dataclass(frozen=True)
class GlobalBlendModeAnalysis:
    blend_mode_counts: dict[BlendMode, int]
    slots_with_non_normal_blend_mode: dict[str, BlendMode]
    metrics: BlendModeMetrics


def _build_metrics(modes: Iterable[BlendMode], factors: PerformanceFactors) -> BlendModeMetrics:
    """Score the non-normal blend modes among ``modes``."""
    counts = Counter(mode for mode in modes if mode != BlendMode.NORMAL)
    non_normal = sum(counts.values())
    additive = counts[BlendMode.ADDITIVE]
    return BlendModeMetrics(
        active_non_normal_count=non_normal,
        active_additive_count=additive,
        active_multiply_count=counts[BlendMode.MULTIPLY],
        score=calculate_blend_mode_score(non_normal, additive, factors),
    )


def analyze_blend_modes_for_animation(
    pose: Pose,
    animation: Animation,
    active: ActiveComponentSet,
    factors: PerformanceFactors | None = None,
) -> BlendModeMetrics:
    """Count non-normal blend modes on the slots ``animation`` keeps visible."""
    factors = factors or resolve_factors()
    modes = (slot.blend_mode for slot in pose.skeleton.slots if slot.name in active.slots)
    return _build_metrics(modes, factors)


def analyze_global_blend_modes(
    pose: Pose, factors: PerformanceFactors | None = None
) -> GlobalBlendModeAnalysis:
    """Histogram of blend modes over every slot, every mode listed."""
    factors = factors or resolve_factors()
    histogram = {mode: 0 for mode in BlendMode}
    non_normal: dict[str, BlendMode] = {}

    for slot in pose.skeleton.slots:
        histogram[slot.blend_mode] += 1
        if slot.blend_mode != BlendMode.NORMAL:
            non_normal[slot.name] = slot.blend_mode

    return GlobalBlendModeAnalysis(
        blend_mode_counts=histogram,
        slots_with_non_normal_blend_mode=non_normal,
        metrics=_build_metrics(non_normal.values(), factors),
    )
