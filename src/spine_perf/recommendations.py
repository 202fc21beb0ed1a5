"""Optimization advice derived from an analysis result.

Recommendations are codes plus the animations they concern. Turning them
into prose is left to the caller.
"""

from dataclasses import dataclass
from enum import Enum

from spine_perf.report import AnalysisResult, AnimationAnalysis
from spine_perf.utils.constants import DEFAULT_THRESHOLDS, AnalysisThresholds


class RecommendationCode(Enum):
    REDUCE_BONE_DEPTH = "reduce_bone_depth"
    REDUCE_TOTAL_BONES = "reduce_total_bones"
    BAKE_PHYSICS = "bake_physics"
    REPLACE_CLIPPING = "replace_clipping"
    SIMPLIFY_HIGH_VERTEX_MESHES = "simplify_high_vertex_meshes"
    FOCUS_POOR_ANIMATIONS = "focus_poor_animations"
    SPLIT_EXPENSIVE_FEATURES = "split_expensive_features"
    GENERALLY_GOOD = "generally_good"


@dataclass(frozen=True)
class Recommendation:
    code: RecommendationCode
    subjects: tuple[str, ...] = ()


def count_expensive_features(
    analysis: AnimationAnalysis,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> int:
    """How many costly features one animation combines."""
    active = analysis.active_components
    return sum([
        active.has_physics,
        active.has_clipping,
        analysis.mesh_metrics.deformed_mesh_count > thresholds["deformed_mesh_count"],
        analysis.blend_mode_metrics.active_non_normal_count > thresholds["non_normal_blend_count"],
    ])


def generate_recommendations(
    result: AnalysisResult,
    thresholds: AnalysisThresholds | None = None,
) -> list[Recommendation]:
    """List what to optimize first, in a fixed order.

    Returns a single ``GENERALLY_GOOD`` entry when no rule fires.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    metrics = result.skeleton.metrics
    animations = result.animations
    recommendations: list[Recommendation] = []

    def names(selected) -> tuple[str, ...]:
        return tuple(a.name for a in selected)

    if metrics.max_depth > thresholds["max_bone_depth"]:
        recommendations.append(Recommendation(RecommendationCode.REDUCE_BONE_DEPTH))
    if metrics.total_bones > thresholds["max_bone_count"]:
        recommendations.append(Recommendation(RecommendationCode.REDUCE_TOTAL_BONES))

    physics = [a for a in animations if a.active_components.has_physics]
    if len(physics) > len(animations) * thresholds["physics_animation_share"]:
        recommendations.append(Recommendation(RecommendationCode.BAKE_PHYSICS, names(physics)))

    clipping = [a for a in animations if a.active_components.has_clipping]
    if clipping:
        recommendations.append(
            Recommendation(RecommendationCode.REPLACE_CLIPPING, names(clipping))
        )

    high_vertex = [
        a for a in animations if a.mesh_metrics.total_vertices > thresholds["high_vertex_count"]
    ]
    if high_vertex:
        recommendations.append(
            Recommendation(RecommendationCode.SIMPLIFY_HIGH_VERTEX_MESHES, names(high_vertex))
        )

    poor = [a for a in animations if a.overall_score < thresholds["poor_score"]]
    if poor:
        recommendations.append(Recommendation(RecommendationCode.FOCUS_POOR_ANIMATIONS, names(poor)))

    multi_issue = [a for a in animations if count_expensive_features(a, thresholds) >= 2]
    if multi_issue:
        recommendations.append(
            Recommendation(RecommendationCode.SPLIT_EXPENSIVE_FEATURES, names(multi_issue))
        )

    if not recommendations:
        recommendations.append(Recommendation(RecommendationCode.GENERALLY_GOOD))
    return recommendations
