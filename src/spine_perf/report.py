"""Run every analyzer over a pose and assemble the final report."""

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from spine_perf.analyzers.active import ActiveComponentSet, get_active_components
from spine_perf.analyzers.blend_mode import (
    BlendModeMetrics,
    GlobalBlendModeAnalysis,
    analyze_blend_modes_for_animation,
    analyze_global_blend_modes,
)
from spine_perf.analyzers.clipping import (
    ClippingMetrics,
    GlobalClippingAnalysis,
    analyze_clipping_for_animation,
    analyze_global_clipping,
)
from spine_perf.analyzers.constraints import (
    ConstraintMetrics,
    GlobalPhysicsAnalysis,
    analyze_constraints_for_animation,
    analyze_global_physics,
)
from spine_perf.analyzers.mesh import (
    GlobalMeshAnalysis,
    MeshMetrics,
    analyze_global_meshes,
    analyze_meshes_for_animation,
)
from spine_perf.analyzers.skeleton import SkeletonAnalysis, analyze_skeleton_structure
from spine_perf.model import Animation, Pose
from spine_perf.utils.constants import (
    DEFAULT_THRESHOLDS,
    AnalysisConfig,
    AnalysisThresholds,
    resolve_config,
)
from spine_perf.utils.logging import log_debug, timed
from spine_perf.utils.scoring import calculate_overall_score, median_score, rank_by_score


@dataclass(frozen=True)
class AnimationAnalysis:
    name: str
    duration: float
    overall_score: float
    skeleton_score: float
    mesh_metrics: MeshMetrics
    clipping_metrics: ClippingMetrics
    blend_mode_metrics: BlendModeMetrics
    constraint_metrics: ConstraintMetrics
    active_components: ActiveComponentSet

    def component_scores(self) -> dict[str, float]:
        """Category scores keyed the way ``ScoreWeights`` is."""
        return {
            "skeleton": self.skeleton_score,
            "mesh": self.mesh_metrics.score,
            "clipping": self.clipping_metrics.score,
            "blend_mode": self.blend_mode_metrics.score,
            "constraint": self.constraint_metrics.score,
        }


@dataclass(frozen=True)
class AnalysisStats:
    animations_with_physics: int = 0
    animations_with_clipping: int = 0
    animations_with_blend_modes: int = 0
    animations_with_ik: int = 0
    animations_with_transform: int = 0
    animations_with_path: int = 0
    high_vertex_animations: int = 0
    poor_performing_animations: int = 0


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one ``analyze`` call found. Holds no reference to the pose."""

    skeleton_name: str
    total_animations: int
    total_skins: int
    skeleton: SkeletonAnalysis
    animations: tuple[AnimationAnalysis, ...]
    global_mesh: GlobalMeshAnalysis
    global_clipping: GlobalClippingAnalysis
    global_blend_mode: GlobalBlendModeAnalysis
    global_physics: GlobalPhysicsAnalysis
    median_score: float
    best_animation: AnimationAnalysis | None
    worst_animation: AnimationAnalysis | None
    stats: AnalysisStats


def analyze_animation(
    pose: Pose,
    animation: Animation,
    skeleton_score: float,
    config: AnalysisConfig,
) -> AnimationAnalysis:
    """Detect what ``animation`` uses, score each category and combine them."""
    factors = config["factors"]
    active = get_active_components(pose, animation, config["sample_rate"])

    mesh_metrics = analyze_meshes_for_animation(pose, animation, active, factors)
    clipping_metrics = analyze_clipping_for_animation(pose, animation, active, factors)
    blend_mode_metrics = analyze_blend_modes_for_animation(pose, animation, active, factors)
    constraint_metrics = analyze_constraints_for_animation(pose, animation, active, factors)

    scores = {
        "skeleton": skeleton_score,
        "mesh": mesh_metrics.score,
        "clipping": clipping_metrics.score,
        "blend_mode": blend_mode_metrics.score,
        "constraint": constraint_metrics.score,
    }

    return AnimationAnalysis(
        name=animation.name,
        duration=animation.duration,
        overall_score=calculate_overall_score(scores, config["weights"]),
        skeleton_score=skeleton_score,
        mesh_metrics=mesh_metrics,
        clipping_metrics=clipping_metrics,
        blend_mode_metrics=blend_mode_metrics,
        constraint_metrics=constraint_metrics,
        active_components=active,
    )


def rank_animations(analyses: Sequence[AnimationAnalysis]) -> list[AnimationAnalysis]:
    """Best first; equal scores keep their input order."""
    return rank_by_score(analyses, key=lambda a: a.overall_score)


def calculate_statistics(
    analyses: Sequence[AnimationAnalysis],
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> AnalysisStats:
    def count(predicate) -> int:
        return sum(1 for a in analyses if predicate(a))

    return AnalysisStats(
        animations_with_physics=count(lambda a: a.active_components.has_physics),
        animations_with_clipping=count(lambda a: a.active_components.has_clipping),
        animations_with_blend_modes=count(lambda a: a.active_components.has_blend_modes),
        animations_with_ik=count(lambda a: a.active_components.has_ik),
        animations_with_transform=count(lambda a: a.active_components.has_transform),
        animations_with_path=count(lambda a: a.active_components.has_path),
        high_vertex_animations=count(
            lambda a: a.mesh_metrics.total_vertices > thresholds["high_vertex_count"]
        ),
        poor_performing_animations=count(
            lambda a: a.overall_score < thresholds["poor_score"]
        ),
    )


def analyze(pose: Pose, config: dict | None = None) -> AnalysisResult:
    """
    Analyze every animation of the pose's skeleton.

    ``config`` holds partial overrides for ``AnalysisConfig``; omitted keys
    keep their defaults. Raises ValueError for an invalid configuration.

    The pose's track state is restored after each animation is sampled.
    Errors raised by the animation player propagate unchanged.
    """
    resolved = resolve_config(config)
    factors = resolved["factors"]
    skeleton = pose.skeleton
    animations = skeleton.animations

    with timed(f"Analysis of {len(animations)} animations"):
        skeleton_analysis = analyze_skeleton_structure(pose, factors)
        global_mesh = analyze_global_meshes(pose, factors)
        global_clipping = analyze_global_clipping(pose, factors)
        global_blend_mode = analyze_global_blend_modes(pose, factors)
        global_physics = analyze_global_physics(pose, factors)

        analyses: list[AnimationAnalysis] = []
        for index, animation in enumerate(animations, start=1):
            log_debug(f"Analyzing animation {index}/{len(animations)}: {animation.name}")
            analyses.append(
                analyze_animation(pose, animation, skeleton_analysis.metrics.score, resolved)
            )

    ranked = rank_animations(analyses)

    return AnalysisResult(
        skeleton_name=skeleton.name or "Unnamed",
        total_animations=len(animations),
        total_skins=len(skeleton.skins),
        skeleton=skeleton_analysis,
        animations=tuple(analyses),
        global_mesh=global_mesh,
        global_clipping=global_clipping,
        global_blend_mode=global_blend_mode,
        global_physics=global_physics,
        median_score=median_score([a.overall_score for a in analyses]),
        best_animation=ranked[0] if ranked else None,
        worst_animation=ranked[-1] if ranked else None,
        stats=calculate_statistics(analyses, resolved["thresholds"]),
    )


def _animation_summary(analysis: AnimationAnalysis | None) -> dict[str, Any] | None:
    if analysis is None:
        return None
    return {"name": analysis.name, "score": analysis.overall_score}


def export_json(result: AnalysisResult) -> dict[str, Any]:
    """JSON-serializable summary of a result (metrics only, no inventories)."""
    return {
        "skeleton": {
            "name": result.skeleton_name,
            "bones": result.skeleton.metrics.total_bones,
            "max_depth": result.skeleton.metrics.max_depth,
            "score": result.skeleton.metrics.score,
            "total_animations": result.total_animations,
            "total_skins": result.total_skins,
        },
        "performance": {
            "median_score": result.median_score,
            "best_animation": _animation_summary(result.best_animation),
            "worst_animation": _animation_summary(result.worst_animation),
        },
        "statistics": asdict(result.stats),
        "animations": [
            {
                "name": a.name,
                "duration": a.duration,
                "score": a.overall_score,
                "metrics": {
                    "mesh": {
                        "count": a.mesh_metrics.active_mesh_count,
                        "vertices": a.mesh_metrics.total_vertices,
                        "deformed": a.mesh_metrics.deformed_mesh_count,
                        "weighted": a.mesh_metrics.weighted_mesh_count,
                        "score": a.mesh_metrics.score,
                    },
                    "clipping": {
                        "masks": a.clipping_metrics.active_mask_count,
                        "vertices": a.clipping_metrics.total_vertices,
                        "complex": a.clipping_metrics.complex_masks,
                        "score": a.clipping_metrics.score,
                    },
                    "blend_mode": {
                        "non_normal": a.blend_mode_metrics.active_non_normal_count,
                        "additive": a.blend_mode_metrics.active_additive_count,
                        "multiply": a.blend_mode_metrics.active_multiply_count,
                        "score": a.blend_mode_metrics.score,
                    },
                    "constraints": {
                        "physics": a.constraint_metrics.active_physics_count,
                        "ik": a.constraint_metrics.active_ik_count,
                        "transform": a.constraint_metrics.active_transform_count,
                        "path": a.constraint_metrics.active_path_count,
                        "total": a.constraint_metrics.total_active_constraints,
                        "score": a.constraint_metrics.score,
                    },
                },
            }
            for a in result.animations
        ],
    }
