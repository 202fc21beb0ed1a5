"""IK, transform, path and physics constraint analysis."""

from dataclasses import dataclass

from spine_perf.analyzers.active import ActiveComponentSet
from spine_perf.model import (
    Animation,
    IkConstraint,
    PathConstraint,
    PhysicsConstraint,
    PositionMode,
    Pose,
    RotateMode,
    SpacingMode,
    TransformConstraint,
)
from spine_perf.utils.constants import PerformanceFactors, resolve_factors
from spine_perf.utils.scoring import calculate_constraint_score, constraint_family_weights

CONSTRAINT_FAMILIES = ("ik", "transform", "path", "physics")


@dataclass(frozen=True)
class ConstraintImpact:
    """One family's share of the constraint count, raw and weighted (percent)."""

    family: str
    count: int
    impact: float
    weighted_impact: float


@dataclass(frozen=True)
class ConstraintMetrics:
    active_ik_count: int
    active_transform_count: int
    active_path_count: int
    active_physics_count: int
    total_active_constraints: int
    impacts: tuple[ConstraintImpact, ...]
    score: float

    def impact_of(self, family: str) -> ConstraintImpact:
        for impact in self.impacts:
            if impact.family == family:
                return impact
        raise KeyError(family)


@dataclass(frozen=True)
class IkConstraintInfo:
    name: str
    target: str
    bones: tuple[str, ...]
    mix: float
    softness: float
    bend_direction: int
    compress: bool
    stretch: bool
    is_active: bool


@dataclass(frozen=True)
class TransformConstraintInfo:
    name: str
    target: str
    bones: tuple[str, ...]
    mix_rotate: float
    mix_x: float
    mix_y: float
    mix_scale_x: float
    mix_scale_y: float
    mix_shear_y: float
    is_active: bool
    is_local: bool
    is_relative: bool


@dataclass(frozen=True)
class PathConstraintInfo:
    name: str
    target: str
    bones: tuple[str, ...]
    mix_rotate: float
    mix_x: float
    mix_y: float
    position: float
    spacing: float
    position_mode: PositionMode
    spacing_mode: SpacingMode
    rotate_mode: RotateMode
    offset_rotation: float
    is_active: bool


@dataclass(frozen=True)
class PhysicsConstraintInfo:
    name: str
    bone: str
    inertia: float
    strength: float
    damping: float
    mass_inverse: float
    wind: float
    gravity: float
    mix: float
    affects_x: bool
    affects_y: bool
    affects_rotation: bool
    affects_scale: bool
    affects_shear: bool
    is_active: bool


@dataclass(frozen=True)
class GlobalPhysicsAnalysis:
    ik_constraints: tuple[IkConstraintInfo, ...]
    transform_constraints: tuple[TransformConstraintInfo, ...]
    path_constraints: tuple[PathConstraintInfo, ...]
    physics_constraints: tuple[PhysicsConstraintInfo, ...]
    metrics: ConstraintMetrics

    @property
    def total_constraints(self) -> int:
        return self.metrics.total_active_constraints


def calculate_impacts(
    counts: dict[str, int], factors: PerformanceFactors
) -> tuple[ConstraintImpact, ...]:
    """Each family's percentage of the total count, then scaled by its weight."""
    total = sum(counts.values())
    weights = constraint_family_weights(factors)
    impacts = []
    for family in CONSTRAINT_FAMILIES:
        count = counts.get(family, 0)
        impact = 100.0 * count / total if total > 0 else 0.0
        impacts.append(ConstraintImpact(family, count, impact, impact * weights[family]))
    return tuple(impacts)


def build_constraint_metrics(
    counts: dict[str, int], factors: PerformanceFactors
) -> ConstraintMetrics:
    return ConstraintMetrics(
        active_ik_count=counts.get("ik", 0),
        active_transform_count=counts.get("transform", 0),
        active_path_count=counts.get("path", 0),
        active_physics_count=counts.get("physics", 0),
        total_active_constraints=sum(counts.values()),
        impacts=calculate_impacts(counts, factors),
        score=calculate_constraint_score(counts, factors),
    )


def analyze_constraints_for_animation(
    pose: Pose,
    animation: Animation,
    active: ActiveComponentSet,
    factors: PerformanceFactors | None = None,
) -> ConstraintMetrics:
    """Score the constraints active in ``animation``."""
    factors = factors or resolve_factors()
    return build_constraint_metrics(active.active_constraints.counts(), factors)


def _bone_names(bones) -> tuple[str, ...]:
    return tuple(bone.name for bone in bones)


def _ik_info(constraint: IkConstraint) -> IkConstraintInfo:
    return IkConstraintInfo(
        name=constraint.name,
        target=constraint.target.name,
        bones=_bone_names(constraint.bones),
        mix=constraint.mix,
        softness=constraint.softness,
        bend_direction=constraint.bend_direction,
        compress=constraint.compress,
        stretch=constraint.stretch,
        is_active=constraint.is_active(),
    )


def _transform_info(constraint: TransformConstraint) -> TransformConstraintInfo:
    return TransformConstraintInfo(
        name=constraint.name,
        target=constraint.target.name,
        bones=_bone_names(constraint.bones),
        mix_rotate=constraint.mix_rotate,
        mix_x=constraint.mix_x,
        mix_y=constraint.mix_y,
        mix_scale_x=constraint.mix_scale_x,
        mix_scale_y=constraint.mix_scale_y,
        mix_shear_y=constraint.mix_shear_y,
        is_active=constraint.is_active(),
        is_local=constraint.local,
        is_relative=constraint.relative,
    )


def _path_info(constraint: PathConstraint) -> PathConstraintInfo:
    return PathConstraintInfo(
        name=constraint.name,
        target=constraint.target.name,
        bones=_bone_names(constraint.bones),
        mix_rotate=constraint.mix_rotate,
        mix_x=constraint.mix_x,
        mix_y=constraint.mix_y,
        position=constraint.position,
        spacing=constraint.spacing,
        position_mode=constraint.position_mode,
        spacing_mode=constraint.spacing_mode,
        rotate_mode=constraint.rotate_mode,
        offset_rotation=constraint.offset_rotation,
        is_active=constraint.is_active(),
    )


def _physics_info(constraint: PhysicsConstraint) -> PhysicsConstraintInfo:
    return PhysicsConstraintInfo(
        name=constraint.name,
        bone=constraint.bone.name,
        inertia=constraint.inertia,
        strength=constraint.strength,
        damping=constraint.damping,
        mass_inverse=constraint.mass_inverse,
        wind=constraint.wind,
        gravity=constraint.gravity,
        mix=constraint.mix,
        affects_x=constraint.x > 0,
        affects_y=constraint.y > 0,
        affects_rotation=constraint.rotate > 0,
        affects_scale=constraint.scale_x > 0,
        affects_shear=constraint.shear_x > 0,
        is_active=constraint.is_active(),
    )


def analyze_global_physics(
    pose: Pose, factors: PerformanceFactors | None = None
) -> GlobalPhysicsAnalysis:
    """Full parameter inventory of every constraint, scored as if all were active."""
    factors = factors or resolve_factors()
    skeleton = pose.skeleton

    counts = {
        "ik": len(skeleton.ik_constraints),
        "transform": len(skeleton.transform_constraints),
        "path": len(skeleton.path_constraints),
        "physics": len(skeleton.physics_constraints),
    }

    return GlobalPhysicsAnalysis(
        ik_constraints=tuple(_ik_info(c) for c in skeleton.ik_constraints),
        transform_constraints=tuple(_transform_info(c) for c in skeleton.transform_constraints),
        path_constraints=tuple(_path_info(c) for c in skeleton.path_constraints),
        physics_constraints=tuple(_physics_info(c) for c in skeleton.physics_constraints),
        metrics=build_constraint_metrics(counts, factors),
    )
