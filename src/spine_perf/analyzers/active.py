"""Detection of the slots, meshes, bones and constraints an animation exercises.

Two independent passes feed the result:

- the frame-state pass looks at each sampled pose and records what is
  visible or has a positive influence at that instant;
- the timeline pass records every constraint and deformed mesh the
  animation keys, whether or not a sample happened to catch it.

Both return an ``ActiveComponentSet`` and are merged by set union only, so a
keyed feature is never dropped because sampling missed it.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, TypeVar

from spine_perf.model import (
    PATH_TIMELINE_KINDS,
    Animation,
    AttachmentKind,
    BlendMode,
    Pose,
    Skeleton,
    TimelineKind,
)
from spine_perf.sampler import sample_animation
from spine_perf.utils import mesh_key
from spine_perf.utils.constants import DEFAULT_SAMPLE_RATE
from spine_perf.utils.logging import log_debug

T = TypeVar("T")


@dataclass(frozen=True)
class ActiveConstraints:
    """Names of the active constraints, per family."""

    ik: frozenset[str] = frozenset()
    transform: frozenset[str] = frozenset()
    path: frozenset[str] = frozenset()
    physics: frozenset[str] = frozenset()

    def union(self, other: "ActiveConstraints") -> "ActiveConstraints":
        return ActiveConstraints(
            ik=self.ik | other.ik,
            transform=self.transform | other.transform,
            path=self.path | other.path,
            physics=self.physics | other.physics,
        )

    def counts(self) -> dict[str, int]:
        return {
            "ik": len(self.ik),
            "transform": len(self.transform),
            "path": len(self.path),
            "physics": len(self.physics),
        }


@dataclass(frozen=True)
class ActiveComponentSet:
    """Everything one animation was observed or keyed to use."""

    slots: frozenset[str] = frozenset()
    meshes: frozenset[str] = frozenset()
    bones: frozenset[str] = frozenset()
    has_clipping: bool = False
    has_blend_modes: bool = False
    # (slot, attachment) of every clipping mask seen visible
    clipping_masks: frozenset[tuple[str, str]] = frozenset()
    active_constraints: ActiveConstraints = field(default_factory=ActiveConstraints)

    @property
    def has_ik(self) -> bool:
        return bool(self.active_constraints.ik)

    @property
    def has_transform(self) -> bool:
        return bool(self.active_constraints.transform)

    @property
    def has_path(self) -> bool:
        return bool(self.active_constraints.path)

    @property
    def has_physics(self) -> bool:
        return bool(self.active_constraints.physics)

    def union(self, other: "ActiveComponentSet") -> "ActiveComponentSet":
        return ActiveComponentSet(
            slots=self.slots | other.slots,
            meshes=self.meshes | other.meshes,
            bones=self.bones | other.bones,
            has_clipping=self.has_clipping or other.has_clipping,
            has_blend_modes=self.has_blend_modes or other.has_blend_modes,
            clipping_masks=self.clipping_masks | other.clipping_masks,
            active_constraints=self.active_constraints.union(other.active_constraints),
        )


EMPTY_COMPONENTS = ActiveComponentSet()


def union_components(*sets: ActiveComponentSet) -> ActiveComponentSet:
    """Merge any number of component sets; order does not matter."""
    return reduce(ActiveComponentSet.union, sets, EMPTY_COMPONENTS)


def _item_at(items: Sequence[T], index: int) -> T | None:
    """Bounds-checked lookup; negative or stale indices resolve to None."""
    if 0 <= index < len(items):
        return items[index]
    return None


def _collect_influenced(
    constraints: Iterable[Any],
    has_influence: Callable[[Any], bool],
    bones: set[str],
) -> frozenset[str]:
    """Names of active constraints with influence; adds their bones to ``bones``."""
    names: set[str] = set()
    for constraint in constraints:
        if not constraint.is_active() or not has_influence(constraint):
            continue
        names.add(constraint.name)
        bones.update(bone.name for bone in constraint.affected_bones)
    return frozenset(names)


def detect_frame_state(skeleton: Skeleton) -> ActiveComponentSet:
    """Classify what is live in the skeleton's current (sampled) pose."""
    slots: set[str] = set()
    meshes: set[str] = set()
    bones: set[str] = set()
    clipping_masks: set[tuple[str, str]] = set()
    has_blend_modes = False

    for slot in skeleton.slots:
        # Invisible slots and empty slots cost nothing this frame
        if slot.alpha == 0:
            continue
        attachment = slot.attachment
        if attachment is None:
            continue

        slots.add(slot.name)
        if attachment.kind is AttachmentKind.MESH:
            meshes.add(mesh_key(slot.name, attachment.name))
        elif attachment.kind is AttachmentKind.CLIPPING:
            clipping_masks.add((slot.name, attachment.name))

        if slot.blend_mode != BlendMode.NORMAL:
            has_blend_modes = True

        bones.update(bone.name for bone in slot.bone.ancestry())

    constraints = ActiveConstraints(
        ik=_collect_influenced(skeleton.ik_constraints, lambda c: c.mix > 0, bones),
        transform=_collect_influenced(
            skeleton.transform_constraints,
            lambda c: any(mix > 0 for mix in c.mixes),
            bones,
        ),
        path=_collect_influenced(
            skeleton.path_constraints,
            lambda c: c.mix_rotate > 0 or c.mix_x > 0 or c.mix_y > 0,
            bones,
        ),
        physics=_collect_influenced(
            skeleton.physics_constraints, lambda c: c.mix > 0, bones
        ),
    )

    return ActiveComponentSet(
        slots=frozenset(slots),
        meshes=frozenset(meshes),
        bones=frozenset(bones),
        has_clipping=bool(clipping_masks),
        has_blend_modes=has_blend_modes,
        clipping_masks=frozenset(clipping_masks),
        active_constraints=constraints,
    )


def detect_timeline_usage(animation: Animation, skeleton: Skeleton) -> ActiveComponentSet:
    """
    Classify what the animation keys, regardless of runtime influence.

    Constraint timelines mark their constraint active; deform timelines on a
    mesh mark the slot and the mesh. Indices that resolve to nothing are
    skipped.
    """
    slots: set[str] = set()
    meshes: set[str] = set()
    found: dict[str, set[str]] = {"ik": set(), "transform": set(), "path": set(), "physics": set()}

    families = {
        TimelineKind.IK_CONSTRAINT: ("ik", skeleton.ik_constraints),
        TimelineKind.TRANSFORM_CONSTRAINT: ("transform", skeleton.transform_constraints),
        TimelineKind.PHYSICS_CONSTRAINT: ("physics", skeleton.physics_constraints),
    }
    families.update(
        {kind: ("path", skeleton.path_constraints) for kind in PATH_TIMELINE_KINDS}
    )

    for timeline in animation.timelines:
        if timeline.kind in families:
            family, constraints = families[timeline.kind]
            constraint = _item_at(constraints, timeline.index)
            if constraint is None:
                log_debug(
                    f"'{animation.name}': {family} timeline index {timeline.index} "
                    "has no constraint, skipped"
                )
                continue
            found[family].add(constraint.name)

        elif timeline.kind is TimelineKind.DEFORM:
            slot = _item_at(skeleton.slots, timeline.index)
            attachment = timeline.attachment
            if slot is None or attachment is None:
                continue
            slots.add(slot.name)
            if attachment.kind is AttachmentKind.MESH:
                meshes.add(mesh_key(slot.name, attachment.name))

    return ActiveComponentSet(
        slots=frozenset(slots),
        meshes=frozenset(meshes),
        active_constraints=ActiveConstraints(
            ik=frozenset(found["ik"]),
            transform=frozenset(found["transform"]),
            path=frozenset(found["path"]),
            physics=frozenset(found["physics"]),
        ),
    )


def get_active_components(
    pose: Pose,
    animation: Animation,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
) -> ActiveComponentSet:
    """Sample ``animation`` on ``pose`` and merge both detection passes."""
    frames: list[ActiveComponentSet] = []

    def on_sample(_time: float, sampled: Pose) -> None:
        frames.append(detect_frame_state(sampled.skeleton))

    sample_animation(pose, animation, on_sample, sample_rate)

    sampled = union_components(*frames)
    keyed = detect_timeline_usage(animation, pose.skeleton)
    active = union_components(sampled, keyed)

    log_debug(
        f"Active components in '{animation.name}': {len(active.slots)} slots, "
        f"{len(active.meshes)} meshes, physics={active.has_physics}, "
        f"clipping={active.has_clipping}, blend_modes={active.has_blend_modes}"
    )
    return active
