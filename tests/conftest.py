"""
Pytest fixtures for spine-perf tests.

Uses an in-memory skeleton and a scripted player instead of a real
animation runtime: each animation is a function that writes slot and
constraint values for a given track time.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from spine_perf.model import (
    Animation,
    Attachment,
    BlendMode,
    Bone,
    IkConstraint,
    PathConstraint,
    PhysicsConstraint,
    Pose,
    Skeleton,
    Skin,
    Slot,
    Timeline,
    TimelineKind,
    TrackEntry,
    TransformConstraint,
)

Script = Callable[[Skeleton, float], None]


class FakePlayer:
    """AnimationPlayer that resets to the setup pose, then runs a script."""

    def __init__(self, skeleton: Skeleton, scripts: dict[str, Script] | None = None):
        self.skeleton = skeleton
        self.scripts = scripts or {}
        self.track: TrackEntry | None = None
        self.events: list[tuple[str, float | None]] = []
        self._setup = self._snapshot()

    def _snapshot(self) -> dict:
        sk = self.skeleton
        return {
            "slots": [(s.attachment, s.alpha, s.blend_mode) for s in sk.slots],
            "ik": [c.mix for c in sk.ik_constraints],
            "transform": [c.mixes for c in sk.transform_constraints],
            "path": [(c.mix_rotate, c.mix_x, c.mix_y) for c in sk.path_constraints],
            "physics": [c.mix for c in sk.physics_constraints],
        }

    def _reset(self) -> None:
        sk = self.skeleton
        for slot, (attachment, alpha, blend_mode) in zip(sk.slots, self._setup["slots"]):
            slot.attachment, slot.alpha, slot.blend_mode = attachment, alpha, blend_mode
        for c, mix in zip(sk.ik_constraints, self._setup["ik"]):
            c.mix = mix
        for c, mixes in zip(sk.transform_constraints, self._setup["transform"]):
            (c.mix_rotate, c.mix_x, c.mix_y, c.mix_scale_x, c.mix_scale_y, c.mix_shear_y) = mixes
        for c, (rotate, x, y) in zip(sk.path_constraints, self._setup["path"]):
            c.mix_rotate, c.mix_x, c.mix_y = rotate, x, y
        for c, mix in zip(sk.physics_constraints, self._setup["physics"]):
            c.mix = mix

    def current_track(self) -> TrackEntry | None:
        return self.track

    def clear_track(self) -> None:
        self.events.append(("clear", None))
        self.track = None

    def set_animation(self, name: str, loop: bool) -> TrackEntry:
        if self.skeleton.find_animation(name) is None:
            raise ValueError(f"Animation not found: {name}")
        self.events.append(("set", None))
        self.track = TrackEntry(animation_name=name, loop=loop)
        return self.track

    def apply(self) -> None:
        self._reset()
        if self.track is None:
            self.events.append(("apply", None))
            return
        self.events.append(("apply", self.track.track_time))
        script = self.scripts.get(self.track.animation_name)
        if script is not None:
            script(self.skeleton, self.track.track_time)

    def update_world_transform(self) -> None:
        self.events.append(("update", self.track.track_time if self.track else None))


@pytest.fixture
def make_pose() -> Callable[..., Pose]:
    """Factory: wrap a skeleton and optional animation scripts in a Pose."""

    def factory(skeleton: Skeleton, scripts: dict[str, Script] | None = None) -> Pose:
        return Pose(skeleton=skeleton, player=FakePlayer(skeleton, scripts))

    return factory


@pytest.fixture
def empty_pose(make_pose: Callable[..., Pose]) -> Pose:
    """A skeleton with nothing in it."""
    return make_pose(Skeleton(name=""))


def build_hero() -> tuple[Skeleton, dict[str, Script]]:
    """
    Six bones, five slots, one constraint of each family, four animations.

    Setup pose: the clipping slot is hidden and every constraint mix is 0.
    - idle: plays the setup pose
    - attack: from 0.25s shows the clip slot and drives the IK mix to 1
    - wiggle: keys a deform on the hair mesh and the physics constraint
    - still: zero length, hides the additive glow slot
    """
    root = Bone("root")
    hip = Bone("hip", root, world_x=10.004, world_y=20.006)
    torso = Bone("torso", hip)
    head = Bone("head", torso)
    arm = Bone("arm", torso)
    hand = Bone("hand", arm)

    body = Attachment.mesh("body", 40, bones=(1, 2))
    body_alt = Attachment.mesh("body_alt", 80, parent_mesh="body")
    hair = Attachment.mesh("hair", 12)
    head_region = Attachment.region("head")
    mask = Attachment.clipping("mask", 6)
    glow = Attachment.region("glow")

    slots = [
        Slot("body", torso, body),
        Slot("head", head, head_region),
        Slot("hair", head, hair),
        Slot("clip", root, mask, alpha=0.0),
        Slot("glow", hand, glow, blend_mode=BlendMode.ADDITIVE),
    ]

    default_skin = Skin("default")
    for slot_name, attachment in [
        ("body", body),
        ("body", body_alt),
        ("head", head_region),
        ("hair", hair),
        ("clip", mask),
        ("glow", glow),
    ]:
        default_skin.add(slot_name, attachment)
    armored = Skin("armored")
    armored.add("head", head_region)

    skeleton = Skeleton(
        name="hero",
        bones=[root, hip, torso, head, arm, hand],
        slots=slots,
        skins=[default_skin, armored],
        ik_constraints=[IkConstraint("arm_ik", [arm, hand], target=root, mix=0.0)],
        transform_constraints=[
            TransformConstraint(
                "follow",
                [head],
                target=torso,
                mix_rotate=0.0,
                mix_x=0.0,
                mix_y=0.0,
                mix_scale_x=0.0,
                mix_scale_y=0.0,
                mix_shear_y=0.0,
            )
        ],
        path_constraints=[
            PathConstraint("tail", [hip], target=slots[0], mix_rotate=0.0, mix_x=0.0, mix_y=0.0)
        ],
        physics_constraints=[PhysicsConstraint("hair_sway", head, mix=0.0, x=1.0, rotate=0.5)],
        animations=[
            Animation("idle", 1.0),
            Animation("attack", 0.5, (Timeline(TimelineKind.IK_CONSTRAINT, 0),)),
            Animation(
                "wiggle",
                0.2,
                (
                    Timeline(TimelineKind.DEFORM, 2, hair),
                    Timeline(TimelineKind.PHYSICS_CONSTRAINT, 0),
                ),
            ),
            Animation("still", 0.0),
        ],
    )

    def attack(sk: Skeleton, time: float) -> None:
        if time >= 0.25:
            sk.ik_constraints[0].mix = 1.0
            sk.slots[3].alpha = 1.0

    def still(sk: Skeleton, time: float) -> None:
        sk.slots[4].alpha = 0.0

    return skeleton, {"attack": attack, "still": still}


@pytest.fixture
def hero_pose(make_pose: Callable[..., Pose]) -> Pose:
    skeleton, scripts = build_hero()
    return make_pose(skeleton, scripts)
