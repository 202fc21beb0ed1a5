"""In-memory skeleton, attachment, constraint and animation model.

The asset loader (not part of this package) builds these objects once per
asset. The animation runtime then mutates slot and constraint values in place
while it plays an animation; the analyzers only read them.

Attachments carry a closed ``AttachmentKind`` tag set at construction, so
analyzers branch on ``attachment.kind`` instead of type-testing.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Protocol


class AttachmentKind(Enum):
    MESH = "mesh"
    CLIPPING = "clipping"
    OTHER = "other"


class BlendMode(IntEnum):
    NORMAL = 0
    ADDITIVE = 1
    MULTIPLY = 2
    SCREEN = 3


class PositionMode(IntEnum):
    FIXED = 0
    PERCENT = 1


class SpacingMode(IntEnum):
    LENGTH = 0
    FIXED = 1
    PERCENT = 2
    PROPORTIONAL = 3


class RotateMode(IntEnum):
    TANGENT = 0
    CHAIN = 1
    CHAIN_SCALE = 2


class TimelineKind(Enum):
    """What a timeline keys. ``Timeline.index`` addresses a slot or a constraint."""

    BONE = "bone"
    SLOT_ATTACHMENT = "slot_attachment"
    SLOT_COLOR = "slot_color"
    DEFORM = "deform"
    DRAW_ORDER = "draw_order"
    EVENT = "event"
    IK_CONSTRAINT = "ik_constraint"
    TRANSFORM_CONSTRAINT = "transform_constraint"
    PATH_CONSTRAINT_MIX = "path_constraint_mix"
    PATH_CONSTRAINT_POSITION = "path_constraint_position"
    PATH_CONSTRAINT_SPACING = "path_constraint_spacing"
    PHYSICS_CONSTRAINT = "physics_constraint"


PATH_TIMELINE_KINDS: frozenset[TimelineKind] = frozenset({
    TimelineKind.PATH_CONSTRAINT_MIX,
    TimelineKind.PATH_CONSTRAINT_POSITION,
    TimelineKind.PATH_CONSTRAINT_SPACING,
})


@dataclass(frozen=True)
class Attachment:
    """A slot attachment.

    ``vertex_count`` is the number of 2D vertices (vertex buffer length / 2).
    ``bones`` is the bone-weight list of a weighted mesh; empty for rigid ones.
    """

    name: str
    kind: AttachmentKind
    vertex_count: int = 0
    bones: tuple[int, ...] = ()
    parent_mesh: str | None = None

    @classmethod
    def mesh(
        cls,
        name: str,
        vertex_count: int,
        bones: tuple[int, ...] = (),
        parent_mesh: str | None = None,
    ) -> "Attachment":
        return cls(name, AttachmentKind.MESH, vertex_count, bones, parent_mesh)

    @classmethod
    def clipping(cls, name: str, vertex_count: int) -> "Attachment":
        return cls(name, AttachmentKind.CLIPPING, vertex_count)

    @classmethod
    def region(cls, name: str) -> "Attachment":
        return cls(name, AttachmentKind.OTHER)

    @property
    def is_weighted(self) -> bool:
        return len(self.bones) > 0


@dataclass(eq=False)
class Bone:
    name: str
    parent: "Bone | None" = None
    world_x: float = 0.0
    world_y: float = 0.0

    def ancestry(self) -> Iterator["Bone"]:
        """Yield this bone, then each ancestor up to the root."""
        bone: Bone | None = self
        while bone is not None:
            yield bone
            bone = bone.parent


@dataclass(eq=False)
class Slot:
    name: str
    bone: Bone
    attachment: Attachment | None = None
    alpha: float = 1.0
    blend_mode: BlendMode = BlendMode.NORMAL


@dataclass
class Skin:
    """Named attachment set, keyed by ``(slot_name, attachment_name)``."""

    name: str
    attachments: dict[tuple[str, str], Attachment] = field(default_factory=dict)

    def add(self, slot_name: str, attachment: Attachment) -> None:
        self.attachments[(slot_name, attachment.name)] = attachment


@dataclass(eq=False)
class IkConstraint:
    name: str
    bones: list[Bone]
    target: Bone
    mix: float = 1.0
    softness: float = 0.0
    bend_direction: int = 1
    compress: bool = False
    stretch: bool = False
    active: bool = True

    def is_active(self) -> bool:
        return self.active

    @property
    def affected_bones(self) -> list[Bone]:
        return self.bones


@dataclass(eq=False)
class TransformConstraint:
    name: str
    bones: list[Bone]
    target: Bone
    mix_rotate: float = 1.0
    mix_x: float = 1.0
    mix_y: float = 1.0
    mix_scale_x: float = 1.0
    mix_scale_y: float = 1.0
    mix_shear_y: float = 1.0
    local: bool = False
    relative: bool = False
    active: bool = True

    def is_active(self) -> bool:
        return self.active

    @property
    def affected_bones(self) -> list[Bone]:
        return self.bones

    @property
    def mixes(self) -> tuple[float, ...]:
        return (
            self.mix_rotate,
            self.mix_x,
            self.mix_y,
            self.mix_scale_x,
            self.mix_scale_y,
            self.mix_shear_y,
        )


@dataclass(eq=False)
class PathConstraint:
    name: str
    bones: list[Bone]
    target: Slot
    mix_rotate: float = 1.0
    mix_x: float = 1.0
    mix_y: float = 1.0
    position: float = 0.0
    spacing: float = 0.0
    position_mode: PositionMode = PositionMode.PERCENT
    spacing_mode: SpacingMode = SpacingMode.LENGTH
    rotate_mode: RotateMode = RotateMode.TANGENT
    offset_rotation: float = 0.0
    active: bool = True

    def is_active(self) -> bool:
        return self.active

    @property
    def affected_bones(self) -> list[Bone]:
        return self.bones


@dataclass(eq=False)
class PhysicsConstraint:
    """Physics constraint; ``x``..``shear_x`` are the per-property strengths."""

    name: str
    bone: Bone
    inertia: float = 1.0
    strength: float = 100.0
    damping: float = 1.0
    mass_inverse: float = 1.0
    wind: float = 0.0
    gravity: float = 0.0
    mix: float = 1.0
    x: float = 0.0
    y: float = 0.0
    rotate: float = 0.0
    scale_x: float = 0.0
    shear_x: float = 0.0
    active: bool = True

    def is_active(self) -> bool:
        return self.active

    @property
    def affected_bones(self) -> list[Bone]:
        return [self.bone]


@dataclass(frozen=True)
class Timeline:
    kind: TimelineKind
    index: int = 0
    attachment: Attachment | None = None


@dataclass(frozen=True)
class Animation:
    name: str
    duration: float
    timelines: tuple[Timeline, ...] = ()


@dataclass(eq=False)
class Skeleton:
    """Skeleton data plus its live pose values."""

    name: str = ""
    bones: list[Bone] = field(default_factory=list)
    slots: list[Slot] = field(default_factory=list)
    skins: list[Skin] = field(default_factory=list)
    ik_constraints: list[IkConstraint] = field(default_factory=list)
    transform_constraints: list[TransformConstraint] = field(default_factory=list)
    path_constraints: list[PathConstraint] = field(default_factory=list)
    physics_constraints: list[PhysicsConstraint] = field(default_factory=list)
    animations: list[Animation] = field(default_factory=list)

    def find_slot(self, name: str) -> Slot | None:
        for slot in self.slots:
            if slot.name == name:
                return slot
        return None

    def get_attachment(self, slot_name: str, attachment_name: str) -> Attachment | None:
        """Look an attachment up by name across all skins, first skin wins."""
        for skin in self.skins:
            attachment = skin.attachments.get((slot_name, attachment_name))
            if attachment is not None:
                return attachment
        return None

    def roots(self) -> list[Bone]:
        return [bone for bone in self.bones if bone.parent is None]

    def children_by_parent(self) -> dict[Bone, list[Bone]]:
        """Direct children of every parent bone, in bone order."""
        children: dict[Bone, list[Bone]] = {}
        for bone in self.bones:
            if bone.parent is not None:
                children.setdefault(bone.parent, []).append(bone)
        return children

    def find_animation(self, name: str) -> Animation | None:
        for animation in self.animations:
            if animation.name == name:
                return animation
        return None


@dataclass
class TrackEntry:
    animation_name: str
    loop: bool = False
    track_time: float = 0.0
    animation_last: float = 0.0
    animation_end: float = 0.0


class AnimationPlayer(Protocol):
    """Playback driver owned by the animation runtime.

    ``apply`` writes the current track's pose into the skeleton's bones, slots
    and constraints; ``update_world_transform`` recomputes world positions.
    """

    def current_track(self) -> TrackEntry | None: ...

    def clear_track(self) -> None: ...

    def set_animation(self, name: str, loop: bool) -> TrackEntry: ...

    def apply(self) -> None: ...

    def update_world_transform(self) -> None: ...


@dataclass(eq=False)
class Pose:
    """Resource handle for one skeleton and the player that drives it.

    A pose is shared mutable state. Sampling and analysis calls on the same
    pose must not overlap.
    """

    skeleton: Skeleton
    player: AnimationPlayer
