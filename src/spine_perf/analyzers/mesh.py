"""Mesh attachment analysis: vertex load, deformation and bone weights."""

from collections.abc import Iterable
from dataclasses import dataclass

from spine_perf.analyzers.active import ActiveComponentSet
from spine_perf.model import (
    Animation,
    Attachment,
    AttachmentKind,
    Pose,
    Skeleton,
    TimelineKind,
)
from spine_perf.utils import mesh_key, split_mesh_key
from spine_perf.utils.constants import PerformanceFactors, resolve_factors
from spine_perf.utils.logging import log_debug
from spine_perf.utils.scoring import calculate_mesh_score


@dataclass(frozen=True)
class MeshMetrics:
    active_mesh_count: int
    total_vertices: int
    weighted_mesh_count: int
    deformed_mesh_count: int
    avg_vertices_per_mesh: float
    high_vertex_meshes: int
    complex_meshes: int
    score: float


@dataclass(frozen=True)
class MeshInfo:
    slot_name: str
    attachment_name: str
    vertices: int
    is_deformed: bool
    bone_weights: int
    has_parent_mesh: bool


@dataclass(frozen=True)
class GlobalMeshAnalysis:
    meshes: tuple[MeshInfo, ...]
    metrics: MeshMetrics


def deformed_mesh_keys(animations: Iterable[Animation], skeleton: Skeleton) -> set[str]:
    """Mesh keys targeted by a deform timeline in any of ``animations``."""
    keys: set[str] = set()
    for animation in animations:
        for timeline in animation.timelines:
            if timeline.kind is not TimelineKind.DEFORM:
                continue
            attachment = timeline.attachment
            if not 0 <= timeline.index < len(skeleton.slots) or attachment is None:
                continue
            if attachment.kind is AttachmentKind.MESH:
                keys.add(mesh_key(skeleton.slots[timeline.index].name, attachment.name))
    return keys


def resolve_mesh(skeleton: Skeleton, key: str) -> Attachment | None:
    """
    Find the live mesh attachment for a ``slot:attachment`` key.

    Prefers the slot's bound attachment when its name matches, then the skins.
    Returns None when the key no longer resolves to a mesh.
    """
    slot_name, attachment_name = split_mesh_key(key)
    slot = skeleton.find_slot(slot_name)
    if slot is None:
        return None

    current = slot.attachment
    if current is not None and current.name == attachment_name:
        attachment: Attachment | None = current
    else:
        attachment = skeleton.get_attachment(slot_name, attachment_name)

    if attachment is None or attachment.kind is not AttachmentKind.MESH:
        return None
    return attachment


def _build_metrics(
    meshes: list[tuple[Attachment, bool]], factors: PerformanceFactors
) -> MeshMetrics:
    """Aggregate (attachment, is_deformed) pairs into scored metrics."""
    count = len(meshes)
    total_vertices = sum(mesh.vertex_count for mesh, _ in meshes)
    weighted = sum(1 for mesh, _ in meshes if mesh.is_weighted)
    deformed = sum(1 for _, is_deformed in meshes if is_deformed)

    high_vertex = sum(
        1 for mesh, _ in meshes if mesh.vertex_count > factors["high_vertex_mesh_threshold"]
    )
    complex_meshes = sum(
        1
        for mesh, is_deformed in meshes
        if mesh.vertex_count > factors["complex_mesh_vertex_threshold"]
        and (is_deformed or mesh.is_weighted)
    )

    return MeshMetrics(
        active_mesh_count=count,
        total_vertices=total_vertices,
        weighted_mesh_count=weighted,
        deformed_mesh_count=deformed,
        avg_vertices_per_mesh=total_vertices / count if count > 0 else 0.0,
        high_vertex_meshes=high_vertex,
        complex_meshes=complex_meshes,
        score=calculate_mesh_score(count, total_vertices, deformed, weighted, factors),
    )


def analyze_meshes_for_animation(
    pose: Pose,
    animation: Animation,
    active: ActiveComponentSet,
    factors: PerformanceFactors | None = None,
) -> MeshMetrics:
    """Analyze the meshes ``animation`` actually shows or deforms."""
    factors = factors or resolve_factors()
    skeleton = pose.skeleton
    deformed_keys = deformed_mesh_keys([animation], skeleton)

    meshes: list[tuple[Attachment, bool]] = []
    for key in sorted(active.meshes):
        attachment = resolve_mesh(skeleton, key)
        if attachment is None:
            log_debug(f"'{animation.name}': mesh {key} no longer resolves, skipped")
            continue
        meshes.append((attachment, key in deformed_keys))

    return _build_metrics(meshes, factors)


def _mesh_inventory(skeleton: Skeleton) -> dict[str, tuple[str, Attachment]]:
    """Every mesh attachment in the skeleton, bound ones first, keyed by mesh key."""
    inventory: dict[str, tuple[str, Attachment]] = {}
    for slot in skeleton.slots:
        attachment = slot.attachment
        if attachment is not None and attachment.kind is AttachmentKind.MESH:
            inventory[mesh_key(slot.name, attachment.name)] = (slot.name, attachment)

    for skin in skeleton.skins:
        for (slot_name, attachment_name), attachment in skin.attachments.items():
            if attachment.kind is not AttachmentKind.MESH:
                continue
            inventory.setdefault(mesh_key(slot_name, attachment_name), (slot_name, attachment))
    return inventory


def analyze_global_meshes(
    pose: Pose, factors: PerformanceFactors | None = None
) -> GlobalMeshAnalysis:
    """Inventory every mesh attachment and score the whole set."""
    factors = factors or resolve_factors()
    skeleton = pose.skeleton
    deformed_keys = deformed_mesh_keys(skeleton.animations, skeleton)

    infos: list[MeshInfo] = []
    meshes: list[tuple[Attachment, bool]] = []
    for key, (slot_name, attachment) in _mesh_inventory(skeleton).items():
        is_deformed = key in deformed_keys
        meshes.append((attachment, is_deformed))
        infos.append(
            MeshInfo(
                slot_name=slot_name,
                attachment_name=attachment.name,
                vertices=attachment.vertex_count,
                is_deformed=is_deformed,
                bone_weights=len(attachment.bones),
                has_parent_mesh=attachment.parent_mesh is not None,
            )
        )

    # Heaviest meshes first
    infos.sort(key=lambda info: info.vertices, reverse=True)

    return GlobalMeshAnalysis(meshes=tuple(infos), metrics=_build_metrics(meshes, factors))
