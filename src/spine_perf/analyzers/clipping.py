"""Clipping mask analysis."""

from dataclasses import dataclass

from spine_perf.analyzers.active import ActiveComponentSet
from spine_perf.model import Animation, AttachmentKind, Pose, Skeleton
from spine_perf.utils.constants import PerformanceFactors, resolve_factors
from spine_perf.utils.scoring import calculate_clipping_score


@dataclass(frozen=True)
class ClippingMetrics:
    active_mask_count: int
    total_vertices: int
    complex_masks: int
    score: float


@dataclass(frozen=True)
class ClippingMaskInfo:
    slot_name: str
    attachment_name: str
    vertex_count: int


@dataclass(frozen=True)
class GlobalClippingAnalysis:
    masks: tuple[ClippingMaskInfo, ...]
    metrics: ClippingMetrics


def clipping_inventory(skeleton: Skeleton) -> list[ClippingMaskInfo]:
    """Every clipping attachment in the skeleton, bound ones first."""
    seen: set[tuple[str, str]] = set()
    masks: list[ClippingMaskInfo] = []

    def add(slot_name: str, name: str, vertex_count: int) -> None:
        if (slot_name, name) in seen:
            return
        seen.add((slot_name, name))
        masks.append(ClippingMaskInfo(slot_name, name, vertex_count))

    for slot in skeleton.slots:
        attachment = slot.attachment
        if attachment is not None and attachment.kind is AttachmentKind.CLIPPING:
            add(slot.name, attachment.name, attachment.vertex_count)

    for skin in skeleton.skins:
        for (slot_name, name), attachment in skin.attachments.items():
            if attachment.kind is AttachmentKind.CLIPPING:
                add(slot_name, name, attachment.vertex_count)
    return masks


def _build_metrics(
    masks: list[ClippingMaskInfo], factors: PerformanceFactors
) -> ClippingMetrics:
    total_vertices = sum(mask.vertex_count for mask in masks)
    complex_masks = sum(
        1 for mask in masks if mask.vertex_count > factors["complex_mask_vertex_threshold"]
    )
    return ClippingMetrics(
        active_mask_count=len(masks),
        total_vertices=total_vertices,
        complex_masks=complex_masks,
        score=calculate_clipping_score(len(masks), total_vertices, complex_masks, factors),
    )


def analyze_clipping_for_animation(
    pose: Pose,
    animation: Animation,
    active: ActiveComponentSet,
    factors: PerformanceFactors | None = None,
) -> ClippingMetrics:
    """Masks the animation actually showed; skin-only masks never count here."""
    factors = factors or resolve_factors()
    masks = [
        mask
        for mask in clipping_inventory(pose.skeleton)
        if (mask.slot_name, mask.attachment_name) in active.clipping_masks
    ]
    return _build_metrics(masks, factors)


def analyze_global_clipping(
    pose: Pose, factors: PerformanceFactors | None = None
) -> GlobalClippingAnalysis:
    factors = factors or resolve_factors()
    masks = clipping_inventory(pose.skeleton)
    return GlobalClippingAnalysis(masks=tuple(masks), metrics=_build_metrics(masks, factors))
