"""Skeleton structure analysis: bone count, roots and hierarchy depth."""

from dataclasses import dataclass, field

from spine_perf.model import Bone, Pose, Skeleton
from spine_perf.utils.constants import PerformanceFactors, resolve_factors
from spine_perf.utils.scoring import calculate_bone_score


@dataclass(frozen=True)
class BoneNode:
    name: str
    x: float
    y: float
    children: tuple["BoneNode", ...] = field(default_factory=tuple)

    def depth(self) -> int:
        """Longest chain below this node; a leaf has depth 0."""
        deepest = 0
        stack = [(self, 0)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children)
        return deepest


@dataclass(frozen=True)
class SkeletonMetrics:
    total_bones: int
    root_bones: int
    max_depth: int
    score: float


@dataclass(frozen=True)
class SkeletonAnalysis:
    bone_tree: tuple[BoneNode, ...]
    metrics: SkeletonMetrics


def build_bone_tree(skeleton: Skeleton) -> tuple[BoneNode, ...]:
    """Build one tree per root bone from the parent links.

    Nodes are frozen, so the walk is post-order: children are built before
    their parent. No recursion, so chain length is unbounded.
    """
    children = skeleton.children_by_parent()
    built: dict[Bone, BoneNode] = {}

    roots = skeleton.roots()
    stack: list[tuple[Bone, bool]] = [(root, False) for root in reversed(roots)]
    while stack:
        bone, expanded = stack.pop()
        kids = children.get(bone, [])
        if not expanded:
            stack.append((bone, True))
            stack.extend((child, False) for child in reversed(kids))
            continue
        built[bone] = BoneNode(
            name=bone.name,
            x=round(bone.world_x, 2),
            y=round(bone.world_y, 2),
            children=tuple(built[child] for child in kids),
        )

    return tuple(built[root] for root in roots)


def calculate_max_depth(tree: tuple[BoneNode, ...]) -> int:
    """Deepest root-to-leaf chain; roots are depth 0, no bones is 0."""
    if not tree:
        return 0
    return max(node.depth() for node in tree)


def analyze_skeleton_structure(
    pose: Pose, factors: PerformanceFactors | None = None
) -> SkeletonAnalysis:
    """Analyze the bone hierarchy. Independent of any animation."""
    factors = factors or resolve_factors()
    skeleton = pose.skeleton

    tree = build_bone_tree(skeleton)
    total_bones = len(skeleton.bones)
    max_depth = calculate_max_depth(tree)

    return SkeletonAnalysis(
        bone_tree=tree,
        metrics=SkeletonMetrics(
            total_bones=total_bones,
            root_bones=len(tree),
            max_depth=max_depth,
            score=calculate_bone_score(total_bones, max_depth, factors),
        ),
    )
