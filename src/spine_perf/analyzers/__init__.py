"""Analyzers for active components, skeleton, meshes, clipping, blend modes and constraints."""

from spine_perf.analyzers.active import (
    ActiveComponentSet,
    ActiveConstraints,
    detect_frame_state,
    detect_timeline_usage,
    get_active_components,
    union_components,
)
from spine_perf.analyzers.blend_mode import (
    analyze_blend_modes_for_animation,
    analyze_global_blend_modes,
)
from spine_perf.analyzers.clipping import (
    analyze_clipping_for_animation,
    analyze_global_clipping,
)
from spine_perf.analyzers.constraints import (
    analyze_constraints_for_animation,
    analyze_global_physics,
)
from spine_perf.analyzers.mesh import analyze_global_meshes, analyze_meshes_for_animation
from spine_perf.analyzers.skeleton import analyze_skeleton_structure

__all__ = [
    "ActiveComponentSet",
    "ActiveConstraints",
    "analyze_blend_modes_for_animation",
    "analyze_clipping_for_animation",
    "analyze_constraints_for_animation",
    "analyze_global_blend_modes",
    "analyze_global_clipping",
    "analyze_global_meshes",
    "analyze_global_physics",
    "analyze_meshes_for_animation",
    "analyze_skeleton_structure",
    "detect_frame_state",
    "detect_timeline_usage",
    "get_active_components",
    "union_components",
]
