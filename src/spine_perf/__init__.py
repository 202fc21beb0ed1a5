"""
Skeletal Animation Performance Analyzer
=======================================
Scores how expensive each animation of a 2D skeleton is to play back.

For every animation the analyzer samples the pose over time, works out which
slots, meshes, clipping masks, blend modes and constraints are actually in
use, and turns that into per-category 0-100 scores plus an overall score.

Checks:
- Bone count and hierarchy depth
- Mesh vertex load, deformation and bone weights
- Clipping masks and their complexity
- Non-normal (additive, multiply, screen) blend modes
- IK, transform, path and physics constraints

Usage:
    CLI:
        spine-perf mypkg.assets:load_hero
        spine-perf mypkg.assets:load_hero --json --sample-rate 60

    Python:
        from spine_perf import analyze
        result = analyze(pose)
"""

from importlib.metadata import PackageNotFoundError, version

from spine_perf.report import analyze

try:
    __version__ = version("spine-perf")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = ["analyze"]
