"""Tests for skeleton structure analysis."""

import pytest


class TestBuildBoneTree:
    """Tests for build_bone_tree function."""

    def test_single_root_tree(self, hero_pose) -> None:
        """Bones should nest under their parents."""
        from spine_perf.analyzers.skeleton import build_bone_tree

        tree = build_bone_tree(hero_pose.skeleton)
        assert [node.name for node in tree] == ["root"]
        hip = tree[0].children[0]
        assert hip.name == "hip"
        assert [child.name for child in hip.children[0].children] == ["head", "arm"]

    def test_positions_rounded(self, hero_pose) -> None:
        """World positions should be rounded to two decimals."""
        from spine_perf.analyzers.skeleton import build_bone_tree

        hip = build_bone_tree(hero_pose.skeleton)[0].children[0]
        assert (hip.x, hip.y) == (10.0, 20.01)

    def test_multiple_roots(self) -> None:
        """Each parentless bone should start its own tree."""
        from spine_perf.analyzers.skeleton import build_bone_tree
        from spine_perf.model import Bone, Skeleton

        a, b = Bone("a"), Bone("b")
        tree = build_bone_tree(Skeleton(bones=[a, b, Bone("c", b)]))
        assert [node.name for node in tree] == ["a", "b"]
        assert tree[1].children[0].name == "c"


class TestCalculateMaxDepth:
    """Tests for calculate_max_depth function."""

    def test_empty_tree(self) -> None:
        """No bones should mean depth 0."""
        from spine_perf.analyzers.skeleton import calculate_max_depth

        assert calculate_max_depth(()) == 0

    def test_root_only(self) -> None:
        """A lone root should be depth 0."""
        from spine_perf.analyzers.skeleton import BoneNode, calculate_max_depth

        assert calculate_max_depth((BoneNode("root", 0.0, 0.0),)) == 0

    def test_chain_depth(self, hero_pose) -> None:
        """The deepest chain root-hip-torso-arm-hand should be depth 4."""
        from spine_perf.analyzers.skeleton import build_bone_tree, calculate_max_depth

        assert calculate_max_depth(build_bone_tree(hero_pose.skeleton)) == 4


class TestAnalyzeSkeletonStructure:
    """Tests for analyze_skeleton_structure function."""

    def test_metrics(self, hero_pose) -> None:
        """Small, shallow skeletons should score 100."""
        from spine_perf.analyzers.skeleton import analyze_skeleton_structure

        metrics = analyze_skeleton_structure(hero_pose).metrics
        assert metrics.total_bones == 6
        assert metrics.root_bones == 1
        assert metrics.max_depth == 4
        assert metrics.score == 100.0

    def test_empty_skeleton(self, empty_pose) -> None:
        """No bones should give zero metrics and a perfect score."""
        from spine_perf.analyzers.skeleton import analyze_skeleton_structure

        analysis = analyze_skeleton_structure(empty_pose)
        assert analysis.bone_tree == ()
        assert analysis.metrics.total_bones == 0
        assert analysis.metrics.score == 100.0

    def test_deep_chain_penalized(self, make_pose) -> None:
        """A chain deeper than the depth factor should score below 100."""
        from spine_perf.analyzers.skeleton import analyze_skeleton_structure
        from spine_perf.model import Bone, Skeleton

        bones = [Bone("b0")]
        for i in range(1, 11):
            bones.append(Bone(f"b{i}", bones[-1]))

        metrics = analyze_skeleton_structure(make_pose(Skeleton(bones=bones))).metrics
        assert metrics.max_depth == 10
        assert metrics.score == pytest.approx(50.0)

    def test_factor_override(self, hero_pose) -> None:
        """Overridden factors should change the score."""
        from spine_perf.analyzers.skeleton import analyze_skeleton_structure
        from spine_perf.utils.constants import resolve_factors

        factors = resolve_factors({"ideal_bone_count": 3})
        metrics = analyze_skeleton_structure(hero_pose, factors).metrics
        assert metrics.score == pytest.approx(50.0)

    def test_very_long_chain(self, make_pose) -> None:
        """A chain far deeper than the recursion limit should still be measured."""
        from spine_perf.analyzers.skeleton import analyze_skeleton_structure
        from spine_perf.model import Bone, Skeleton

        bones = [Bone("b0")]
        for i in range(1, 5000):
            bones.append(Bone(f"b{i}", bones[-1]))

        analysis = analyze_skeleton_structure(make_pose(Skeleton(bones=bones)))
        assert analysis.metrics.max_depth == 4999
        assert analysis.metrics.root_bones == 1
        assert analysis.bone_tree[0].name == "b0"
