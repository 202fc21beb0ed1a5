"""Tests for blend mode analysis."""

import pytest


class TestAnalyzeBlendModesForAnimation:
    """Tests for analyze_blend_modes_for_animation function."""

    def test_visible_additive_counted(self, hero_pose) -> None:
        """The visible additive slot should count as non-normal and additive."""
        from spine_perf.analyzers.active import get_active_components
        from spine_perf.analyzers.blend_mode import analyze_blend_modes_for_animation

        idle = hero_pose.skeleton.find_animation("idle")
        active = get_active_components(hero_pose, idle)
        metrics = analyze_blend_modes_for_animation(hero_pose, idle, active)

        assert metrics.active_non_normal_count == 1
        assert metrics.active_additive_count == 1
        assert metrics.active_multiply_count == 0
        assert metrics.score == 100.0

    def test_hidden_slot_not_counted(self, hero_pose) -> None:
        """Slots hidden for the whole animation should not count."""
        from spine_perf.analyzers.active import get_active_components
        from spine_perf.analyzers.blend_mode import analyze_blend_modes_for_animation

        still = hero_pose.skeleton.find_animation("still")
        active = get_active_components(hero_pose, still)
        metrics = analyze_blend_modes_for_animation(hero_pose, still, active)
        assert metrics.active_non_normal_count == 0
        assert metrics.score == 100.0

    def test_many_modes_penalized(self, hero_pose) -> None:
        """Additive slots weigh more than other non-normal modes."""
        from spine_perf.analyzers.active import ActiveComponentSet
        from spine_perf.analyzers.blend_mode import analyze_blend_modes_for_animation
        from spine_perf.model import BlendMode

        slots = hero_pose.skeleton.slots
        slots[0].blend_mode = BlendMode.MULTIPLY
        slots[1].blend_mode = BlendMode.SCREEN
        slots[2].blend_mode = BlendMode.ADDITIVE
        idle = hero_pose.skeleton.find_animation("idle")
        active = ActiveComponentSet(slots=frozenset({"body", "head", "hair", "glow"}))

        metrics = analyze_blend_modes_for_animation(hero_pose, idle, active)
        assert metrics.active_non_normal_count == 4
        assert metrics.active_additive_count == 2
        assert metrics.active_multiply_count == 1
        # 4 + 2 * 0.5 = 5 effective against an ideal of 2
        assert metrics.score == pytest.approx(40.0)


class TestAnalyzeGlobalBlendModes:
    """Tests for analyze_global_blend_modes function."""

    def test_histogram_lists_every_mode(self, hero_pose) -> None:
        """Every blend mode should appear in the histogram, even unused ones."""
        from spine_perf.analyzers.blend_mode import analyze_global_blend_modes
        from spine_perf.model import BlendMode

        analysis = analyze_global_blend_modes(hero_pose)
        assert analysis.blend_mode_counts == {
            BlendMode.NORMAL: 4,
            BlendMode.ADDITIVE: 1,
            BlendMode.MULTIPLY: 0,
            BlendMode.SCREEN: 0,
        }
        assert analysis.slots_with_non_normal_blend_mode == {"glow": BlendMode.ADDITIVE}

    def test_empty_skeleton(self, empty_pose) -> None:
        """No slots should give an all-zero histogram and score 100."""
        from spine_perf.analyzers.blend_mode import analyze_global_blend_modes

        analysis = analyze_global_blend_modes(empty_pose)
        assert sum(analysis.blend_mode_counts.values()) == 0
        assert analysis.metrics.score == 100.0
