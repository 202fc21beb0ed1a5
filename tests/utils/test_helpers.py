"""Tests for utility helper functions."""


class TestMeshKey:
    """Tests for mesh_key and split_mesh_key functions."""

    def test_joins_with_colon(self) -> None:
        """Keys should be slot and attachment joined by a colon."""
        from spine_perf.utils import mesh_key

        assert mesh_key("body", "torso_mesh") == "body:torso_mesh"

    def test_split_roundtrip(self) -> None:
        """Splitting should recover both names."""
        from spine_perf.utils import mesh_key, split_mesh_key

        assert split_mesh_key(mesh_key("hair", "front")) == ("hair", "front")

    def test_colon_in_attachment_name(self) -> None:
        """Only the first colon should separate slot from attachment."""
        from spine_perf.utils import split_mesh_key

        assert split_mesh_key("cape:layer:2") == ("cape", "layer:2")


class TestClamp:
    """Tests for clamp function."""

    def test_within_range(self) -> None:
        from spine_perf.utils import clamp

        assert clamp(0.5, 0.0, 1.0) == 0.5

    def test_clamps_both_ends(self) -> None:
        """Values outside the range should snap to the nearest bound."""
        from spine_perf.utils import clamp

        assert clamp(-3.0, 0.0, 1.0) == 0.0
        assert clamp(7.0, 0.0, 1.0) == 1.0


class TestLogging:
    """Tests for logging helpers."""

    def test_debug_silent_by_default(self, capsys) -> None:
        """Debug messages should only print in verbose mode."""
        from spine_perf.utils.logging import log_debug, set_verbose

        set_verbose(False)
        log_debug("hidden")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

        set_verbose(True)
        try:
            log_debug("shown")
        finally:
            set_verbose(False)
        captured = capsys.readouterr()
        assert "shown" in captured.err
        assert captured.out == ""

    def test_level_labels_aligned(self, capsys) -> None:
        """Report lines should right-align their level label on stdout."""
        from spine_perf.utils.logging import log_error, log_info, log_ok

        log_info("a")
        log_ok("b")
        log_error("c")
        assert capsys.readouterr().out.splitlines() == ["  INFO  a", "    OK  b", " ERROR  c"]

    def test_score_color_plain_when_not_a_terminal(self) -> None:
        """Scores should print with one decimal and no escapes off a terminal."""
        from spine_perf.utils.logging import score_color

        assert score_color(92.345, poor=55.0) == "92.3"
        assert score_color(10.0, poor=55.0) == "10.0"

    def test_format_duration(self) -> None:
        """Durations should pick a readable unit."""
        from spine_perf.utils.logging import format_duration

        assert format_duration(0.0005) == "500μs"
        assert format_duration(0.25) == "250.0ms"
        assert format_duration(2.5) == "2.50s"
        assert format_duration(90) == "1m 30.0s"

    def test_timed_records_elapsed(self) -> None:
        """timed() should fill in the elapsed time on exit."""
        from spine_perf.utils.logging import timed

        with timed("noop") as t:
            pass
        assert t.elapsed >= 0.0
        assert t.message == "noop"
