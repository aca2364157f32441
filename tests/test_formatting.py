"""Tests for formatting utilities."""

from shared_info.formatting import display_name, process_label, wrap_text


class TestWrapText:
    """Tests for wrap_text."""

    def test_short_text_unchanged(self) -> None:
        assert wrap_text("/usr/lib/libc.so.6", 40) == "/usr/lib/libc.so.6"

    def test_exact_width_unchanged(self) -> None:
        assert wrap_text("abcd", 4) == "abcd"

    def test_splits_every_width_chars(self) -> None:
        """Each line holds exactly width characters except the last."""
        assert wrap_text("/usr/lib/libc.so.6", 8) == "/usr/lib\n/libc.so\n.6"

    def test_zero_width_disables(self) -> None:
        assert wrap_text("x" * 500, 0) == "x" * 500

    def test_empty(self) -> None:
        assert wrap_text("", 5) == ""

    def test_no_characters_lost(self) -> None:
        text = "/opt/vendor/toolkit/lib64/libtoolkit-core.so.12.4.1"
        assert wrap_text(text, 7).replace("\n", "") == text


def test_display_name_fallback() -> None:
    """Processes with no name show as "?"."""
    assert display_name(None) == "?"
    assert display_name("") == "?"
    assert display_name("/usr/bin/app") == "/usr/bin/app"


def test_process_label() -> None:
    assert process_label(100, "/usr/bin/app") == "/usr/bin/app (100)"
    assert process_label(7, None) == "? (7)"
