from datetime import datetime

from pumpctl.console import Color, Console


def fixed_clock():
    return datetime(2024, 1, 2, 13, 45, 7)


def test_write_formats_html_with_colour():
    console = Console(clock=fixed_clock)
    console.write("Protocol started.", Color.GREEN)
    assert console.html() == (
        "<code>13:45:07 | "
        f'<span style="white-space: pre-wrap; color: {Color.GREEN.value}">'
        "Protocol started.</span></code><br>"
    )


def test_write_without_colour_uses_default():
    console = Console(default_color="#123456", clock=fixed_clock)
    entry = console.write("hello")
    assert entry.color == "#123456"
    assert "color: #123456" in console.html()


def test_write_accepts_plain_colour_string():
    console = Console(clock=fixed_clock)
    entry = console.write("x", "#abcdef")
    assert entry.color == "#abcdef"


def test_plain_text_joins_lines():
    console = Console(clock=fixed_clock)
    console.write("first", Color.RED)
    console.write("second", Color.BLUE)
    assert console.plain_text() == "13:45:07 | first\n13:45:07 | second"
    assert len(console) == 2


def test_clear_empties_log():
    console = Console(clock=fixed_clock)
    console.write("something", Color.YELLOW)
    console.clear()
    assert console.plain_text() == ""
    assert console.html() == ""
    assert len(console) == 0


def test_save_writes_both_files(tmp_path):
    console = Console(clock=fixed_clock)
    console.write("Console cleared!", Color.YELLOW)
    plain_path, color_path = console.save(tmp_path / "log")
    assert plain_path.name == "log.txt"
    assert color_path.name == "log_colors.md"
    assert plain_path.read_text(encoding="utf-8") == console.plain_text()
    assert color_path.read_text(encoding="utf-8") == console.html()


def test_entries_is_a_copy():
    console = Console(clock=fixed_clock)
    console.write("a")
    entries = console.entries
    entries.clear()
    assert len(console.entries) == 1