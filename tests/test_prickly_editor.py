import pytest

pytest.importorskip("tkinter")

from prickly.core.input_events import MOD_CONTROL, MOD_SHIFT, KeyEvent  # noqa: E402
from prickly_editor import build_arg_parser, translate_key  # noqa: E402


def test_translate_named_keys():
    assert translate_key("Return", "\r", 0) == KeyEvent("Enter")
    assert translate_key("Escape", "\x1b", 0) == KeyEvent("Esc")
    assert translate_key("Up", "", 0x1) == KeyEvent("Up", MOD_SHIFT)
    assert translate_key("Tab", "\t", 0x1) == KeyEvent("BackTab", MOD_SHIFT)
    assert translate_key("ISO_Left_Tab", "", 0x1) == KeyEvent("BackTab", MOD_SHIFT)


def test_translate_characters():
    assert translate_key("A", "A", 0x1) == KeyEvent("A")
    assert translate_key("slash", "/", 0) == KeyEvent("/")
    assert translate_key("o", "\x0f", 0x4) == KeyEvent("o", MOD_CONTROL)
    assert translate_key("Shift_L", "", 0x1) is None


def test_arg_parser():
    args = build_arg_parser().parse_args(["doc.json", "--labels", "l.csv", "--log-level", "DEBUG"])
    assert (args.file, args.labels, args.log_level) == ("doc.json", "l.csv", "DEBUG")
    assert build_arg_parser().parse_args([]).file is None
