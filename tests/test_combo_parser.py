"""Tests for winhost.combo_parser (pure Python, runs on any platform).

Run with:
    pytest tests/test_combo_parser.py -v
"""

import pytest

from solowindow.winhost.combo_parser import (
    MOD_ALT,
    MOD_CONTROL,
    MOD_SHIFT,
    MOD_WIN,
    Combo,
    ComboParseError,
    is_valid_combo,
    parse_combo,
)


class TestParseCombo:
    def test_default_pin_combo(self):
        assert parse_combo("alt+shift+p") == Combo(MOD_ALT | MOD_SHIFT, 0x50)

    def test_case_and_spaces_are_ignored(self):
        assert parse_combo(" Alt + Shift + P ") == parse_combo("alt+shift+p")

    def test_aliases(self):
        assert parse_combo("super+f1") == Combo(MOD_WIN, 0x70)
        assert parse_combo("control+enter") == Combo(MOD_CONTROL, 0x0D)

    def test_key_without_modifiers(self):
        assert parse_combo("pause") == Combo(0, 0x13)

    @pytest.mark.parametrize(
        "combo",
        ["", "+", "alt+shift", "alt+alt+p", "alt+p+q", "alt+hyper+p", "alt+f25"],
    )
    def test_invalid(self, combo):
        with pytest.raises(ComboParseError):
            parse_combo(combo)
        assert not is_valid_combo(combo)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError, match="No key"):
            parse_combo("ctrl+alt")


class TestComboStr:
    def test_modifier_order_is_fixed(self):
        assert str(parse_combo("shift+alt+ctrl+win+p")) == "Win+Ctrl+Alt+Shift+P"

    def test_named_key(self):
        assert str(parse_combo("alt+return")) == "Alt+Enter"

    def test_unknown_vk_is_hex(self):
        assert str(Combo(MOD_ALT, 0xFF)) == "Alt+0xFF"
