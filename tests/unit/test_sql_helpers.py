"""
Tests for helpers in the SQL repository module.
"""

import pytest

from wattleos.repositories.sql import escape_like


class TestEscapeLike:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Pink Tower", "Pink Tower"),
            ("100%", "100\\%"),
            ("snake_case", "snake\\_case"),
            ("C:\\path", "C:\\\\path"),
            ("%_\\", "\\%\\_\\\\"),
        ],
    )
    def test_wildcards_escaped(self, text, expected):
        assert escape_like(text) == expected

    def test_custom_escape_character(self):
        assert escape_like("50% off!", escape="!") == "50!% off!!"
