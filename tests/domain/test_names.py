"""Tests for variable name validation."""

from __future__ import annotations

import pytest

from menv.domain.errors import InvalidNameError
from menv.domain.names import is_valid_name, validate_name


class TestIsValidName:
    @pytest.mark.parametrize("name", ["PATH", "_X", "a1", "JAVA_HOME", "_", "x"])
    def test_accepts(self, name: str) -> None:
        assert is_valid_name(name)

    @pytest.mark.parametrize("name", ["", "1A", "A-B", "A B", "A.B", "$PATH", "A=B", "ÄB"])
    def test_rejects(self, name: str) -> None:
        assert not is_valid_name(name)

    def test_trailing_newline_is_rejected(self) -> None:
        assert not is_valid_name("PATH\n")


class TestValidateName:
    def test_returns_name_unchanged(self) -> None:
        assert validate_name("EDITOR") == "EDITOR"

    def test_empty_name(self) -> None:
        with pytest.raises(InvalidNameError, match="cannot be empty"):
            validate_name("")

    def test_invalid_name_carries_detail(self) -> None:
        with pytest.raises(InvalidNameError) as info:
            validate_name("1A")
        assert info.value.code == "INVALID_NAME"
        assert info.value.detail == {"name": "1A"}
