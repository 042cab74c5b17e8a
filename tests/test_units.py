"""Tests for rbd_form.units — binary size conversion."""

from __future__ import annotations

import pytest

from rbd_form.exceptions import UnitConversionError
from rbd_form.units import from_bytes, parse_bytes, to_bytes

KiB = 1024
MiB = 1024**2
GiB = 1024**3


class TestParseBytes:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("4MiB", 4 * MiB),
            ("4 MiB", 4 * MiB),
            ("4mib", 4 * MiB),
            ("512KiB", 512 * KiB),
            ("8k", 8 * KiB),
            ("2G", 2 * GiB),
            ("2GB", 2 * GiB),
            ("1.5GiB", 1536 * MiB),
            ("100", 100),
            ("100B", 100),
            ("1TiB", 1024**4),
        ],
    )
    def test_valid(self, text: str, expected: int) -> None:
        assert parse_bytes(text) == expected

    def test_exact_for_large_values(self) -> None:
        assert parse_bytes("1.1EiB") == (11 * 1024**6 + 5) // 10
        assert parse_bytes("3YiB") == 3 * 1024**8

    def test_exact_for_huge_values(self) -> None:
        assert parse_bytes("1000000YiB") == 10**6 * 1024**8
        assert parse_bytes("123456789012345678901234567890") == 123456789012345678901234567890

    def test_rounds_half_up(self) -> None:
        assert parse_bytes("0.5") == 1
        assert parse_bytes("1.5k") == 1536

    def test_int_passthrough(self) -> None:
        assert parse_bytes(4096) == 4096

    @pytest.mark.parametrize("text", ["", "abc", "4XiB", "-4MiB", "4 M iB", "MiB", "4ib"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(UnitConversionError):
            parse_bytes(text)

    def test_negative_int(self) -> None:
        with pytest.raises(UnitConversionError):
            parse_bytes(-1)


class TestToBytes:
    def test_none_and_blank(self) -> None:
        assert to_bytes(None) is None
        assert to_bytes("") is None
        assert to_bytes("   ") is None

    def test_malformed_is_none(self) -> None:
        assert to_bytes("lots") is None

    def test_valid(self) -> None:
        assert to_bytes("4MiB") == 4 * MiB

    def test_huge_values(self) -> None:
        assert to_bytes("1000000YiB") == 10**6 * 1024**8


class TestFromBytes:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "0B"),
            (1023, "1023B"),
            (1024, "1KiB"),
            (4 * MiB, "4MiB"),
            (1536 * MiB, "1.5GiB"),
            (10 * GiB, "10GiB"),
        ],
    )
    def test_render(self, value: int, expected: str) -> None:
        assert from_bytes(value) == expected

    def test_truncates_instead_of_rounding(self) -> None:
        # 1.99 GiB
        assert from_bytes(int(1.99 * GiB)) == "1.9GiB"

    def test_more_decimals(self) -> None:
        assert from_bytes(int(1.25 * GiB), decimals=2) == "1.25GiB"

    def test_negative(self) -> None:
        with pytest.raises(UnitConversionError):
            from_bytes(-5)

    @pytest.mark.parametrize("text", ["4KiB", "32MiB", "1.5GiB", "7TiB"])
    def test_display_forms_parse_back(self, text: str) -> None:
        assert from_bytes(parse_bytes(text)) == text

    @pytest.mark.parametrize("value", [1664090112, 4 * MiB + 1, 1023, 10 * GiB, 3 * 1024**8 + 7])
    def test_exact_parses_back(self, value: int) -> None:
        assert parse_bytes(from_bytes(value, exact=True)) == value

    def test_exact_keeps_short_forms(self) -> None:
        assert from_bytes(1664090112, exact=True) == "1.5498046875GiB"
        assert from_bytes(1536 * MiB, exact=True) == "1.5GiB"
