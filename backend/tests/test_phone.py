"""Tests for phone helpers."""
import pytest

from storefront.domain.phone import (
    is_valid_phone,
    normalize_phone,
    parse_pasted_contact,
    to_ascii_digits,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("01712345678", "01712345678"),
        ("+8801712345678", "01712345678"),
        ("8801712345678", "01712345678"),
        ("017-1234 5678", "01712345678"),
        ("1712345678", "01712345678"),
        ("০১৭১২৩৪৫৬৭৮", "01712345678"),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_normalize_empty():
    assert normalize_phone(None) == ""


def test_validation():
    assert is_valid_phone("01712345678")
    assert is_valid_phone("+8801912345678")
    assert is_valid_phone("017 1234 5678")
    assert not is_valid_phone("01212345678")
    assert not is_valid_phone("0171234567")
    assert not is_valid_phone("")


def test_local_digits():
    assert to_ascii_digits("৳১২০") == "৳120"


def test_paste_with_name_phone_address_lines():
    parsed = parse_pasted_contact("Rahim Uddin\n01712345678\nHouse 5, Road 2, Dhanmondi")
    assert parsed == {
        "phone": "01712345678",
        "name": "Rahim Uddin",
        "address": "House 5, Road 2, Dhanmondi",
    }


def test_paste_without_a_name():
    parsed = parse_pasted_contact("House 12, Mirpur 10 01812345678")
    assert parsed["phone"] == "01812345678"
    assert "name" not in parsed
    assert parsed["address"].startswith("House 12")


def test_paste_with_bengali_digits():
    assert parse_pasted_contact("Karim, ০১৯১২৩৪৫৬৭৮, Sylhet")["phone"] == "01912345678"
