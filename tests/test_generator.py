"""Tests for numeric code generation."""

from unittest.mock import patch

import pytest

from otp_gateway.otp.generator import generate_code


def test_default_code_is_six_digits():
    for _ in range(200):
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()


def test_leading_zeros_are_kept():
    with patch("otp_gateway.otp.generator.secrets.randbelow", return_value=42):
        assert generate_code() == "000042"


def test_full_range_upper_bound():
    with patch("otp_gateway.otp.generator.secrets.randbelow", return_value=999_999) as rb:
        assert generate_code() == "999999"
    rb.assert_called_once_with(1_000_000)


def test_custom_length():
    assert len(generate_code(8)) == 8


def test_rejects_non_positive_length():
    with pytest.raises(ValueError):
        generate_code(0)
