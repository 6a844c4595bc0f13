"""
Tests for numeric normalization and display formatting.
"""

import math

import pytest

from ixtract.models.financial import Unit
from ixtract.parser.values import (
    apply_scale,
    format_financial_value,
    normalize_value,
    unit_display_label,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1,234", 1234),
        ("(1,234)", -1234),
        ("（1,234）", -1234),
        ("△500", -500),
        ("▲500", -500),
        ("−300", -300),
        ("-42", -42),
        (" 1 234 ", 1234),
        ("1，000", 1000),
        ("12.5", 12.5),
        ("(△100)", -100),
        ("12.5%", 12.5),
        ("1,000円", 1000),
        ("1,000 百万円", 1000),
        ("△1,200千円", -1200),
        ("1.2.3", 1.2),
        ("1e3", 1000),
    ],
)
def test_normalize_value_parses_locale_formats(text, expected):
    assert normalize_value(text) == expected


@pytest.mark.parametrize("text", [None, "", "   ", "-", "－", "—", "abc", "△", "円", "%5", "n/a"])
def test_normalize_value_rejects_non_numbers(text):
    assert normalize_value(text) is None


def test_normalize_value_passes_numbers_through():
    assert normalize_value(10) == 10
    assert normalize_value(-2.5) == -2.5
    assert normalize_value(float("nan")) is None
    assert normalize_value(True) is None


def test_normalize_value_never_returns_nan_or_inf():
    for text in ("nan", "inf", "-inf", "Infinity", "1e999"):
        value = normalize_value(text)
        assert value is None or not (math.isnan(value) or math.isinf(value))


def test_apply_scale():
    assert apply_scale(1.5, "6") == 1_500_000
    assert apply_scale(100, None) == 100
    assert apply_scale(100, "bad") == 100


def test_format_financial_value_with_scale_and_unit():
    unit = Unit(id="JPY", measure="iso4217:JPY", symbol="¥")
    assert format_financial_value("1,000", decimals="-6", scale="6", unit=unit) == "1,000,000,000円"


def test_format_financial_value_keeps_unparseable_text():
    assert format_financial_value("n/a") == "n/a"
    assert format_financial_value(None) == ""
    assert format_financial_value("△1,234.5", decimals="1") == "-1,234.5"


def test_unit_display_label_falls_back_to_symbol():
    assert unit_display_label(Unit(id="U", measure="xbrli:shares", symbol="株")) == "株"
    assert unit_display_label(Unit(id="U", measure="iso4217:CHF", symbol="CHF")) == "CHF"
