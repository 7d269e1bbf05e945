import pytest

from profgraph.measurement import (
    is_memory_unit,
    is_time_unit,
    label,
    percentage,
    scale,
    scaled_label,
)


@pytest.mark.parametrize(
    "value, from_unit, to_unit, want_value, want_unit",
    [
        (1, "s", "ms", 1000, "ms"),
        (1, "kb", "b", 1024, "B"),
        (1, "kbyte", "b", 1024, "B"),
        (1, "kilobyte", "b", 1024, "B"),
        (1, "mb", "kb", 1024, "kB"),
        (1, "gb", "mb", 1024, "MB"),
        (1024, "gb", "tb", 1, "TB"),
        (1024, "tb", "pb", 1, "PB"),
        (2048, "mb", "auto", 2, "GB"),
        (31536000, "s", "auto", 1, "yrs"),
        (-1, "s", "ms", -1000, "ms"),
        (1, "foo", "count", 1, ""),
        (1, "foo", "bar", 1, "bar"),
    ],
)
def test_scale(value, from_unit, to_unit, want_value, want_unit):
    assert scale(value, from_unit, to_unit) == (want_value, want_unit)


def test_scale_cycles_has_no_unit():
    assert scale(42, "cycles", "ms") == (42.0, "")


def test_scale_minimum_picks_small_time_unit():
    assert scale(1500, "ns", "minimum") == (1.5, "us")


def test_scale_negative_is_symmetric():
    pos_value, pos_unit = scale(3000, "ms", "auto")
    neg_value, neg_unit = scale(-3000, "ms", "auto")
    assert neg_value == -pos_value
    assert neg_unit == pos_unit


@pytest.mark.parametrize(
    "value, unit, want",
    [
        (0, "b", "0"),
        (2048, "mb", "2GB"),
        (1536, "b", "1.50kB"),
        (-1, "s", "-1s"),
        (7, "count", "7"),
    ],
)
def test_label(value, unit, want):
    assert label(value, unit) == want


def test_scaled_label_to_fixed_unit():
    assert scaled_label(1, "s", "ms") == "1000ms"


def test_scaled_label_rounds_to_zero():
    assert scaled_label(1, "ns", "s") == "0"


@pytest.mark.parametrize(
    "value, total, want",
    [
        (100, 100, "  100%"),
        (50, 200, "25.00%"),
        (1, 200, "  0.5%"),
        (5, 0, "    0%"),
        (-50, 200, "25.00%"),
    ],
)
def test_percentage(value, total, want):
    assert percentage(value, total) == want


@pytest.mark.parametrize(
    "unit, want",
    [("Bytes", True), ("kb", True), ("gigabytes", True), ("tb", False), ("ms", False)],
)
def test_is_memory_unit(unit, want):
    assert is_memory_unit(unit) is want


@pytest.mark.parametrize(
    "unit, want",
    [
        ("seconds", True),
        ("ns", True),
        ("Milliseconds", True),
        ("s", True),
        ("minute", False),
        ("bytes", False),
    ],
)
def test_is_time_unit(unit, want):
    assert is_time_unit(unit) is want