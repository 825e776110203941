import os

import pytest

from utils import app_dir, format_currency, format_percent, round_money, safe_float


def test_safe_float():
    assert safe_float("1.5") == 1.5
    assert safe_float("abc") == 0.0
    assert safe_float("", None) is None
    assert safe_float(None, -1.0) == -1.0


@pytest.mark.parametrize("value, decimals, expected", [
    (2.675, 2, 2.68),
    (-2.675, 2, -2.68),
    (33.333333, 2, 33.33),
    (0.004, 2, 0.0),
    (1234.5, 0, 1235.0),
])
def test_round_money(value, decimals, expected):
    assert round_money(value, decimals) == expected


def test_format_currency():
    assert format_currency(1234.5) == "¥1,234.50"
    assert format_currency(-50) == "-¥50.00"
    assert format_currency(1234.5, "$", 0) == "$1,235"
    assert format_currency(-0.001) == "¥0.00"


def test_format_percent():
    assert format_percent(0.25) == "25%"
    assert format_percent(1 / 3) == "33%"
    assert format_percent(0.5) == "50%"
    assert format_percent(1.0) == "100%"


def test_app_dir_created(tmp_path, monkeypatch):
    target = tmp_path / "home"
    monkeypatch.setenv("WARIKAN_HOME", str(target))

    assert app_dir() == str(target)
    assert os.path.isdir(target)
