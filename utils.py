"""
Utility functions for Warikan Ledger
"""
from __future__ import annotations
import os
from decimal import Decimal, ROUND_HALF_UP


def safe_float(x: str, default: float = 0.0) -> float:
    """Convert string to float safely, returning default on error"""
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def round_money(value: float, decimals: int = 2) -> float:
    """Round half-up to the given number of decimal places"""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def format_currency(amount: float, symbol: str = "¥", decimals: int = 2) -> str:
    """Format amount with currency symbol and thousands separators, e.g. ¥1,234.50"""
    value = round_money(amount, decimals)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def format_percent(ratio: float) -> str:
    """Format a 0..1 ratio as a whole percentage"""
    return f"{round_money(ratio * 100, 0):.0f}%"


def app_dir() -> str:
    """
    Get application data directory.
    WARIKAN_HOME overrides the default ~/.warikan; the directory is created if missing.
    """
    path = os.environ.get("WARIKAN_HOME") or os.path.join(os.path.expanduser("~"), ".warikan")
    os.makedirs(path, exist_ok=True)
    return path
