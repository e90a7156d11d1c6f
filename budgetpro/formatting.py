"""Formatting utilities for currency and percentage display."""

from __future__ import annotations

from typing import Union


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount in USD with comma separators.

    Negative amounts carry a leading minus before the dollar sign.

    Args:
        amount: The amount to format
        include_sign: Whether to include the dollar sign

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "-$50.00")

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-50)
        '-$50.00'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{abs(amount):,.2f}"
    if include_sign:
        formatted = f"${formatted}"
    return f"-{formatted}" if amount < 0 else formatted


def format_percentage(value: float, decimals: int = 1) -> str:
    """Format a percentage value (already scaled to 0-100).

    Example:
        >>> format_percentage(42.123)
        '42.1%'
    """
    return f"{value:.{decimals}f}%"


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not start LaTeX math."""
    return text.replace("$", "\\$")
