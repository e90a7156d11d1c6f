"""Configuration management for the budget tracker.

This module centralizes all configuration values including palette
tokens, default categories, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os

# Logging
LOG_LEVEL = os.getenv("BUDGETPRO_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Export / insight settings
EXPORT_FILENAME = os.getenv("BUDGETPRO_EXPORT_FILENAME", "transactions.csv")
RECENT_TRANSACTION_LIMIT = int(os.getenv("BUDGETPRO_RECENT_TRANSACTIONS", "20"))

# Display palette, cycled by collection size for new goals and income buckets
CATEGORY_COLORS = [
    '#16a34a',  # green-600
    '#3b82f6',  # blue-500
    '#ec4899',  # pink-500
    '#f97316',  # orange-500
    '#8b5cf6',  # violet-500
    '#06b6d4',  # cyan-500
    '#6b7280',  # gray-500
    '#ef4444',  # red-500
    '#eab308',  # yellow-500
]

UNBUDGETED_COLOR = '#6b7280'
UNKNOWN_EXPENSE_COLOR = '#8884d8'
OVERDUE_COLOR = '#ef4444'

# Catch-all budget category; cannot be renamed or deleted
DEFAULT_CATEGORY_ID = 'default-other'
DEFAULT_CATEGORY_NAME = 'Other'
DEFAULT_CATEGORY_COLOR = '#6b7280'

INCOME_CATEGORIES = ['Salary', 'Freelance', 'Investment', 'Gifts', 'Other']
SAVINGS_GOAL_CATEGORIES = ['Emergency', 'Travel', 'Transportation', 'Home', 'Investment', 'Other']

_logging_configured = False


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for scripts and the Streamlit host."""
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(level=(level or LOG_LEVEL), format=LOG_FORMAT)
    _logging_configured = True
