"""Configuration constants for Workbook Studio.

This module centralizes pricing conversion constants, currency display rules,
and the environment-driven settings shared by the AI pipeline and the HTTP layer.
"""

from __future__ import annotations

import os

# Time constants (Azure retail pricing uses a 730-hour month)
HOURS_PER_MONTH = 730
MONTHS_PER_YEAR = 12

# AI prompt sizing
MAX_SKUS_PER_SERVICE = 8  # SKUs listed per service before "+N more"

# Cost estimate adjustments
RESERVED_INSTANCE_DISCOUNT = -0.3
PLACEHOLDER_ROWS_PER_CATEGORY = 4

SKU_NOT_FOUND_NOTE = "SKU not found in pricing data — enter cost manually"

DEFAULT_AI_TIMEOUT_SEC = 30

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Display symbols per ISO currency code.
CURRENCY_SYMBOLS = {
    "AUD": "$",
    "USD": "$",
    "CAD": "$",
    "GBP": "£",
    "EUR": "€",
}

DATE_FORMAT = "%d/%m/%Y"
EXCEL_DATE_FORMAT = "DD/MM/YYYY"


def currency_symbol(code: object) -> str:
    """Return the display symbol for a currency code, defaulting to `$`."""
    return CURRENCY_SYMBOLS.get(str(code or "").upper(), "$")


def currency_format(symbol: str) -> str:
    """Excel number format for a currency amount with a literal symbol."""
    return f'"{symbol}"#,##0.00'


def ai_timeout_sec() -> int:
    """Upper bound for a single AI provider call, overridable via env."""
    raw = os.getenv("WORKBOOK_STUDIO_AI_TIMEOUT_SEC", "")
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_AI_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_AI_TIMEOUT_SEC
