"""Compact plain-text rendering of the pricing catalogue for AI prompts."""

from __future__ import annotations

from workbook_studio.config import MAX_SKUS_PER_SERVICE
from workbook_studio.pricing import get_pricing_lookup

_catalogue_text_cache: str | None = None


def format_service_line(service_name: str, family: str, skus: list[str] | tuple[str, ...]) -> str:
    """Render ``"Name (Family): sku1, sku2 (+N more)"``."""
    shown = ", ".join(skus[:MAX_SKUS_PER_SERVICE])
    overflow = len(skus) - MAX_SKUS_PER_SERVICE
    suffix = f" (+{overflow} more)" if overflow > 0 else ""
    return f"{service_name} ({family}): {shown}{suffix}"


def get_service_catalogue_text() -> str:
    """Return the catalogue as one line per service, cached after first call."""
    global _catalogue_text_cache
    if _catalogue_text_cache is None:
        lookup = get_pricing_lookup()
        _catalogue_text_cache = "\n".join(
            format_service_line(name, info.family, info.skus)
            for name, info in lookup.services.items()
        )
    return _catalogue_text_cache


def refresh_catalogue_text_cache() -> None:
    global _catalogue_text_cache
    _catalogue_text_cache = None
