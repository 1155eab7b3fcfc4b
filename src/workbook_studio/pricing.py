"""Azure retail pricing catalogue accessor.

The catalogue is a static JSON document keyed by ``"{service}|{sku}"``. It is
parsed once per process on first use and shared read-only afterwards.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from jsonschema import Draft202012Validator

from workbook_studio.config import HOURS_PER_MONTH, MONTHS_PER_YEAR

logger = logging.getLogger(__name__)

DEFAULT_PRICING_FILE = Path(__file__).resolve().parent / "data" / "azure_pricing_lookup.json"
PRICING_SCHEMA_FILE = DEFAULT_PRICING_FILE.with_name("azure_pricing_lookup.schema.json")


@dataclass(frozen=True)
class PricingEntry:
    """Retail price for one service/SKU combination."""

    price: float
    unit: str
    family: str
    sku: str


@dataclass(frozen=True)
class ServiceInfo:
    family: str
    skus: tuple[str, ...]


@dataclass(frozen=True)
class PricingLookup:
    """Immutable view over the parsed pricing catalogue."""

    currency: str
    region: str
    generated_at: str
    pricing: Mapping[str, PricingEntry]
    services: Mapping[str, ServiceInfo]


_pricing_lookup_cache: PricingLookup | None = None


def pricing_key(service_name: str, sku_name: str) -> str:
    return f"{service_name}|{sku_name}"


def _pricing_file() -> Path:
    override = os.getenv("WORKBOOK_STUDIO_PRICING_FILE")
    return Path(override) if override else DEFAULT_PRICING_FILE


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _validate_catalogue(payload: Any, path: Path) -> None:
    validator = Draft202012Validator(_load_json(PRICING_SCHEMA_FILE))
    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        location = ".".join(str(token) for token in first.path) or "<root>"
        raise ValueError(f"{path} failed schema validation at {location}: {first.message}")


def _load_pricing_file(path: Path) -> PricingLookup:
    if not path.exists():
        raise FileNotFoundError(f"Pricing catalogue not found: {path}")
    payload = _load_json(path)
    _validate_catalogue(payload, path)

    pricing = {
        key: PricingEntry(
            price=float(raw["price"]),
            unit=raw["unit"],
            family=raw["family"],
            sku=raw["sku"],
        )
        for key, raw in payload["pricing"].items()
    }
    services = {
        name: ServiceInfo(family=info["family"], skus=tuple(info["skus"]))
        for name, info in payload["services"].items()
    }
    return PricingLookup(
        currency=payload["currency"],
        region=payload["region"],
        generated_at=str(payload.get("generatedAt", "")),
        pricing=MappingProxyType(pricing),
        services=MappingProxyType(services),
    )


def get_pricing_lookup() -> PricingLookup:
    """Return the process-wide pricing catalogue, loading it on first call."""
    global _pricing_lookup_cache
    if _pricing_lookup_cache is None:
        path = _pricing_file()
        _pricing_lookup_cache = _load_pricing_file(path)
        logger.info(
            "Loaded pricing catalogue %s (%d entries, %d services)",
            path.name,
            len(_pricing_lookup_cache.pricing),
            len(_pricing_lookup_cache.services),
        )
    return _pricing_lookup_cache


def refresh_pricing_cache() -> None:
    """Drop the memoized catalogue so the next access reloads it."""
    global _pricing_lookup_cache
    _pricing_lookup_cache = None


def find_pricing(service_name: str, sku_name: str) -> PricingEntry | None:
    """Find the price entry for a service/SKU pair, or None when absent."""
    return get_pricing_lookup().pricing.get(pricing_key(service_name, sku_name))


def get_service_skus(service_name: str) -> list[str]:
    """Return the SKUs offered for a service in catalogue order."""
    info = get_pricing_lookup().services.get(service_name)
    return list(info.skus) if info is not None else []


def get_all_services() -> list[str]:
    return list(get_pricing_lookup().services)


def get_services_by_family(family: str) -> list[str]:
    lookup = get_pricing_lookup()
    return [name for name, info in lookup.services.items() if info.family == family]


def get_monthly_from_hourly(hourly_price: float) -> float:
    return hourly_price * HOURS_PER_MONTH


def get_annual_from_monthly(monthly_price: float) -> float:
    return monthly_price * MONTHS_PER_YEAR


def is_hourly_unit(unit: str) -> bool:
    return "Hour" in unit


def get_unit_monthly_cost(entry: PricingEntry) -> float:
    """Monthly cost of one unit of a priced SKU."""
    if is_hourly_unit(entry.unit):
        return get_monthly_from_hourly(entry.price)
    return entry.price


def get_monthly_total_cost(service_name: str, sku_name: str, quantity: int = 1) -> float:
    """Monthly cost for ``quantity`` units; 0 when the SKU is not catalogued."""
    entry = find_pricing(service_name, sku_name)
    if entry is None:
        return 0.0
    return get_unit_monthly_cost(entry) * quantity
