from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

import pytest

from workbook_studio.catalogue_text import refresh_catalogue_text_cache
from workbook_studio.llm.factory import reset_ai_provider
from workbook_studio.pricing import refresh_pricing_cache

VM_SKUS = ["B1s", "B2s", "B2ms", "B4ms", "D2s v5", "D4s v5", "D8s v5", "E2s v5", "E4s v5", "F4s v2"]

TEST_CATALOGUE = {
    "currency": "AUD",
    "region": "australiaeast",
    "generatedAt": "2026-01-01T00:00:00Z",
    "pricing": {
        "Virtual Machines|D2s v5": {"price": 0.1584, "unit": "1 Hour", "family": "Compute", "sku": "D2s v5"},
        "Key Vault|Standard": {"price": 0.03, "unit": "1 Hour", "family": "Security", "sku": "Standard"},
        "Storage Accounts|Hot LRS": {"price": 0.0255, "unit": "1 GB/Month", "family": "Storage", "sku": "Hot LRS"},
    },
    "services": {
        "Virtual Machines": {"family": "Compute", "skus": VM_SKUS},
        "Key Vault": {"family": "Security", "skus": ["Standard"]},
        "Storage Accounts": {"family": "Storage", "skus": ["Hot LRS"]},
    },
}


def _reset_caches() -> None:
    refresh_pricing_cache()
    refresh_catalogue_text_cache()
    reset_ai_provider()


@pytest.fixture(autouse=True)
def pricing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point every test at a small, known pricing catalogue."""
    path = tmp_path / "pricing.json"
    path.write_text(json.dumps(TEST_CATALOGUE), encoding="utf-8")
    monkeypatch.setenv("WORKBOOK_STUDIO_PRICING_FILE", str(path))
    _reset_caches()
    yield path
    _reset_caches()
