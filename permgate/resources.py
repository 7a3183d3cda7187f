from __future__ import annotations

from pathlib import Path


def capabilities_schema_path() -> Path:
    """
    JSON Schema for capability catalogs, shipped as package data in permgate/contracts/.
    """
    return Path(__file__).resolve().parent / "contracts" / "capabilities.schema.json"
