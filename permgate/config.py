from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
import yaml

from permgate.bootstrap_capabilities import build_capability_registry
from permgate.core.errors import ValidationError
from permgate.registry.capability_registry import CapabilityDef, CapabilityRegistry
from permgate.resources import capabilities_schema_path


def default_catalog_path() -> Path:
    """
    Default per-user catalog location.

    - If XDG_CONFIG_HOME is set, use it.
    - Else use ~/.config
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if isinstance(base, str) and base.strip():
        return Path(base).expanduser() / "permgate" / "capabilities.yml"
    return Path("~/.config").expanduser() / "permgate" / "capabilities.yml"


def _load_schema() -> Dict[str, Any]:
    schema_path = capabilities_schema_path()
    try:
        return json.loads(schema_path.read_text(encoding="utf-8"))
    except Exception as e:  # noqa: BLE001
        raise ValidationError(code="config.schema_missing", message="Catalog schema missing or unreadable", data={"path": str(schema_path)}) from e


def load_catalog(config_path: str | Path) -> Dict[str, Any]:
    p = Path(config_path).expanduser()
    if not p.exists():
        raise ValidationError(code="config.not_found", message=f"Config not found: {config_path}")
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except Exception as e:  # noqa: BLE001
        raise ValidationError(code="config.invalid_yaml", message="Failed to parse YAML config", data={"error": repr(e)}) from e
    if not isinstance(raw, dict):
        raise ValidationError(code="config.invalid", message="Config must be a YAML mapping/object at top-level")

    try:
        jsonschema.Draft202012Validator(_load_schema()).validate(raw)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            code="config.schema_invalid",
            message="Config does not match schema",
            data={"error": e.message, "path": list(e.path), "schema_path": list(e.schema_path)},
        ) from e

    return raw


def registry_from_catalog(raw: Dict[str, Any]) -> CapabilityRegistry:
    reg = CapabilityRegistry()
    for entry in raw.get("capabilities", []):
        messages = entry.get("messages") if isinstance(entry.get("messages"), dict) else {}
        reg.register(
            CapabilityDef(
                capability_id=entry["capability_id"],
                platform_name=entry["platform_name"],
                gated_since=int(entry["gated_since"]),
                title=entry.get("title", ""),
                granted_message=messages.get("granted", ""),
                denied_message=messages.get("denied", ""),
            )
        )
    return reg


def load_registry(config_path: Optional[str | Path] = None) -> CapabilityRegistry:
    """
    Explicit path: must exist and validate.
    No path: the per-user catalog when present, else the built-in catalog.
    """
    if config_path is not None:
        return registry_from_catalog(load_catalog(config_path))
    p = default_catalog_path()
    if p.exists():
        return registry_from_catalog(load_catalog(p))
    return build_capability_registry()
