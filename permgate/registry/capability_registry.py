from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from permgate.core.errors import InvalidCapability, ValidationError


@dataclass(frozen=True)
class CapabilityDef:
    capability_id: str
    platform_name: str
    gated_since: int
    title: str = ""
    granted_message: str = ""
    denied_message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "capability_id": self.capability_id,
            "platform_name": self.platform_name,
            "gated_since": self.gated_since,
            "title": self.title,
            "granted_message": self.granted_message,
            "denied_message": self.denied_message,
        }


class CapabilityRegistry:
    """
    Catalog of capabilities the gate knows how to ask for.
    """

    def __init__(self) -> None:
        self._defs: dict[str, CapabilityDef] = {}

    def register(self, cap_def: CapabilityDef) -> None:
        if cap_def.capability_id in self._defs:
            raise ValidationError(
                code="config.duplicate",
                message=f"Duplicate capability_id: {cap_def.capability_id}",
                data={"capability_id": cap_def.capability_id},
            )
        self._defs[cap_def.capability_id] = cap_def

    def get(self, capability_id: str) -> CapabilityDef | None:
        return self._defs.get(capability_id)

    def require(self, capability_id: str) -> CapabilityDef:
        if not isinstance(capability_id, str) or not capability_id:
            raise InvalidCapability(code="capability.invalid", message="capability_id must be a non-empty string")
        cap_def = self._defs.get(capability_id)
        if cap_def is None:
            raise InvalidCapability(
                code="capability.unknown",
                message=f"Unknown capability: {capability_id}",
                data={"capability_id": capability_id},
            )
        return cap_def

    def list_capabilities(self) -> list[dict[str, Any]]:
        return [self._defs[k].to_dict() for k in sorted(self._defs.keys())]

    def __len__(self) -> int:
        return len(self._defs)
