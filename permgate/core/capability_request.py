from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from .errors import InvalidTransition, ValidationError


class CapabilityState(str, Enum):
    UNKNOWN = "unknown"
    NOT_REQUIRED = "not_required"
    REQUESTED = "requested"
    GRANTED = "granted"
    DENIED = "denied"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({CapabilityState.NOT_REQUIRED, CapabilityState.GRANTED, CapabilityState.DENIED})

_ALLOWED = {
    CapabilityState.UNKNOWN: frozenset(
        {CapabilityState.NOT_REQUIRED, CapabilityState.REQUESTED, CapabilityState.GRANTED}
    ),
    CapabilityState.REQUESTED: frozenset({CapabilityState.GRANTED, CapabilityState.DENIED}),
}


class CapabilityRequest:
    """
    One capability moving through UNKNOWN -> REQUESTED -> GRANTED|DENIED.

    Invariant:
    - transitions are monotonic; terminal states never change.
    """

    def __init__(self, capability_id: str, state: CapabilityState = CapabilityState.UNKNOWN):
        self.capability_id = capability_id
        self.state = state
        self.request_token: Optional[int] = None

    def transition(self, new_state: CapabilityState) -> None:
        if new_state not in _ALLOWED.get(self.state, frozenset()):
            raise InvalidTransition(
                code="state.invalid_transition",
                message=f"{self.state.value} -> {new_state.value} is not allowed",
                data={"capability_id": self.capability_id},
            )
        self.state = new_state

    def to_dict(self) -> dict[str, Any]:
        return {"capability_id": self.capability_id, "state": self.state.value, "request_token": self.request_token}

    def __repr__(self) -> str:
        return "CapabilityRequest(capability_id={!r}, state={}, request_token={!r})".format(
            self.capability_id, self.state.value, self.request_token
        )


@dataclass(frozen=True)
class GrantResult:
    capability_id: str
    granted: bool

    @classmethod
    def coerce(cls, obj: Any) -> "GrantResult":
        if isinstance(obj, GrantResult):
            return obj
        if isinstance(obj, Mapping):
            capability_id = obj.get("capability_id")
            granted = obj.get("granted")
        elif isinstance(obj, (tuple, list)) and len(obj) == 2:
            capability_id, granted = obj
        else:
            raise ValidationError(code="response.invalid", message="Grant result must be a GrantResult, pair or mapping")
        if not isinstance(capability_id, str) or not isinstance(granted, bool):
            raise ValidationError(
                code="response.invalid",
                message="Grant result needs a string capability_id and a boolean granted",
                data={"capability_id": capability_id},
            )
        return cls(capability_id=capability_id, granted=granted)
