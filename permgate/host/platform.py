from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence


class GrantStatus(str, Enum):
    GRANTED = "granted"
    NOT_GRANTED = "not_granted"


class PlatformHost(Protocol):
    """
    The host's permission subsystem, as seen by a gate.

    - query_grant_status is synchronous.
    - request_capabilities is fire-and-forget; the answer (if any) arrives later
      through the host's response channel, never as a return value.
    """

    def query_grant_status(self, capability_id: str) -> GrantStatus:
        ...

    def request_capabilities(self, capability_ids: Sequence[str], request_token: int) -> None:
        ...
