from __future__ import annotations

import sys
from typing import List, Optional, TextIO, Tuple

from permgate.core.capability_request import CapabilityState
from permgate.registry.capability_registry import CapabilityRegistry


class ToastObserver:
    """
    Shows the catalog message for a resolved capability (stderr by default).

    Only GRANTED and DENIED produce output; NOT_REQUIRED is silent.
    """

    def __init__(self, registry: CapabilityRegistry, stream: Optional[TextIO] = None):
        self._registry = registry
        self._stream = stream
        self.shown: List[str] = []

    def on_capability_resolved(self, capability_id: str, final_state: CapabilityState) -> None:
        cap_def = self._registry.get(capability_id)
        if cap_def is None:
            return
        if final_state == CapabilityState.GRANTED:
            message = cap_def.granted_message or f"{cap_def.title or capability_id} permission granted"
        elif final_state == CapabilityState.DENIED:
            message = cap_def.denied_message or f"{cap_def.title or capability_id} permission denied"
        else:
            return
        self.shown.append(message)
        # Keeps JSON stdout stable for CLIs.
        print(message, file=self._stream if self._stream is not None else sys.stderr)


class RecordingObserver:
    """
    Collects notifications in order. Used by tests.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, CapabilityState]] = []

    def on_capability_resolved(self, capability_id: str, final_state: CapabilityState) -> None:
        self.calls.append((capability_id, final_state))
