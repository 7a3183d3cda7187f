from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Protocol, Tuple

from permgate.host.platform import GrantStatus, PlatformHost
from permgate.trace.trace_emitter import TraceEmitter

from .capability_request import CapabilityRequest, CapabilityState, GrantResult
from .errors import InvalidCapability

if TYPE_CHECKING:
    from permgate.registry.capability_registry import CapabilityRegistry


class CapabilityObserver(Protocol):
    def on_capability_resolved(self, capability_id: str, final_state: CapabilityState) -> None:
        ...


_Notification = Tuple[str, CapabilityState]


class PermissionGate:
    """
    Decides whether a capability is available, asks the host for it when it is
    not, and reports each terminal outcome to the observer exactly once.

    Invariants:
    - at most one outstanding platform request per capability.
    - GRANTED/DENIED are final for this gate; later ensure() calls only re-read
      the host grant and never issue another request.
    - responses are matched by token; anything else is ignored.
    """

    def __init__(
        self,
        host: PlatformHost,
        registry: CapabilityRegistry,
        observer: Optional[CapabilityObserver] = None,
        *,
        trace: Optional[TraceEmitter] = None,
        notify_not_required: bool = False,
    ):
        self._host = host
        self._registry = registry
        self._observer = observer
        self._trace = trace
        self._notify_not_required = notify_not_required
        self._lock = threading.RLock()
        self._next_token = 1
        self._pending: Dict[int, CapabilityRequest] = {}
        self._states: Dict[str, CapabilityState] = {}

    def ensure(self, capability_id: str, platform_version: int) -> CapabilityRequest:
        cap_def = self._registry.require(capability_id)
        if isinstance(platform_version, bool) or not isinstance(platform_version, int):
            raise InvalidCapability(
                code="capability.invalid",
                message="platform_version must be an integer",
                data={"capability_id": capability_id},
            )

        notify: List[_Notification] = []
        with self._lock:
            req = CapabilityRequest(capability_id)

            if platform_version < cap_def.gated_since:
                req.transition(CapabilityState.NOT_REQUIRED)
                # Only a first check records NOT_REQUIRED; REQUESTED/GRANTED/DENIED are never overwritten.
                first = self._states.get(capability_id, CapabilityState.UNKNOWN) == CapabilityState.UNKNOWN
                if first:
                    self._record(req)
                self._emit(
                    "capability_not_required",
                    req,
                    message="Implicitly available below the gating version",
                    data={"platform_version": platform_version, "gated_since": cap_def.gated_since},
                )
                if first and self._notify_not_required:
                    notify.append((capability_id, req.state))

            elif self._states.get(capability_id) in (CapabilityState.GRANTED, CapabilityState.DENIED):
                req = self._recheck(capability_id)

            else:
                outstanding = self._outstanding_for(capability_id)
                if outstanding is not None:
                    return outstanding

                if self._host.query_grant_status(capability_id) == GrantStatus.GRANTED:
                    req.transition(CapabilityState.GRANTED)
                    self._record(req)
                    self._emit("capability_granted", req, message="Already granted by the host")
                    notify.append((capability_id, req.state))
                else:
                    previous = self._states.get(capability_id)
                    req.transition(CapabilityState.REQUESTED)
                    req.request_token = self._allocate_token()
                    self._pending[req.request_token] = req
                    self._record(req)
                    self._emit("capability_requested", req, message="Requested from the host")
                    try:
                        self._host.request_capabilities([capability_id], req.request_token)
                    except Exception:
                        self._pending.pop(req.request_token, None)
                        if previous is None:
                            self._states.pop(capability_id, None)
                        else:
                            self._states[capability_id] = previous
                        raise

        self._deliver(notify)
        return req

    def handle_response(self, request_token: int, grant_results: Iterable[Any]) -> None:
        raw = list(grant_results)

        notify: List[_Notification] = []
        with self._lock:
            req = self._pending.get(request_token)
            if req is None:
                # Foreign responses share the channel; their payload is recorded, never parsed.
                if self._trace is not None:
                    self._trace.emit(
                        "response_ignored",
                        request_token=request_token if isinstance(request_token, int) else None,
                        message="No outstanding request for token",
                        data={"request_token": repr(request_token), "results": repr(raw)},
                    )
                return

            results = [GrantResult.coerce(r) for r in raw]
            del self._pending[request_token]

            # The first entry decides; an empty result (dialog dismissed) counts as a denial.
            granted = len(results) > 0 and results[0].granted
            req.transition(CapabilityState.GRANTED if granted else CapabilityState.DENIED)
            self._record(req)
            self._emit("capability_resolved", req, message="Host answered the request")
            notify.append((req.capability_id, req.state))

        self._deliver(notify)

    def state_of(self, capability_id: str) -> CapabilityState:
        with self._lock:
            return self._states.get(capability_id, CapabilityState.UNKNOWN)

    def pending_tokens(self) -> List[int]:
        with self._lock:
            return sorted(self._pending.keys())

    def _recheck(self, capability_id: str) -> CapabilityRequest:
        # A fresh check re-reads the host grant; it never re-enters REQUESTED.
        # The result is a snapshot built in its final state, not a transition.
        recorded = self._states[capability_id]
        if self._host.query_grant_status(capability_id) == GrantStatus.GRANTED:
            req = CapabilityRequest(capability_id, CapabilityState.GRANTED)
        else:
            req = CapabilityRequest(capability_id, recorded)
        self._emit("capability_rechecked", req, data={"recorded_state": recorded.value})
        return req

    def _outstanding_for(self, capability_id: str) -> Optional[CapabilityRequest]:
        for req in self._pending.values():
            if req.capability_id == capability_id:
                return req
        return None

    def _allocate_token(self) -> int:
        token = self._next_token
        self._next_token += 1
        return token

    def _record(self, req: CapabilityRequest) -> None:
        self._states[req.capability_id] = req.state

    def _emit(self, event_type: str, req: CapabilityRequest, *, message: str | None = None, data: dict[str, Any] | None = None) -> None:
        if self._trace is None:
            return
        self._trace.emit(
            event_type,
            capability_id=req.capability_id,
            request_token=req.request_token,
            state=req.state.value,
            message=message,
            data=data,
        )

    def _deliver(self, notify: List[_Notification]) -> None:
        # Observers run outside the lock so they may call back into the gate.
        if self._observer is None:
            return
        for capability_id, state in notify:
            self._observer.on_capability_resolved(capability_id, state)
