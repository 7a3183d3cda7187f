from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from permgate.host.platform import PlatformHost
from permgate.trace import open_trace

from .dispatcher import ResponseDispatcher
from .errors import PermgateError
from .permission_gate import CapabilityObserver, PermissionGate
from .runtime_context import RuntimeContext

if TYPE_CHECKING:
    from permgate.registry.capability_registry import CapabilityRegistry


class Launcher:
    """
    Startup orchestration: build a gate, hook it to the response channel,
    ensure every capability the app needs.

    Hard rules:
    - run on every launch; the host's grant store is the source of truth, so a
      request left unanswered by a previous process is re-synchronized here.
    - trace every decision.
    """

    def __init__(self, host: PlatformHost, registry: CapabilityRegistry, dispatcher: Optional[ResponseDispatcher] = None):
        self._host = host
        self._registry = registry
        self._dispatcher = dispatcher if dispatcher is not None else ResponseDispatcher()

    def start(
        self,
        ctx: RuntimeContext,
        capability_ids: Sequence[str],
        observer: Optional[CapabilityObserver] = None,
    ) -> Tuple[PermissionGate, Dict[str, Any]]:
        trace = open_trace(ctx.trace_path, ctx.run_id)

        trace.emit(
            "startup_started",
            message="Startup permission check",
            data={"platform_version": ctx.platform_version, "capability_ids": list(capability_ids)},
        )

        gate = PermissionGate(
            self._host,
            self._registry,
            observer,
            trace=trace,
            notify_not_required=ctx.notify_not_required,
        )
        self._dispatcher.register(gate)

        results: List[Dict[str, Any]] = []
        for capability_id in capability_ids:
            try:
                req = gate.ensure(capability_id, ctx.platform_version)
            except Exception as e:  # noqa: BLE001
                data = e.data if isinstance(e, PermgateError) else {"error": repr(e)}
                trace.emit("error", capability_id=capability_id if isinstance(capability_id, str) else None, message=str(e), data=data)
                self._dispatcher.unregister(gate)
                raise
            results.append(req.to_dict())

        trace.emit("startup_finished", message="Startup permission check finished", data={"pending_tokens": gate.pending_tokens()})
        summary = {"run_id": ctx.run_id, "platform_version": ctx.platform_version, "results": results}
        return gate, summary
