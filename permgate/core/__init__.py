from .errors import HostError, InvalidCapability, InvalidTransition, PermgateError, ValidationError
from .capability_request import CapabilityRequest, CapabilityState, GrantResult
from .dispatcher import ResponseDispatcher
from .permission_gate import CapabilityObserver, PermissionGate
from .runtime_context import RuntimeContext
from .launcher import Launcher

__all__ = [
  "PermgateError",
  "ValidationError",
  "InvalidCapability",
  "InvalidTransition",
  "HostError",
  "CapabilityRequest",
  "CapabilityState",
  "GrantResult",
  "ResponseDispatcher",
  "CapabilityObserver",
  "PermissionGate",
  "RuntimeContext",
  "Launcher",
]
