from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PermgateError(Exception):
    code: str
    message: str
    data: dict[str, Any] | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ValidationError(PermgateError):
    pass


class InvalidCapability(PermgateError):
    pass


class InvalidTransition(PermgateError):
    pass


class HostError(PermgateError):
    pass
