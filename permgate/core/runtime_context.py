from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class RuntimeContext:
    """
    Per-launch settings for a startup permission check.
    """

    run_id: str
    platform_version: int
    notify_not_required: bool = False
    trace_path: Path = Path("trace.jsonl")
    meta: dict[str, Any] = field(default_factory=dict)
