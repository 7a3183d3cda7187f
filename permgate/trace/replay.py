from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator


class Replay:
    """
    Reads a permission trace back, in write order.

    A process killed mid-append leaves a torn last line; it is dropped.
    Undecodable lines anywhere else are real corruption and raise.
    """

    def __init__(self, path: Path):
        self._path = path

    def iter_events(self) -> Iterator[Dict[str, Any]]:
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as f:
            lines = [line.strip() for line in f if line.strip()]
        for i, line in enumerate(lines):
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                if i == len(lines) - 1:
                    return
                raise

    def event_types(self) -> list[str]:
        return [e.get("event_type", "") for e in self.iter_events()]

    def history(self, capability_id: str) -> list[Dict[str, Any]]:
        """
        Events for one capability, in order (requested, resolved, rechecked, ...).
        """
        return [e for e in self.iter_events() if e.get("capability_id") == capability_id]
