from __future__ import annotations

from pathlib import Path

from .replay import Replay
from .trace_emitter import TraceEmitter
from .trace_store_jsonl import TraceStoreJSONL


def open_trace(path: Path, run_id: str) -> TraceEmitter:
    return TraceEmitter(store=TraceStoreJSONL(path), run_id=run_id)


__all__ = ["TraceEmitter", "TraceStoreJSONL", "Replay", "open_trace"]
