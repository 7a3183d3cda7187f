from __future__ import annotations

import threading
from typing import Any, Callable, List, Optional, Sequence, Union


ResponseHandler = Callable[[int, Sequence[Any]], None]
Listener = Union[ResponseHandler, Any]


class ResponseDispatcher:
    """
    The host's single permission-response channel.

    Every response goes to every listener; each listener decides by token
    whether the response is its own. Nobody is skipped, so libraries sharing
    the channel always see their own results.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    def register(self, listener: Listener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unregister(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def dispatch(self, request_token: int, results: Sequence[Any]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        # A failing listener does not stop delivery; the first error is re-raised afterwards.
        first_error: Optional[BaseException] = None
        for listener in listeners:
            handler = getattr(listener, "handle_response", listener)
            try:
                handler(request_token, results)
            except Exception as e:  # noqa: BLE001
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
