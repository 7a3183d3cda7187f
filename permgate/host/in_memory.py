from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from permgate.core.capability_request import GrantResult
from permgate.core.dispatcher import ResponseDispatcher
from permgate.core.errors import HostError

from .platform import GrantStatus


class InMemoryHost:
    """
    Deterministic host for tests/examples.

    Keeps an in-memory grant store, records every request it receives, and
    answers them only when told to via answer(). Answers are delivered through
    the dispatcher, the same way a real host's dialog callback would be.
    """

    def __init__(self, granted: Iterable[str] = (), dispatcher: Optional[ResponseDispatcher] = None) -> None:
        self._granted: Set[str] = set(granted)
        self._dispatcher = dispatcher
        self.queries: List[str] = []
        self.requests: List[Tuple[List[str], int]] = []
        self._unanswered: Dict[int, List[str]] = {}

    def attach(self, dispatcher: ResponseDispatcher) -> None:
        self._dispatcher = dispatcher

    def query_grant_status(self, capability_id: str) -> GrantStatus:
        self.queries.append(capability_id)
        return GrantStatus.GRANTED if capability_id in self._granted else GrantStatus.NOT_GRANTED

    def request_capabilities(self, capability_ids: Sequence[str], request_token: int) -> None:
        ids = list(capability_ids)
        self.requests.append((ids, request_token))
        self._unanswered[request_token] = ids

    def set_granted(self, capability_id: str, granted: bool = True) -> None:
        if granted:
            self._granted.add(capability_id)
        else:
            self._granted.discard(capability_id)

    def unanswered_tokens(self) -> List[int]:
        return sorted(self._unanswered.keys())

    def answer(self, request_token: int, granted: bool) -> List[GrantResult]:
        if self._dispatcher is None:
            raise HostError(code="host.no_dispatcher", message="Host has no response dispatcher attached")
        ids = self._unanswered.pop(request_token, None)
        if ids is None:
            raise HostError(
                code="host.unknown_token",
                message=f"No unanswered request for token {request_token}",
                data={"request_token": request_token},
            )
        for capability_id in ids:
            self.set_granted(capability_id, granted)
        results = [GrantResult(capability_id=c, granted=granted) for c in ids]
        self._dispatcher.dispatch(request_token, results)
        return results
