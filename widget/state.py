"""
Widget state store.

The UI keeps its cross-render state (selected tool, query, accumulated results)
in a store supplied by the host. Updates are shallow merges: each field is
last-writer-wins and untouched fields survive.
"""

import copy
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, TypedDict, Union


class ResultItem(TypedDict):
    tool: str
    result: str


class SessionState(TypedDict, total=False):
    results: List[ResultItem]
    query: str
    selectedTool: Optional[str]
    showTools: bool
    client: bool


DEFAULT_STATE: SessionState = {
    "results": [],
    "query": "",
    "selectedTool": None,
    "showTools": False,
    "client": False,
}

Changes = Union[Mapping[str, Any], Callable[[Dict[str, Any]], Mapping[str, Any]]]


class StateStore(ABC):
    """Key/value state with shallow-merge updates."""

    @abstractmethod
    def get(self) -> Dict[str, Any]:
        """Return a snapshot of the current state."""

    @abstractmethod
    def set(self, state: Mapping[str, Any]) -> None:
        """Replace the whole state."""

    def update(self, changes: Changes = None, **fields) -> Dict[str, Any]:
        """
        Merge ``changes`` (a mapping, or a function of the previous state
        returning one) and keyword ``fields`` into the state.
        """
        previous = self.get()
        if callable(changes):
            changes = changes(previous)
        merged = {**previous, **(changes or {}), **fields}
        self.set(merged)
        return merged


class InMemoryStateStore(StateStore):
    """Process-local store; the default when no host store is injected."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._lock = threading.Lock()
        self._state: Dict[str, Any] = copy.deepcopy(dict(initial or DEFAULT_STATE))

    def get(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._state)

    def set(self, state: Mapping[str, Any]) -> None:
        with self._lock:
            self._state = dict(state)

    def update(self, changes: Changes = None, **fields) -> Dict[str, Any]:
        # Read-merge-write under one lock so concurrent appends are not lost
        with self._lock:
            previous = dict(self._state)
            if callable(changes):
                changes = changes(previous)
            self._state = {**previous, **(changes or {}), **fields}
            return dict(self._state)
