"""Collection view-model.

The collection is an immutable `CollectionState`. Every change is an action
applied by `reduce`, and `CollectionStore` is the only place that swaps the
current state. Front-ends subscribe to the store and re-render from the new
state; they never mutate entries directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Union

from core.domain.errors import BatchInProgressError
from core.domain.models import CollectionState, Entry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure mutations
# ---------------------------------------------------------------------------

def append_batch(state: CollectionState, entries: Iterable[Entry]) -> CollectionState:
    """Prepend a batch, keeping its internal order and the existing order after it."""

    return state.model_copy(update={"entries": (*entries, *state.entries)})


def patch_entry(state: CollectionState, entry_id: str, **updates: Any) -> CollectionState:
    """Shallow-merge `updates` into the entry with `entry_id`.

    Other entries are kept as the same objects. Unknown ids are a no-op.
    """

    if state.find(entry_id) is None:
        return state
    entries = tuple(
        entry.model_copy(update=updates) if entry.id == entry_id else entry
        for entry in state.entries
    )
    return state.model_copy(update={"entries": entries})


def clear(state: CollectionState) -> CollectionState:
    return state.model_copy(update={"entries": ()})


def mark_model_loading(state: CollectionState, entry_id: str) -> CollectionState:
    return state.model_copy(update={"model_loading": state.model_loading | {entry_id}})


def unmark_model_loading(state: CollectionState, entry_id: str) -> CollectionState:
    return state.model_copy(update={"model_loading": state.model_loading - {entry_id}})


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BatchStarted:
    pass


@dataclass(frozen=True)
class BatchSucceeded:
    entries: tuple[Entry, ...]


@dataclass(frozen=True)
class BatchFailed:
    message: str


@dataclass(frozen=True)
class EntryPatched:
    entry_id: str
    updates: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ModelSheetStarted:
    entry_id: str


@dataclass(frozen=True)
class ModelSheetFinished:
    entry_id: str
    model_sheet_url: str | None = None


@dataclass(frozen=True)
class Cleared:
    pass


Action = Union[
    BatchStarted,
    BatchSucceeded,
    BatchFailed,
    EntryPatched,
    ModelSheetStarted,
    ModelSheetFinished,
    Cleared,
]


def reduce(state: CollectionState, action: Action) -> CollectionState:
    """(previous state, action) -> new state. Never mutates `state`."""

    if isinstance(action, BatchStarted):
        return state.model_copy(update={"is_loading": True, "error": None})
    if isinstance(action, BatchSucceeded):
        return append_batch(state, action.entries).model_copy(
            update={"is_loading": False, "error": None}
        )
    if isinstance(action, BatchFailed):
        return state.model_copy(update={"is_loading": False, "error": action.message})
    if isinstance(action, EntryPatched):
        return patch_entry(state, action.entry_id, **action.updates)
    if isinstance(action, ModelSheetStarted):
        if state.find(action.entry_id) is None:
            return state
        return mark_model_loading(state, action.entry_id)
    if isinstance(action, ModelSheetFinished):
        new_state = unmark_model_loading(state, action.entry_id)
        if action.model_sheet_url:
            new_state = patch_entry(new_state, action.entry_id, model_sheet_url=action.model_sheet_url)
        return new_state
    if isinstance(action, Cleared):
        return clear(state)
    raise TypeError(f"Unknown action: {action!r}")


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

Listener = Callable[[CollectionState], None]


class CollectionStore:
    """Single mutator of the session collection."""

    def __init__(self, state: CollectionState | None = None) -> None:
        self._state = state or CollectionState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> CollectionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; returns a callable that unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, action: Action) -> CollectionState:
        if isinstance(action, BatchStarted) and self._state.is_loading:
            raise BatchInProgressError("A batch is already being generated.")

        self._state = reduce(self._state, action)
        logger.debug(
            "%s -> %d entries, loading=%s",
            type(action).__name__,
            len(self._state.entries),
            self._state.is_loading,
        )
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    # Atajos para los tres contratos de mutación.

    def append_batch(self, entries: Iterable[Entry]) -> CollectionState:
        return self.dispatch(BatchSucceeded(entries=tuple(entries)))

    def patch_entry(self, entry_id: str, **updates: Any) -> CollectionState:
        return self.dispatch(EntryPatched(entry_id=entry_id, updates=updates))

    def clear(self) -> CollectionState:
        return self.dispatch(Cleared())
