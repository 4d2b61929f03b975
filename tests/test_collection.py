"""Collection view-model: pure mutations, reducer and store."""

from __future__ import annotations

import pytest

from conftest import make_entry
from core.domain.errors import BatchInProgressError
from core.domain.models import CollectionState
from core.services.collection import (
    BatchFailed,
    BatchStarted,
    BatchSucceeded,
    CollectionStore,
    ModelSheetFinished,
    ModelSheetStarted,
    append_batch,
    clear,
    patch_entry,
    reduce,
)


def test_append_batch_prepends_and_keeps_both_orders() -> None:
    """The new batch goes first, in its own order, followed by the old entries."""

    old = (make_entry("old-1"), make_entry("old-2"))
    state = CollectionState(entries=old)
    batch = [make_entry("a"), make_entry("b"), make_entry("c")]

    new_state = append_batch(state, batch)

    assert [e.name for e in new_state.entries] == ["a", "b", "c", "old-1", "old-2"]
    assert state.entries == old


def test_patch_entry_changes_only_matching_entry_and_fields() -> None:
    """Unrelated entries stay the same objects; unrelated fields are kept."""

    first, second = make_entry("first", image_url="data:image/png;base64,AAAA"), make_entry("second")
    state = CollectionState(entries=(first, second))

    new_state = patch_entry(state, first.id, model_sheet_url="data:image/png;base64,BBBB")

    patched = new_state.entries[0]
    assert patched.model_sheet_url == "data:image/png;base64,BBBB"
    assert patched.image_url == first.image_url
    assert patched.name == first.name
    assert patched.id == first.id
    assert new_state.entries[1] is second
    assert first.model_sheet_url is None


def test_patch_entry_unknown_id_is_noop() -> None:
    state = CollectionState(entries=(make_entry("only"),))

    assert patch_entry(state, "does-not-exist", model_sheet_url="x") is state


@pytest.mark.parametrize("size", [0, 1, 7])
def test_clear_always_empties(size: int) -> None:
    state = CollectionState(entries=tuple(make_entry(f"e{i}") for i in range(size)))

    assert clear(state).entries == ()


def test_batch_started_clears_previous_error() -> None:
    state = CollectionState(error="boom")

    new_state = reduce(state, BatchStarted())

    assert new_state.is_loading is True
    assert new_state.error is None


def test_batch_failed_keeps_entries() -> None:
    entries = (make_entry("keep"),)
    state = CollectionState(entries=entries, is_loading=True)

    new_state = reduce(state, BatchFailed(message="boom"))

    assert new_state.entries == entries
    assert new_state.is_loading is False
    assert new_state.error == "boom"


def test_model_sheet_flags_are_view_state() -> None:
    """The loading flag lives in the state, not on the entry."""

    entry = make_entry("sheet")
    state = CollectionState(entries=(entry,))

    loading = reduce(state, ModelSheetStarted(entry_id=entry.id))
    assert loading.is_model_loading(entry.id)
    assert loading.entries[0] is entry

    done = reduce(loading, ModelSheetFinished(entry_id=entry.id, model_sheet_url="data:image/png;base64,QQ=="))
    assert not done.is_model_loading(entry.id)
    assert done.entries[0].model_sheet_url == "data:image/png;base64,QQ=="


def test_model_sheet_started_for_unknown_id_is_noop() -> None:
    state = CollectionState(entries=(make_entry("x"),))

    assert reduce(state, ModelSheetStarted(entry_id="nope")) is state


def test_store_rejects_second_batch_while_loading() -> None:
    store = CollectionStore()
    store.dispatch(BatchStarted())

    with pytest.raises(BatchInProgressError):
        store.dispatch(BatchStarted())

    store.dispatch(BatchSucceeded(entries=()))
    store.dispatch(BatchStarted())
    assert store.state.is_loading is True


def test_store_notifies_subscribers_until_unsubscribed() -> None:
    store = CollectionStore()
    seen: list[int] = []
    unsubscribe = store.subscribe(lambda s: seen.append(len(s.entries)))

    store.append_batch([make_entry("a")])
    store.append_batch([make_entry("b"), make_entry("c")])
    unsubscribe()
    store.clear()

    assert seen == [1, 3]
    assert store.state.entries == ()


def test_store_patch_entry_shortcut() -> None:
    entry = make_entry("patch-me")
    store = CollectionStore(CollectionState(entries=(entry,)))

    store.patch_entry(entry.id, lore="new lore")

    assert store.state.entries[0].lore == "new lore"
    assert store.state.entries[0].visual_prompt == entry.visual_prompt
