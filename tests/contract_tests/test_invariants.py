"""
Property Tests for Entry Store Contracts
Verifies exclusivity, existence gating, validation and round-trip rules.
"""

import pytest
from hypothesis import given, strategies as st
from hypothesis.strategies import composite

from entrystore import (
    Entry, EntryDiagnostics, EntryStore, ErrorCode, Identity, LogicalHeight,
    PriorityTier, TemporalRecord,
)

# =============================================================================
# STRATEGIES (Generators)
# =============================================================================

identities = st.text(min_size=1, max_size=40).map(Identity)

# At most 4 UTF-8 bytes per character keeps these within 100 bytes
valid_content = st.text(min_size=1, max_size=25)


@composite
def stores(draw):
    """Fresh store with a live height source at an arbitrary height."""
    start = draw(st.integers(min_value=0, max_value=10**9))
    height = LogicalHeight.live(start)
    return EntryStore(height_source=height), height


# =============================================================================
# PROPERTY TESTS
# =============================================================================

@given(identities, valid_content, valid_content)
def test_create_is_exclusive(identity, first, second):
    store = EntryStore()
    assert store.create_entry(identity, first).is_success
    assert store.create_entry(identity, second).code == ErrorCode.DUPLICATE_ENTRY


@given(identities, valid_content, valid_content)
def test_delegate_is_exclusive(target, first, second):
    store = EntryStore()
    assert store.delegate_entry(target, first).is_success
    assert store.delegate_entry(target, second).code == ErrorCode.DUPLICATE_ENTRY


@given(identities, st.integers(min_value=1, max_value=3), st.integers(min_value=1))
def test_existence_gating(identity, tier, duration):
    store = EntryStore()
    assert store.update_entry(identity, "x", True).code == ErrorCode.ENTRY_NOT_FOUND
    assert store.delete_entry(identity).code == ErrorCode.ENTRY_NOT_FOUND
    assert store.assign_priority(identity, tier).code == ErrorCode.ENTRY_NOT_FOUND
    assert store.configure_deadline(identity, duration).code == ErrorCode.ENTRY_NOT_FOUND
    assert store.fetch_entry(identity).code == ErrorCode.ENTRY_NOT_FOUND
    assert store.check_completion(identity).code == ErrorCode.ENTRY_NOT_FOUND
    assert store.diagnostics(identity).value == EntryDiagnostics.absent()


@given(identities, valid_content, st.booleans())
def test_empty_content_leaves_entry_unmodified(identity, content, completed):
    store = EntryStore()
    store.create_entry(identity, content)
    store.update_entry(identity, content, completed)

    assert store.update_entry(identity, "", not completed).code == ErrorCode.INVALID_PARAMETER
    assert store.fetch_entry(identity).value == Entry(content=content, completed=completed)


@given(identities, valid_content, st.integers())
def test_priority_range(identity, content, tier):
    store = EntryStore()
    store.create_entry(identity, content)
    result = store.assign_priority(identity, tier)
    if 1 <= tier <= 3:
        assert result.value.tier == PriorityTier(tier)
    else:
        assert result.code == ErrorCode.INVALID_PARAMETER


@given(stores(), identities, st.integers(min_value=-10**6, max_value=10**6))
def test_deadline_computation(store_and_height, identity, duration):
    store, height = store_and_height
    start = height.current_height()
    store.create_entry(identity, "task")

    result = store.configure_deadline(identity, duration)
    if duration > 0:
        assert result.value == TemporalRecord(deadline=start + duration, notified=False)
    else:
        assert result.code == ErrorCode.INVALID_PARAMETER


@given(identities, valid_content, valid_content, st.booleans())
def test_round_trip(identity, first, second, completed):
    store = EntryStore()
    store.create_entry(identity, first)
    assert store.fetch_entry(identity).value == Entry(content=first, completed=False)

    store.update_entry(identity, second, completed)
    assert store.fetch_entry(identity).value == Entry(content=second, completed=completed)
    assert store.check_completion(identity).value is completed


@given(identities, valid_content, valid_content)
def test_delete_frees_key(identity, first, second):
    store = EntryStore()
    store.create_entry(identity, first)
    store.delete_entry(identity)
    assert store.fetch_entry(identity).code == ErrorCode.ENTRY_NOT_FOUND
    assert store.create_entry(identity, second).is_success


@given(identities, valid_content)
def test_diagnostics_consistency(identity, content):
    store = EntryStore()
    store.create_entry(identity, content)
    assert store.diagnostics(identity).value == EntryDiagnostics(
        exists=True,
        content_length=len(content.encode('utf-8')),
        completed=False
    )
