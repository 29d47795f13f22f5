# tests/test_exit_state.py
"""Unit tests for the exit state machine (pure, no database)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from types import SimpleNamespace
from app.services.exit_state import (
    EntryState, derive_state, check_request, check_approve, check_confirm,
)
from app.services.errors import (
    AlreadyApprovedError, AlreadyExitedError, AlreadyRequestedError,
    InvalidTransitionError, NotApprovedError, NotRequestedError,
)


def make_record(requested=False, approved=False, exited=False):
    return SimpleNamespace(name="A", identity="S1", exit_requested=requested,
                           exit_approved=approved, has_exited=exited)


INSIDE = make_record()
REQUESTED = make_record(requested=True)
APPROVED = make_record(requested=True, approved=True)
EXITED = make_record(requested=True, approved=True, exited=True)


class TestDeriveState:
    @pytest.mark.parametrize("record,state", [
        (INSIDE, EntryState.INSIDE),
        (REQUESTED, EntryState.REQUESTED),
        (APPROVED, EntryState.APPROVED),
        (EXITED, EntryState.EXITED),
    ])
    def test_flags_map_to_state(self, record, state):
        assert derive_state(record) == state

    def test_exited_wins_over_other_flags(self):
        assert derive_state(make_record(exited=True)) == EntryState.EXITED


class TestTransitionChecks:
    def test_request_allowed_only_from_inside(self):
        check_request(INSIDE)
        with pytest.raises(AlreadyRequestedError):
            check_request(REQUESTED)
        with pytest.raises(AlreadyRequestedError):
            check_request(APPROVED)
        with pytest.raises(AlreadyExitedError):
            check_request(EXITED)

    def test_approve_requires_request(self):
        with pytest.raises(NotRequestedError):
            check_approve(INSIDE)
        check_approve(REQUESTED)
        with pytest.raises(AlreadyApprovedError):
            check_approve(APPROVED)
        with pytest.raises(AlreadyExitedError):
            check_approve(EXITED)

    def test_confirm_requires_approval(self):
        with pytest.raises(NotApprovedError):
            check_confirm(INSIDE)
        with pytest.raises(NotApprovedError):
            check_confirm(REQUESTED)
        check_confirm(APPROVED)
        with pytest.raises(AlreadyExitedError):
            check_confirm(EXITED)

    def test_all_rejections_are_invalid_transitions(self):
        with pytest.raises(InvalidTransitionError) as exc:
            check_confirm(INSIDE)
        assert exc.value.code == "NOT_APPROVED"
        assert exc.value.status_code == 409
        assert "A (S1)" in exc.value.detail
