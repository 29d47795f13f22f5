# app/services/exit_state.py
"""
Exit workflow state machine.

    INSIDE --request--> REQUESTED --approve--> APPROVED --confirm--> EXITED

The state is never stored; it is derived from the three record flags
(exit_requested, exit_approved, has_exited). Flags only ever go from False
to True. The check_* helpers raise the InvalidTransitionError subtype that
explains why an edge cannot be taken from the record's current state.
"""

from enum import Enum
from sqlalchemy import and_
from app.services.errors import (
    AlreadyApprovedError,
    AlreadyExitedError,
    AlreadyRequestedError,
    NotApprovedError,
    NotRequestedError,
)


class EntryState(str, Enum):
    INSIDE = "inside"
    REQUESTED = "requested"
    APPROVED = "approved"
    EXITED = "exited"


def derive_state(record) -> EntryState:
    if record.has_exited:
        return EntryState.EXITED
    if record.exit_approved:
        return EntryState.APPROVED
    if record.exit_requested:
        return EntryState.REQUESTED
    return EntryState.INSIDE


def check_request(record) -> None:
    if record.has_exited:
        raise AlreadyExitedError(f"{_label(record)} has already exited")
    if record.exit_requested:
        raise AlreadyRequestedError(f"Exit already requested for {_label(record)}")


def check_approve(record) -> None:
    if record.has_exited:
        raise AlreadyExitedError(f"{_label(record)} has already exited")
    if not record.exit_requested:
        raise NotRequestedError(f"Exit has not been requested for {_label(record)}")
    if record.exit_approved:
        raise AlreadyApprovedError(f"Exit already approved for {_label(record)}")


def check_confirm(record) -> None:
    if record.has_exited:
        raise AlreadyExitedError(f"{_label(record)} has already exited")
    if not record.exit_approved:
        raise NotApprovedError(f"Exit has not been approved yet for {_label(record)}")


def state_filter(model, state: EntryState):
    """SQL predicate matching records of `model` currently in `state`."""
    if state == EntryState.EXITED:
        return model.has_exited == True  # noqa: E712
    if state == EntryState.APPROVED:
        return and_(model.exit_approved == True, model.has_exited == False)  # noqa: E712
    if state == EntryState.REQUESTED:
        return and_(
            model.exit_requested == True,   # noqa: E712
            model.exit_approved == False,   # noqa: E712
            model.has_exited == False,      # noqa: E712
        )
    return and_(
        model.exit_requested == False,  # noqa: E712
        model.exit_approved == False,   # noqa: E712
        model.has_exited == False,      # noqa: E712
    )


def _label(record) -> str:
    return f"{record.name} ({record.identity})"
