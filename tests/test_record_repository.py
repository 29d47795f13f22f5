# tests/test_record_repository.py
"""Persistence gateway: lookups by identity/id and conditional updates."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta
from app.models.student import Student
from app.models.visitor import Visitor
from app.services.errors import ConflictError
from app.services.exit_state import EntryState
from app.services.record_repository import EntryRecordKind, EntryRecordRepository


def add_student(db, sid="S1", exited=False, entered=None):
    record = Student(name="A", student_id=sid, purpose="library",
                     entry_time=entered or datetime.utcnow(),
                     exit_requested=exited, exit_approved=exited, has_exited=exited,
                     exit_time=datetime.utcnow() if exited else None)
    db.add(record)
    db.commit()
    return record


class TestEntryRecordKind:
    def test_kind_maps_to_model(self):
        assert EntryRecordKind.VISITOR.model is Visitor
        assert EntryRecordKind.STUDENT.model is Student
        assert EntryRecordKind("student") is EntryRecordKind.STUDENT

    def test_identity_columns(self):
        assert Visitor.IDENTITY_ATTR == "phone"
        assert Student.IDENTITY_ATTR == "student_id"
        assert Student.identity_column() is Student.student_id


class TestLookups:
    def test_find_active_ignores_exited_records(self, db):
        add_student(db, exited=True, entered=datetime.utcnow() - timedelta(days=1))
        active = add_student(db)
        repo = EntryRecordRepository(db, EntryRecordKind.STUDENT)
        assert repo.find_active_by_identity("S1").id == active.id

    def test_find_active_none_when_all_exited(self, db):
        old = add_student(db, exited=True)
        repo = EntryRecordRepository(db, EntryRecordKind.STUDENT)
        assert repo.find_active_by_identity("S1") is None
        assert repo.find_latest_by_identity("S1").id == old.id

    def test_find_by_id(self, db):
        record = add_student(db)
        repo = EntryRecordRepository(db, EntryRecordKind.STUDENT)
        assert repo.find_by_id(record.id).student_id == "S1"
        assert repo.find_by_id(9999) is None

    def test_identity_property(self, db):
        assert add_student(db, sid="S77").identity == "S77"


class TestConditionalUpdate:
    def test_update_applies_when_state_matches(self, db):
        add_student(db)
        repo = EntryRecordRepository(db, EntryRecordKind.STUDENT)
        updated = repo.conditional_update("S1", EntryState.INSIDE, {"exit_requested": True})
        assert updated.exit_requested is True

    def test_second_writer_gets_conflict(self, db):
        add_student(db)
        repo = EntryRecordRepository(db, EntryRecordKind.STUDENT)
        repo.conditional_update("S1", EntryState.INSIDE, {"exit_requested": True})
        with pytest.raises(ConflictError):
            repo.conditional_update("S1", EntryState.INSIDE, {"exit_requested": True})

    def test_exited_record_never_matches_active_states(self, db):
        add_student(db, exited=True)
        repo = EntryRecordRepository(db, EntryRecordKind.STUDENT)
        with pytest.raises(ConflictError):
            repo.conditional_update("S1", EntryState.APPROVED, {"has_exited": True})


class TestDelete:
    def test_delete_by_id(self, db):
        record = add_student(db)
        repo = EntryRecordRepository(db, EntryRecordKind.STUDENT)
        assert repo.delete_by_id(record.id) is True
        assert repo.find_by_id(record.id) is None
        assert repo.delete_by_id(record.id) is False
