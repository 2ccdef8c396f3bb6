"""Shared fixtures: synthetic embeddings and in-memory collaborators."""

from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from face_attendance.embedding import validate_embedding
from face_attendance.errors import (
    CooldownActive,
    InvalidInputError,
    PersistenceError,
    RegistryUnavailable,
    StudentNotFound,
)
from face_attendance.models import AttendanceEvent, StudentEmbedding

DIM = 128


def unit(i: int) -> np.ndarray:
    v = np.zeros(DIM)
    v[i] = 1.0
    return v


def at_similarity(cos: float, base: int = 0, other: int = 1) -> np.ndarray:
    """A unit vector whose cosine similarity to unit(base) is exactly `cos`."""
    v = np.zeros(DIM)
    v[base] = cos
    v[other] = np.sqrt(1.0 - cos * cos)
    return v


class FakeRegistry:
    def __init__(self, students=()):
        self.students = list(students)
        self.fetch_calls = 0
        self.unavailable = False
        self._next_id = 1000

    def fetch_all(self):
        self.fetch_calls += 1
        if self.unavailable:
            raise RegistryUnavailable("registry down")
        return list(self.students)

    def register_student(self, name, embedding, now=None):
        if not name or not name.strip():
            raise InvalidInputError("Name cannot be empty.")
        vector = validate_embedding(embedding)
        self._next_id += 1
        student = StudentEmbedding(id=str(self._next_id), name=name.strip(), embedding=vector)
        self.students.append(student)
        return {"id": student.id, "name": student.name, "created_at": now or datetime.now(timezone.utc)}

    def list_students(self):
        return [{"id": s.id, "name": s.name, "created_at": None} for s in reversed(self.students)]

    def names_by_id(self):
        return {s.id: s.name for s in self.students}

    def delete_student(self, student_id):
        for s in self.students:
            if s.id == student_id:
                self.students.remove(s)
                return
        raise StudentNotFound(student_id)


class FakeAttendanceLog:
    def __init__(self):
        self.events = []
        self.fail_writes = False
        self.forgotten = []

    def record_check_in(self, student_id, now, cooldown_seconds=60.0):
        latest = [e.check_in_time for e in self.events if e.student_id == student_id]
        if latest and now - max(latest) < timedelta(seconds=cooldown_seconds):
            raise CooldownActive(student_id)
        if self.fail_writes:
            raise PersistenceError("write failed")
        event = AttendanceEvent(id=str(len(self.events) + 1), student_id=student_id, check_in_time=now)
        self.events.append(event)
        return event

    def forget_student(self, student_id):
        self.forgotten.append(student_id)

    def list_events(self, names=None):
        names = names or {}
        return [
            AttendanceEvent(e.id, e.student_id, e.check_in_time, names.get(e.student_id))
            for e in sorted(self.events, key=lambda e: e.check_in_time, reverse=True)
        ]


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2025, 7, 20, 8, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def alice():
    return StudentEmbedding(id="1", name="Alice", embedding=unit(0))


@pytest.fixture
def registry(alice):
    return FakeRegistry([alice])


@pytest.fixture
def attendance_log():
    return FakeAttendanceLog()


@pytest.fixture
def clock():
    return FakeClock()
