# face_attendance/attendance_log.py
import logging
from datetime import timedelta

import pymongo
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from face_attendance.errors import CooldownActive, PersistenceError
from face_attendance.models import AttendanceEvent

logger = logging.getLogger(__name__)


def _to_millis(dt):
    # BSON dates keep millisecond precision; the guard filter compares for equality
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


class AttendanceLog:
    """
    Append-only attendance records plus one guard document per student:
        attendance: {_id, student_id: str, check_in_time: datetime}
        guards:     {_id: student_id, last_check_in: datetime}

    The guard is what makes the cooldown safe under concurrent requests: it is
    claimed with a single conditional upsert, and a second claim inside the
    window collides on the unique _id.
    """

    def __init__(self, attendance_collection, guard_collection):
        self.attendance = attendance_collection
        self.guards = guard_collection

    def ensure_indexes(self):
        self.attendance.create_index([("student_id", pymongo.ASCENDING), ("check_in_time", pymongo.DESCENDING)])
        self.attendance.create_index([("check_in_time", pymongo.DESCENDING)])

    def _claim_guard(self, student_id, now, cooldown_seconds):
        cutoff = now - timedelta(seconds=cooldown_seconds)
        try:
            return self.guards.find_one_and_update(
                {"_id": student_id, "last_check_in": {"$lte": cutoff}},
                {"$set": {"last_check_in": now}},
                upsert=True,
                return_document=ReturnDocument.BEFORE,
            )
        except DuplicateKeyError as e:
            raise CooldownActive(student_id) from e
        except PyMongoError as e:
            logger.error(f"Check-in guard update failed for {student_id}: {e}")
            raise PersistenceError(f"Check-in guard update failed: {e}") from e

    def _release_guard(self, student_id, now, previous):
        """Puts the guard back the way it was before a failed insert."""
        try:
            if previous is None:
                self.guards.delete_one({"_id": student_id, "last_check_in": now})
            else:
                self.guards.update_one(
                    {"_id": student_id, "last_check_in": now},
                    {"$set": {"last_check_in": previous["last_check_in"]}},
                )
        except PyMongoError as e:
            logger.exception(f"Failed to roll back check-in guard for {student_id}: {e}")

    def forget_student(self, student_id):
        """Drops the cooldown guard of a deleted student. Attendance events are kept."""
        try:
            self.guards.delete_one({"_id": student_id})
        except PyMongoError as e:
            logger.warning(f"Failed to remove check-in guard for {student_id}: {e}")

    def record_check_in(self, student_id, now, cooldown_seconds=60.0):
        """
        Appends one attendance event for `student_id` at `now`.

        Raises CooldownActive if the student's last accepted check-in is less
        than `cooldown_seconds` old, PersistenceError if anything else fails.
        """
        now = _to_millis(now)
        previous = self._claim_guard(student_id, now, cooldown_seconds)

        record = {"student_id": student_id, "check_in_time": now}
        try:
            result = self.attendance.insert_one(record)
        except PyMongoError as e:
            logger.exception(f"Attendance insert failed for {student_id}: {e}")
            self._release_guard(student_id, now, previous)
            raise PersistenceError(f"Attendance insert failed: {e}") from e

        return AttendanceEvent(id=str(result.inserted_id), student_id=student_id, check_in_time=now)

    def list_events(self, names=None):
        """All events, newest first, with student names filled in from `names` (id -> name)."""
        names = names or {}
        try:
            cursor = self.attendance.find({}).sort("check_in_time", pymongo.DESCENDING)
            return [
                AttendanceEvent(
                    id=str(doc["_id"]),
                    student_id=doc["student_id"],
                    check_in_time=doc["check_in_time"],
                    student_name=names.get(doc["student_id"]),
                )
                for doc in cursor
            ]
        except PyMongoError as e:
            logger.error(f"Attendance log read failed: {e}")
            raise PersistenceError(f"Attendance log read failed: {e}") from e
