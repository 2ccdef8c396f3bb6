# face_attendance/database.py
import logging

from pymongo import MongoClient

from face_attendance.attendance_log import AttendanceLog
from face_attendance.student_registry import StudentRegistry

logger = logging.getLogger(__name__)


def connect(config):
    """
    Opens one MongoClient for the process and builds the registry and
    attendance log on top of it. Returns (client, registry, attendance_log).
    """
    mongo_uri = config.get('MongoDB', 'uri', fallback='mongodb://localhost:27017/')
    db_name = config.get('MongoDB', 'database_name', fallback='face_attendance')
    students_coll_name = config.get('MongoDB', 'students_collection_name', fallback='students')
    attendance_coll_name = config.get('MongoDB', 'attendance_collection_name', fallback='attendance_records')
    guard_coll_name = config.get('MongoDB', 'guard_collection_name', fallback='check_in_guards')
    timeout_ms = config.getint('MongoDB', 'server_selection_timeout_ms', fallback=5000)
    embedding_dim = config.getint('Matching', 'embedding_dim', fallback=128)

    # tz_aware so check-in times come back as UTC-aware datetimes
    client = MongoClient(mongo_uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
    db = client[db_name]

    registry = StudentRegistry(db[students_coll_name], embedding_dim=embedding_dim)
    attendance_log = AttendanceLog(db[attendance_coll_name], db[guard_coll_name])
    logger.info(f"MongoDB configured: database '{db_name}'")
    return client, registry, attendance_log
