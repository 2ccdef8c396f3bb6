# face_attendance/attendance_service.py
import logging
from datetime import datetime, timezone

from face_attendance.config_loader import Settings
from face_attendance.embedding import validate_embedding
from face_attendance.errors import CooldownActive, InvalidInputError
from face_attendance.face_matcher import find_match
from face_attendance.schemas import COOLDOWN_ACTIVE, INVALID_INPUT, MatchOutcome

logger = logging.getLogger(__name__)


def utc_now():
    return datetime.now(timezone.utc)


def match_and_check_in(embedding, registry, attendance_log, settings: Settings = None, clock=None) -> MatchOutcome:
    """
    Matches one face embedding against the registry and records a check-in.

    Workflow:
    1. Validate the embedding. Bad input -> invalid_input, nothing is read or written.
    2. Full scan of the registry and nearest-neighbour match.
       No confident match -> no_match / ambiguous, nothing is written.
    3. Append an attendance event, unless the student is inside the cooldown
       window -> cooldown_active.

    RegistryUnavailable and PersistenceError propagate to the caller; a
    successful outcome is only returned once the event is stored.
    """
    settings = settings or Settings()
    clock = clock or utc_now

    try:
        query = validate_embedding(embedding, settings.embedding_dim)
    except InvalidInputError as e:
        logger.warning(f"REJECTED invalid input: {e}")
        return MatchOutcome.rejected(INVALID_INPUT)

    students = registry.fetch_all()
    result = find_match(query, students, settings.similarity_threshold, settings.ambiguity_margin)
    if not result.matched:
        logger.warning(f"REJECTED {result.status}: best similarity {result.similarity:.4f} "
                       f"across {len(students)} students")
        return MatchOutcome.rejected(result.status)

    student = result.student
    try:
        event = attendance_log.record_check_in(student.id, clock(), settings.cooldown_seconds)
    except CooldownActive:
        logger.warning(f"REJECTED cooldown: {student.name} ({student.id}) already checked in "
                       f"within {settings.cooldown_seconds:.0f}s")
        return MatchOutcome.rejected(COOLDOWN_ACTIVE)

    logger.info(f"ATTENDANCE: {student.name} ({student.id}) checked in at "
                f"{event.check_in_time:%Y-%m-%d %H:%M:%S} (similarity {result.similarity:.4f})")
    return MatchOutcome.success(student.name)
