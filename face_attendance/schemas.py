# face_attendance/schemas.py
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

NO_MATCH = "no_match"
AMBIGUOUS = "ambiguous"
INVALID_INPUT = "invalid_input"
COOLDOWN_ACTIVE = "cooldown_active"


class MatchOutcome(BaseModel):
    """Result of one check-in attempt: either checked in, or a reason why not."""
    model_config = ConfigDict(populate_by_name=True)

    checked_in: bool = Field(alias="checkedIn")
    student_name: Optional[str] = Field(default=None, alias="studentName")
    reason: Optional[str] = None

    @classmethod
    def success(cls, student_name):
        return cls(checked_in=True, student_name=student_name)

    @classmethod
    def rejected(cls, reason):
        return cls(checked_in=False, reason=reason)

    def to_response(self):
        return self.model_dump(by_alias=True, exclude_none=True)


# Embeddings are accepted as anything here and checked by validate_embedding,
# so a bad vector becomes an invalid_input outcome rather than a framework 422.
class CheckInRequest(BaseModel):
    embedding: Any = None


class StudentCreate(BaseModel):
    name: str = ""
    embedding: Any = None


class StudentOut(BaseModel):
    id: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None


class AttendanceOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    student_id: str = Field(alias="studentId")
    student_name: Optional[str] = Field(default=None, alias="studentName")
    check_in_time: datetime = Field(alias="checkInTime")
