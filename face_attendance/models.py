# face_attendance/models.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class StudentEmbedding:
    """One registered student's facial signature, as read from the registry."""
    id: str
    name: str
    embedding: np.ndarray


@dataclass(frozen=True)
class AttendanceEvent:
    id: str
    student_id: str
    check_in_time: datetime
    student_name: Optional[str] = None
