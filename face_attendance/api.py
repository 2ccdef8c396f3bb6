# face_attendance/api.py
import logging
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from face_attendance.attendance_service import match_and_check_in
from face_attendance.config_loader import Settings
from face_attendance.errors import (
    InvalidInputError,
    PersistenceError,
    RegistryUnavailable,
    StudentNotFound,
)
from face_attendance.schemas import (
    AMBIGUOUS,
    COOLDOWN_ACTIVE,
    INVALID_INPUT,
    NO_MATCH,
    AttendanceOut,
    CheckInRequest,
    StudentCreate,
    StudentOut,
)

logger = logging.getLogger("face_attendance.api")

app = FastAPI(
    title="Face Attendance API",
    description="Matches face embeddings against registered students and records check-ins.",
    version="1.0.0",
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# these will be injected by main at startup
REGISTRY = None        # StudentRegistry instance
ATTENDANCE_LOG = None  # AttendanceLog instance
SETTINGS = None        # Settings instance

NOT_RECOGNIZED = "Face not recognized. Please try again."

REJECTION_STATUS = {
    NO_MATCH: (404, NOT_RECOGNIZED),
    AMBIGUOUS: (404, NOT_RECOGNIZED),
    COOLDOWN_ACTIVE: (409, "Already checked in. Please wait before checking in again."),
    INVALID_INPUT: (400, "Invalid embedding. Expected a list of 128 numbers."),
}


def init_api(registry, attendance_log, settings=None):
    global REGISTRY, ATTENDANCE_LOG, SETTINGS
    REGISTRY = registry
    ATTENDANCE_LOG = attendance_log
    SETTINGS = settings or Settings()
    logger.info("Attendance API initialized with registry & attendance log")


def _require_init():
    if REGISTRY is None or ATTENDANCE_LOG is None:
        raise HTTPException(status_code=503, detail="API not initialized")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/process-attendance")
def process_attendance(request: CheckInRequest):
    _require_init()
    try:
        outcome = match_and_check_in(request.embedding, REGISTRY, ATTENDANCE_LOG, SETTINGS)
    except RegistryUnavailable:
        logger.exception("Check-in failed: student registry unavailable")
        raise HTTPException(status_code=503, detail="Attendance service is temporarily unavailable.")
    except PersistenceError:
        logger.exception("Check-in failed: attendance could not be saved")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    content = outcome.to_response()
    if outcome.checked_in:
        content["message"] = f"Welcome, {outcome.student_name}!"
        return JSONResponse(status_code=200, content=content)

    status_code, message = REJECTION_STATUS[outcome.reason]
    content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


@app.post("/students", response_model=StudentOut, status_code=201)
def create_student(student: StudentCreate):
    _require_init()
    try:
        return REGISTRY.register_student(student.name, student.embedding)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Failed to create student.")


@app.get("/students", response_model=List[StudentOut])
def list_students():
    _require_init()
    try:
        return REGISTRY.list_students()
    except RegistryUnavailable:
        logger.exception("Listing students failed")
        raise HTTPException(status_code=503, detail="Student registry unavailable.")


@app.delete("/students/{student_id}")
def delete_student(student_id: str):
    _require_init()
    try:
        REGISTRY.delete_student(student_id)
    except StudentNotFound:
        raise HTTPException(status_code=404, detail="Student not found.")
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Failed to delete student.")
    ATTENDANCE_LOG.forget_student(student_id)
    return {"status": "success", "message": "Student deleted successfully."}


@app.get("/attendances", response_model=List[AttendanceOut], response_model_by_alias=True)
def list_attendances():
    _require_init()
    try:
        names = REGISTRY.names_by_id()
        events = ATTENDANCE_LOG.list_events(names)
    except RegistryUnavailable:
        logger.exception("Listing attendances failed: registry unavailable")
        raise HTTPException(status_code=503, detail="Student registry unavailable.")
    except PersistenceError:
        logger.exception("Listing attendances failed")
        raise HTTPException(status_code=500, detail="Failed to load attendance records.")
    return [
        AttendanceOut(
            id=e.id,
            student_id=e.student_id,
            student_name=e.student_name,
            check_in_time=e.check_in_time,
        )
        for e in events
    ]
