# face_attendance/student_registry.py
import logging
from datetime import datetime, timezone

import pymongo
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from face_attendance.embedding import EMBEDDING_DIM, validate_embedding
from face_attendance.errors import (
    InvalidInputError,
    PersistenceError,
    RegistryUnavailable,
    StudentNotFound,
)
from face_attendance.models import StudentEmbedding

logger = logging.getLogger(__name__)


class StudentRegistry:
    """
    Students collection wrapper. Documents look like:
        {_id: ObjectId, name: str, embedding: [128 floats], created_at: datetime}
    Embeddings are written once at registration and never updated.
    """

    def __init__(self, collection, embedding_dim: int = EMBEDDING_DIM):
        self.collection = collection
        self.embedding_dim = embedding_dim

    def fetch_all(self):
        """Full scan of (id, name, embedding). Empty registry -> []."""
        try:
            docs = list(self.collection.find({}, {"name": 1, "embedding": 1}))
        except PyMongoError as e:
            logger.error(f"Student registry read failed: {e}")
            raise RegistryUnavailable(f"Student registry read failed: {e}") from e

        students = []
        for doc in docs:
            try:
                vector = validate_embedding(doc.get("embedding"), self.embedding_dim)
            except InvalidInputError as e:
                logger.warning(f"Student {doc.get('_id')} has no usable embedding, skipping: {e}")
                continue
            students.append(StudentEmbedding(
                id=str(doc["_id"]),
                name=doc.get("name") or "Unknown",
                embedding=vector,
            ))
        return students

    def register_student(self, name, embedding, now=None):
        if not name or not str(name).strip():
            raise InvalidInputError("Name cannot be empty.")
        vector = validate_embedding(embedding, self.embedding_dim)
        doc = {
            "name": str(name).strip(),
            "embedding": vector.tolist(),
            "created_at": now or datetime.now(timezone.utc),
        }
        try:
            result = self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.exception(f"Failed to create student '{name}': {e}")
            raise PersistenceError(f"Failed to create student: {e}") from e

        student_id = str(result.inserted_id)
        logger.info(f"Registered student {doc['name']} ({student_id})")
        return {"id": student_id, "name": doc["name"], "created_at": doc["created_at"]}

    def list_students(self):
        """All students without their embeddings, newest first."""
        try:
            cursor = self.collection.find({}, {"name": 1, "created_at": 1}).sort("created_at", pymongo.DESCENDING)
            return [
                {"id": str(doc["_id"]), "name": doc.get("name"), "created_at": doc.get("created_at")}
                for doc in cursor
            ]
        except PyMongoError as e:
            raise RegistryUnavailable(f"Student registry read failed: {e}") from e

    def names_by_id(self):
        try:
            return {str(doc["_id"]): doc.get("name") for doc in self.collection.find({}, {"name": 1})}
        except PyMongoError as e:
            raise RegistryUnavailable(f"Student registry read failed: {e}") from e

    def delete_student(self, student_id):
        try:
            oid = ObjectId(student_id)
        except (InvalidId, TypeError):
            raise StudentNotFound(f"Student not found: {student_id}")

        try:
            result = self.collection.delete_one({"_id": oid})
        except PyMongoError as e:
            logger.exception(f"Failed to delete student {student_id}: {e}")
            raise PersistenceError(f"Failed to delete student: {e}") from e

        if result.deleted_count == 0:
            raise StudentNotFound(f"Student not found: {student_id}")
        logger.info(f"Deleted student {student_id}")
