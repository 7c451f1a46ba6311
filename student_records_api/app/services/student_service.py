"""
Service layer for students.

Provides list/get/create/update/delete over the students store.  Every
mutation is written through to the students file before the call
returns.  Deleting a student also deletes all of its quiz results;
the two tables are changed as one unit (see ``delete_student``).

A failed save of a single-table change (create or update) raises
``PersistenceError`` but leaves the in-memory change in place; the
next successful save brings the file back in line.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from student_records_api.app.core.storage import PersistenceError, Records
from student_records_api.app.schemas.student import StudentCreate, StudentRead, StudentUpdate

logger = logging.getLogger(__name__)


class StudentService:
    """Service class for managing students."""

    @classmethod
    async def list_students(cls, records: Records) -> List[StudentRead]:
        """Return all students in file/insertion order."""
        return records.students.all()

    @classmethod
    async def get_student(cls, records: Records, student_id: int) -> Optional[StudentRead]:
        return records.students.get(student_id)

    @classmethod
    async def create_student(cls, records: Records, data: StudentCreate) -> StudentRead:
        """Insert a student with the next free id and save the table."""
        students = records.students
        with students.lock:
            student = StudentRead(id=students.next_id(), name=data.name, program=data.program)
            students.put(student)
            students.save()
        logger.info("Created student %s", student.id)
        return student

    @classmethod
    async def update_student(
        cls, records: Records, student_id: int, data: StudentUpdate
    ) -> Optional[StudentRead]:
        """Replace a student's name and program.

        Returns ``None`` if the student does not exist.
        """
        students = records.students
        with students.lock:
            existing = students.get(student_id)
            if existing is None:
                return None
            updated = existing.model_copy(update={"name": data.name, "program": data.program})
            students.put(updated)
            students.save()
        logger.info("Updated student %s", student_id)
        return updated

    @classmethod
    async def delete_student(cls, records: Records, student_id: int) -> bool:
        """Delete a student and every quiz result that references it.

        Returns ``False`` if the student does not exist.  Both tables
        are changed in memory first, then saved students-first.  If
        either save fails, both tables are restored and the students
        file is saved again so that neither table observably changed;
        ``PersistenceError`` is raised either way.  If that second
        students save fails too, the students file lacks the student
        while the quiz results file still holds its rows; this is
        logged and repaired by the next successful students save.
        """
        students, quiz_results = records.students, records.quiz_results
        with students.lock, quiz_results.lock:
            if student_id not in students:
                return False
            students_before = students.snapshot()
            results_before = quiz_results.snapshot()

            students.remove(student_id)
            cascaded = quiz_results.remove_where(lambda result: result.student_id == student_id)

            try:
                students.save()
            except PersistenceError:
                students.restore(students_before)
                quiz_results.restore(results_before)
                logger.error("Deleting student %s failed; nothing was changed", student_id)
                raise

            try:
                quiz_results.save()
            except PersistenceError as exc:
                students.restore(students_before)
                quiz_results.restore(results_before)
                try:
                    students.save()
                except PersistenceError:
                    logger.error(
                        "Deleting student %s failed half way: %s no longer lists the student "
                        "but %s still holds its %d quiz results",
                        student_id,
                        students.path,
                        quiz_results.path,
                        len(cascaded),
                    )
                    raise exc
                logger.error(
                    "Deleting student %s failed while saving quiz results; rolled back", student_id
                )
                raise

        logger.info("Deleted student %s and %d quiz results", student_id, len(cascaded))
        return True
