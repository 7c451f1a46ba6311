"""
Student endpoints.

CRUD over the students table.  Request bodies for create and update
are validated by ``StudentCreate``/``StudentUpdate``; a body that is
not a JSON object with non-empty string ``name`` and ``program``
fields is answered with 400 before any state changes.  Deleting a
student cascades to its quiz results.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from student_records_api.app.api.deps import get_records
from student_records_api.app.core.storage import Records
from student_records_api.app.schemas.student import StudentCreate, StudentRead, StudentUpdate
from student_records_api.app.services.student_service import StudentService

router = APIRouter()


@router.get("", response_model=List[StudentRead])
async def list_students(records: Records = Depends(get_records)) -> List[StudentRead]:
    """Return every student in file order."""
    return await StudentService.list_students(records)


@router.get("/{student_id}", response_model=StudentRead)
async def get_student(student_id: int, records: Records = Depends(get_records)) -> StudentRead:
    student = await StudentService.get_student(records, student_id)
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


@router.post("", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_in: StudentCreate, records: Records = Depends(get_records)
) -> StudentRead:
    """Create a student; the id is one more than the largest existing id."""
    return await StudentService.create_student(records, student_in)


@router.put("/{student_id}", response_model=StudentRead)
async def update_student(
    student_id: int, student_in: StudentUpdate, records: Records = Depends(get_records)
) -> StudentRead:
    """Replace the name and program of an existing student."""
    student = await StudentService.update_student(records, student_id, student_in)
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(student_id: int, records: Records = Depends(get_records)) -> Response:
    """Delete a student together with all of its quiz results."""
    deleted = await StudentService.delete_student(records, student_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
