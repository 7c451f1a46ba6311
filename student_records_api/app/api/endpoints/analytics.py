"""
Quiz analytics endpoints.

``/quiz-stats`` lists score statistics per quiz in ascending quiz id
order.  ``/student-stats/{id}`` summarises one student's results and
answers 404 when the student has none; a student without results is
never reported with a zero average.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from student_records_api.app.api.deps import get_records
from student_records_api.app.core.storage import Records
from student_records_api.app.schemas.quiz import QuizStatsRead, StudentStatsRead
from student_records_api.app.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/quiz-stats", response_model=List[QuizStatsRead])
async def quiz_stats(records: Records = Depends(get_records)) -> List[QuizStatsRead]:
    return await AnalyticsService.quiz_statistics(records.quiz_results)


@router.get("/student-stats/{student_id}", response_model=StudentStatsRead)
async def student_stats(student_id: int, records: Records = Depends(get_records)) -> StudentStatsRead:
    stats = await AnalyticsService.student_statistics(records.quiz_results, student_id)
    if stats is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No results found for student"
        )
    return stats
