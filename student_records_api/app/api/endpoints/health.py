"""
Liveness endpoint reporting the size of each loaded table.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from student_records_api.app.api.deps import get_records
from student_records_api.app.core.storage import Records

router = APIRouter()


@router.get("/health")
async def health(records: Records = Depends(get_records)) -> Dict[str, Any]:
    return {
        "status": "OK",
        "students": len(records.students),
        "quiz_results": len(records.quiz_results),
        "users": len(records.users),
    }
