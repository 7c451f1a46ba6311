"""
Service layer for quiz analytics.

Applies the statistics functions to the quiz result store and shapes
the output for the API: per-quiz score statistics and per-student
percentage averages, with floating point values rounded to two
decimals.  Halves round away from zero (80.125 becomes 80.13), not to
the even neighbour as the built-in ``round`` does.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from student_records_api.app.core.storage import RecordStore
from student_records_api.app.schemas.quiz import QuizResult, QuizStatsRead, StudentStatsRead
from student_records_api.app.services.statistics_service import stats_by_group, stats_for_filter

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def round_half_up(value: float) -> float:
    """Round to two decimals using the shortest repr of ``value``."""
    return float(Decimal(repr(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


class AnalyticsService:
    """Statistics derived from quiz results."""

    @classmethod
    async def quiz_statistics(cls, quiz_results: RecordStore[QuizResult]) -> List[QuizStatsRead]:
        """Return score statistics for every quiz, ordered by quiz id."""
        groups = stats_by_group(quiz_results.all(), lambda result: result.quiz_id)
        mixed = [group.key for group in groups if group.mixed_max_score]
        if mixed:
            logger.warning("Quizzes %s mix different max scores; raw score statistics are not comparable", mixed)
        return [
            QuizStatsRead(
                quiz_id=group.key,
                average_score=round_half_up(group.mean),
                std_dev=round_half_up(group.std_dev),
                min_score=group.min_score,
                max_score=group.max_score,
                participants=group.count,
                mixed_max_score=group.mixed_max_score,
            )
            for group in groups
        ]

    @classmethod
    async def student_statistics(
        cls, quiz_results: RecordStore[QuizResult], student_id: int
    ) -> Optional[StudentStatsRead]:
        """Return a student's quiz count and average percentage.

        ``None`` means the student has no quiz results.
        """
        summary = stats_for_filter(quiz_results.all(), lambda result: result.student_id == student_id)
        if summary is None:
            return None
        return StudentStatsRead(
            student_id=student_id,
            quizzes_taken=summary.count,
            average_percentage=round_half_up(summary.mean_percentage),
        )
