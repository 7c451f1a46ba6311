"""
Descriptive statistics over quiz results.

The functions here are pure: they take a sequence of ``QuizResult``
values and return plain dataclasses, keeping no state between calls.
``stats_by_group`` summarises raw scores per group (per quiz in the
API) and ``stats_for_filter`` averages percentages over a filtered
subset (one student's results in the API).

Group statistics are computed on raw ``score`` values even when the
rows of a group use different ``max_score`` values.  Such groups are
flagged with ``mixed_max_score`` rather than silently normalised.
"""

from __future__ import annotations

import statistics
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterable, List, Optional, TypeVar

from student_records_api.app.schemas.quiz import QuizResult

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class GroupStats:
    key: Hashable
    count: int
    mean: float
    std_dev: float
    min_score: int
    max_score: int
    mixed_max_score: bool = False


@dataclass(frozen=True)
class FilterStats:
    count: int
    mean_percentage: float


def stats_by_group(
    results: Iterable[QuizResult], key_of: Callable[[QuizResult], K]
) -> List[GroupStats]:
    """Group ``results`` by ``key_of`` and summarise each group's scores.

    Groups are returned in ascending key order regardless of the order
    of ``results``.  Only keys that occur in ``results`` produce a
    group, so every group has at least one member.  The standard
    deviation is the population one (divides by ``n``).
    """
    groups: Dict[K, List[QuizResult]] = defaultdict(list)
    for result in results:
        groups[key_of(result)].append(result)

    summary: List[GroupStats] = []
    for key in sorted(groups):
        members = groups[key]
        scores = [member.score for member in members]
        summary.append(
            GroupStats(
                key=key,
                count=len(scores),
                mean=statistics.fmean(scores),
                std_dev=statistics.pstdev(scores),
                min_score=min(scores),
                max_score=max(scores),
                mixed_max_score=len({member.max_score for member in members}) > 1,
            )
        )
    return summary


def stats_for_filter(
    results: Iterable[QuizResult], predicate: Callable[[QuizResult], bool]
) -> Optional[FilterStats]:
    """Average the percentage of the results matching ``predicate``.

    Returns ``None`` when nothing matches; callers report that as "no
    data" instead of a zero average.
    """
    matching = [result for result in results if predicate(result)]
    if not matching:
        return None
    return FilterStats(
        count=len(matching),
        mean_percentage=statistics.fmean(result.percentage for result in matching),
    )
