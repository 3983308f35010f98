"""
Dashboard statistics over a collection of assignments.

The engine does not filter: callers narrow the collection (for example with
``filter_by_course``) before calling ``aggregate``.
"""
import logging
import statistics
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable, Literal, Sequence

from coursedesk.core.config import UPCOMING_WINDOW_DAYS
from coursedesk.schemas.assignment import AssignmentRecord
from coursedesk.services.due_dates import days_until

logger = logging.getLogger(__name__)

GradeCalculation = Literal["simple", "weighted"]

# (letter, lower bound inclusive, label)
GRADE_BUCKETS = (
    ("F", 0, "0-59"),
    ("D", 60, "60-69"),
    ("C", 70, "70-79"),
    ("B", 80, "80-89"),
    ("A", 90, "90-100"),
)


@dataclass(frozen=True)
class DashboardStats:
    pending_count: int
    upcoming_count: int
    average_grade: float | None  # None = not applicable, distinct from 0.0
    graded_count: int
    total_count: int


def filter_by_course(assignments: Iterable[AssignmentRecord], course_id: int | None) -> list[AssignmentRecord]:
    if course_id is None:
        return list(assignments)
    return [a for a in assignments if a.course_id == course_id]


def _percentage(a: AssignmentRecord) -> float | None:
    if a.earned_points is None or not a.points:
        return None
    return a.earned_points / a.points * 100


def average_grade(assignments: Iterable[AssignmentRecord], calculation: GradeCalculation = "simple") -> float | None:
    """
    Average of graded assignments as a percentage.

    "simple": every assignment counts once regardless of its point value.
    "weighted": total earned over total possible.
    Zero-point assignments are left out of both.
    """
    graded = [a for a in assignments if a.status == "graded" and _percentage(a) is not None]
    if not graded:
        return None

    if calculation == "weighted":
        return sum(a.earned_points for a in graded) / sum(a.points for a in graded) * 100

    return sum(_percentage(a) for a in graded) / len(graded)


def aggregate(
    assignments: Sequence[AssignmentRecord],
    now: datetime,
    tz: tzinfo | None = None,
    calculation: GradeCalculation = "simple",
) -> DashboardStats:
    pending = 0
    upcoming = 0
    graded = 0

    for a in assignments:
        if a.status == "not-submitted":
            pending += 1
        elif a.status == "graded":
            graded += 1

        if 0 <= days_until(a.due_date, now, tz) <= UPCOMING_WINDOW_DAYS:
            upcoming += 1

    stats = DashboardStats(
        pending_count=pending,
        upcoming_count=upcoming,
        average_grade=average_grade(assignments, calculation),
        graded_count=graded,
        total_count=len(assignments),
    )
    logger.debug("aggregated %d assignments: %s", len(assignments), stats)
    return stats


def format_average(value: float | None) -> str:
    if value is None:
        return "N/A"
    return f"{value:.1f}%"


def letter_for(percentage: float) -> str:
    letter = GRADE_BUCKETS[0][0]
    for name, lower, _label in GRADE_BUCKETS:
        if percentage >= lower:
            letter = name
    return letter


def grade_distribution(percentages: Sequence[float]) -> dict:
    """Bucket counts (F..A) plus average, median and population std dev."""
    counts = {name: 0 for name, _lower, _label in GRADE_BUCKETS}
    for p in percentages:
        counts[letter_for(p)] += 1

    buckets = [
        {"grade": name, "range": label, "count": counts[name]}
        for name, _lower, label in GRADE_BUCKETS
    ]

    if not percentages:
        return {"buckets": buckets, "average": None, "median": None, "std_dev": None}

    return {
        "buckets": buckets,
        "average": round(statistics.fmean(percentages), 1),
        "median": round(statistics.median(percentages), 1),
        "std_dev": round(statistics.pstdev(percentages), 1),
    }
