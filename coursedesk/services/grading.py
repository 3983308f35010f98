"""
Grading session: the state behind the grading screen.

    select student -> load draft -> edit points / feedback -> commit

Drafts are kept per student, so moving through the roster never loses
unsaved input. With a ``Debouncer`` attached, every edit schedules an
auto-commit for that student once the field has been idle.
"""
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from coursedesk.schemas.submission import RosterEntry
from coursedesk.services.autosave import Debouncer

logger = logging.getLogger(__name__)


class GradingStateError(ValueError):
    pass


def _points_text(value: float | None) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class GradeDraft:
    student_id: int
    points: str = ""
    feedback: str = ""

    def parsed_points(self, points_possible: float) -> float | None:
        if self.points.strip() == "":
            return None
        try:
            value = float(self.points)
        except ValueError:
            raise GradingStateError(f"points must be a number, got {self.points!r}") from None
        if value < 0 or value > points_possible:
            raise GradingStateError(f"points must be between 0 and {points_possible:g}")
        return value


@dataclass(frozen=True)
class CommittedGrade:
    student_id: int
    submission_id: int | None
    points_earned: float | None
    feedback: str | None


class GradingSession:
    def __init__(
        self,
        roster: Sequence[RosterEntry],
        points_possible: float,
        on_commit: Optional[Callable[[CommittedGrade], None]] = None,
        debouncer_factory: Optional[Callable[[Callable], Debouncer]] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        if not roster:
            raise GradingStateError("roster is empty")

        self._roster = list(roster)
        self._points_possible = points_possible
        self._on_commit = on_commit
        self._clock = clock
        self._selected = 0
        self.saved_at: datetime | None = None

        # seed drafts from what is already persisted
        self._drafts: dict[int, GradeDraft] = {
            s.id: GradeDraft(
                student_id=s.id,
                points=_points_text(s.earned_points),
                feedback=s.feedback or "",
            )
            for s in self._roster
        }

        self._autosave = debouncer_factory(self._autosave_fired) if debouncer_factory else None

    # --- selection ---

    @property
    def roster(self) -> list[RosterEntry]:
        return list(self._roster)

    @property
    def selected_index(self) -> int:
        return self._selected

    @property
    def selected(self) -> RosterEntry:
        return self._roster[self._selected]

    @property
    def draft(self) -> GradeDraft:
        return self._drafts[self.selected.id]

    def select(self, index: int) -> GradeDraft:
        if not 0 <= index < len(self._roster):
            raise GradingStateError(f"no student at index {index}")
        self._selected = index
        self.saved_at = None
        return self.draft

    def next(self) -> GradeDraft:
        return self.select(min(self._selected + 1, len(self._roster) - 1))

    def previous(self) -> GradeDraft:
        return self.select(max(self._selected - 1, 0))

    # --- editing ---

    def _editable(self) -> RosterEntry:
        student = self.selected
        if not student.file:
            raise GradingStateError(f"{student.name} has no submission to grade")
        return student

    def edit_points(self, value: str) -> GradeDraft:
        student = self._editable()
        return self._edit(student.id, "points", replace(self._drafts[student.id], points=value))

    def edit_feedback(self, value: str) -> GradeDraft:
        student = self._editable()
        return self._edit(student.id, "feedback", replace(self._drafts[student.id], feedback=value))

    def _edit(self, student_id: int, field: str, draft: GradeDraft) -> GradeDraft:
        self._drafts[student_id] = draft
        self.saved_at = None
        if self._autosave is not None:
            self._autosave.submit((student_id, field), student_id)
        return draft

    # --- commit ---

    def commit(self, student_id: int | None = None) -> CommittedGrade:
        student = self._student(self.selected.id if student_id is None else student_id)
        if not student.file:
            raise GradingStateError(f"{student.name} has no submission to grade")

        draft = self._drafts[student.id]
        result = CommittedGrade(
            student_id=student.id,
            submission_id=student.submission_id,
            points_earned=draft.parsed_points(self._points_possible),
            feedback=draft.feedback or None,
        )

        if self._on_commit is not None:
            self._on_commit(result)
        self.saved_at = self._clock()
        logger.info("committed grade for student %s: %s", student.id, result.points_earned)
        return result

    def _autosave_fired(self, key, student_id: int) -> None:
        try:
            self.commit(student_id)
        except GradingStateError as exc:
            logger.warning("auto-save skipped for student %s: %s", student_id, exc)

    def _student(self, student_id: int) -> RosterEntry:
        for s in self._roster:
            if s.id == student_id:
                return s
        raise GradingStateError(f"student {student_id} is not on this roster")

    def close(self) -> None:
        if self._autosave is not None:
            self._autosave.close()
