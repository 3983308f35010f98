from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from coursedesk.core.deps import get_db
from coursedesk.models.assignment import Assignment
from coursedesk.models.grade import Grade
from coursedesk.models.submission import Submission
from coursedesk.schemas.analytics import GradeDistributionRead
from coursedesk.services.stats import grade_distribution

router = APIRouter(tags=["analytics"])


@router.get(
    "/assignments/{assignment_id}/grade-distribution",
    response_model=GradeDistributionRead,
)
def assignment_grade_distribution(
    assignment_id: int,
    db: Session = Depends(get_db),
):
    assignment = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not assignment:
        raise HTTPException(status_code=404, detail="Assignment not found")

    earned = [
        points
        for (points,) in db.query(Grade.points_earned)
        .join(Submission, Submission.id == Grade.submission_id)
        .filter(
            Submission.assignment_id == assignment_id,
            Grade.points_earned.is_not(None),
        )
        .all()
    ]

    # zero-point assignments have no meaningful percentage
    percentages = (
        [p / assignment.points_possible * 100 for p in earned]
        if assignment.points_possible
        else []
    )

    return GradeDistributionRead(
        assignment_id=assignment.id,
        assignment_title=assignment.title,
        graded=len(earned),
        **grade_distribution(percentages),
    )
