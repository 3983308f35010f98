import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from coursedesk.core.deps import get_db
from coursedesk.models.announcement import Announcement
from coursedesk.models.course import Course
from coursedesk.models.user import User
from coursedesk.schemas.announcement import AnnouncementCreate, AnnouncementRead

logger = logging.getLogger(__name__)

router = APIRouter(tags=["announcements"])


def _read(a: Announcement) -> AnnouncementRead:
    out = AnnouncementRead.model_validate(a)
    out.author_name = a.author.name if a.author else None
    return out


@router.get("/courses/{course_id}/announcements", response_model=list[AnnouncementRead])
def list_announcements(course_id: int, db: Session = Depends(get_db)):
    if not db.query(Course.id).filter(Course.id == course_id).first():
        raise HTTPException(status_code=404, detail="Course not found")

    rows = (
        db.query(Announcement)
        .options(joinedload(Announcement.author))
        .filter(Announcement.course_id == course_id)
        .order_by(
            Announcement.is_pinned.desc(),  # pinned first
            Announcement.created_at.desc(),
            Announcement.id.desc(),
        )
        .all()
    )
    return [_read(a) for a in rows]


@router.post(
    "/courses/{course_id}/announcements",
    response_model=AnnouncementRead,
    status_code=status.HTTP_201_CREATED,
)
def post_announcement(
    course_id: int,
    payload: AnnouncementCreate,
    db: Session = Depends(get_db),
):
    if not db.query(Course.id).filter(Course.id == course_id).first():
        raise HTTPException(status_code=404, detail="Course not found")
    if not db.query(User.id).filter(User.id == payload.posted_by).first():
        raise HTTPException(status_code=404, detail="User not found")

    a = Announcement(
        course_id=course_id,
        title=payload.title,
        content=payload.content,
        posted_by=payload.posted_by,
        is_pinned=payload.is_pinned,
    )
    db.add(a)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(a)
    logger.info("announcement %s posted to course %s", a.id, course_id)
    return _read(a)
