from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import relationship

from coursedesk.db.base_class import Base


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    points_possible = Column(Float, nullable=False, default=100)
    due_date = Column(DateTime(timezone=True), nullable=False)
    allow_late = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_assignments_course_due_date", "course_id", "due_date"),
    )

    course = relationship("Course", back_populates="assignments")

    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")
