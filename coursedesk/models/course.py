from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursedesk.db.base_class import Base


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    semester: Mapped[str] = mapped_column(String(20), nullable=False)
    color: Mapped[str | None] = mapped_column(String(7))  # hex, e.g. #10B981
    instructor_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"), index=True
    )
    invite_code: Mapped[str] = mapped_column(String(8), unique=True, nullable=False)

    # settings
    enrollment_limit: Mapped[int | None] = mapped_column(Integer)
    allow_self_enrollment: Mapped[bool] = mapped_column(Boolean, default=True)
    late_policy: Mapped[str] = mapped_column(String(20), default="deduct")
    late_penalty: Mapped[int] = mapped_column(Integer, default=10)  # percent per day
    grade_calculation: Mapped[str] = mapped_column(String(20), default="simple")
    show_grades: Mapped[bool] = mapped_column(Boolean, default=True)
    hide_student_names: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    enrollments = relationship(
        "Enrollment", back_populates="course", cascade="all, delete-orphan"
    )

    assignments = relationship(
        "Assignment", back_populates="course", cascade="all, delete-orphan"
    )

    announcements = relationship(
        "Announcement", back_populates="course", cascade="all, delete-orphan"
    )
