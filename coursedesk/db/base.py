# Import every model so Base.metadata knows all tables (used by init_db, alembic and tests)
from coursedesk.db.base_class import Base  # noqa: F401
from coursedesk.models.announcement import Announcement  # noqa: F401
from coursedesk.models.assignment import Assignment  # noqa: F401
from coursedesk.models.course import Course  # noqa: F401
from coursedesk.models.enrollment import Enrollment  # noqa: F401
from coursedesk.models.grade import Grade  # noqa: F401
from coursedesk.models.submission import Submission  # noqa: F401
from coursedesk.models.user import User  # noqa: F401
