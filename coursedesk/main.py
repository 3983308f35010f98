import logging

from fastapi import FastAPI

from coursedesk.core.config import LOG_LEVEL
from coursedesk.core.logging_middleware import LoggingMiddleware
from coursedesk.db.init_db import init_db

from coursedesk.routers.analytics import router as analytics_router
from coursedesk.routers.announcements import router as announcements_router
from coursedesk.routers.assignments import router as assignments_router
from coursedesk.routers.courses import router as courses_router
from coursedesk.routers.dashboard import router as dashboard_router
from coursedesk.routers.enrollments import router as enrollments_router
from coursedesk.routers.health import router as health_router
from coursedesk.routers.submissions import router as submissions_router

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(title="CourseDesk")

# Middleware
app.add_middleware(LoggingMiddleware)


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(health_router)
app.include_router(courses_router, prefix="/courses", tags=["courses"])
app.include_router(enrollments_router, prefix="/enrollments", tags=["enrollments"])
app.include_router(assignments_router, tags=["assignments"])
app.include_router(submissions_router, tags=["submissions"])
app.include_router(dashboard_router)
app.include_router(analytics_router)
app.include_router(announcements_router)
