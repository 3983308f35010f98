from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from coursedesk.core.config import LOCAL_TIMEZONE
from coursedesk.db.session import SessionLocal


# every request that needs DB will get a fresh session, and it will always close.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# the only place the wall clock is read; tests override this dependency
def get_now() -> datetime:
    return datetime.now(timezone.utc)


def get_local_tz() -> ZoneInfo:
    return ZoneInfo(LOCAL_TIMEZONE)
