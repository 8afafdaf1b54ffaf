import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    # stored naive, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class EntityMixin:
    id = Column(String(32), primary_key=True, default=new_id)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
