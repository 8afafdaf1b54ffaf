from sqlalchemy import Boolean, Column, DateTime, String

from fintrack.core.database import Base
from fintrack.models.base import EntityMixin


class User(EntityMixin, Base):
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(30), nullable=False)
    last_name = Column(String(30), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    is_admin = Column(Boolean, nullable=False, default=False)
    last_login = Column(DateTime, nullable=True)
