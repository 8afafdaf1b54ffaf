from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from fintrack.core.database import Base
from fintrack.models.base import EntityMixin, utcnow


class Account(EntityMixin, Base):
    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_account_user_name"),)

    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False, default="bank")
    balance = Column(Float, nullable=False, default=0.0)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)


class Category(EntityMixin, Base):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("user_id", "name", "type", name="uq_category_user_name_type"),)

    name = Column(String(100), nullable=False)
    type = Column(String(10), nullable=False)
    icon = Column(String(50), nullable=True)
    color = Column(String(20), nullable=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)


class Budget(EntityMixin, Base):
    __tablename__ = "budgets"

    amount = Column(Float, nullable=False)
    period = Column(String(10), nullable=False, index=True)
    category_id = Column(String(32), ForeignKey("categories.id"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)

    # always joined so responses never lazy-load under the async session
    category_details = relationship(Category, lazy="joined")


class Transaction(EntityMixin, Base):
    __tablename__ = "transactions"

    amount = Column(Float, nullable=False)
    type = Column(String(10), nullable=False, index=True)
    description = Column(Text, nullable=False)
    date = Column(DateTime, nullable=False, default=utcnow, index=True)
    category_id = Column(String(32), ForeignKey("categories.id"), nullable=False, index=True)
    account_id = Column(String(32), ForeignKey("accounts.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    img_url = Column(String(500), nullable=True)
