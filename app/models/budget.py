# app/models/budget.py
import enum
import uuid
from sqlalchemy import Column, String, ForeignKey, Numeric, Boolean, DateTime, Enum, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.timestamp import utcnow


class BudgetPeriod(str, enum.Enum):
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


class Budget(Base):
    __tablename__ = "budgets"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    # None means the budget covers all spending
    category = Column(String(length=100), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    period = Column(Enum(BudgetPeriod, name="budget_period"), nullable=False, default=BudgetPeriod.monthly)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="budgets")

    def __repr__(self):
        return f"<Budget name={self.name} amount={self.amount} period={self.period} user_id={self.user_id}>"
