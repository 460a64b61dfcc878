# app/models/goal.py
import uuid
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Boolean, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.timestamp import utcnow

class Goal(Base):
    __tablename__ = "goals"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    target_amount = Column(Numeric(10, 2), nullable=False)
    # Track how much is saved so far, updated by the user
    current_amount = Column(Numeric(10, 2), nullable=False, default=0)
    category = Column(String(length=100), nullable=True)
    deadline = Column(DateTime, nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="goals")

    def __repr__(self):
        return f"<Goal name={self.name} target={self.target_amount} deadline={self.deadline} user_id={self.user_id}>"
