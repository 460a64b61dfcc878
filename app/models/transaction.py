# app/models/transaction.py
import enum
import uuid
from sqlalchemy import Column, String, Text, ForeignKey, Numeric, DateTime, Integer, Enum, JSON, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.timestamp import utcnow


class TransactionType(str, enum.Enum):
    expense = "expense"
    income = "income"


class Mood(str, enum.Enum):
    happy = "happy"
    neutral = "neutral"
    sad = "sad"
    stressed = "stressed"
    excited = "excited"


class Transaction(Base):
    __tablename__ = "transactions"

    # Store-assigned insertion sequence; breaks ties between equal transaction dates
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Uuid(as_uuid=True), unique=True, index=True, nullable=False, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(length=100), nullable=False)
    # The date the money moved; every analytics window is defined over this column
    transaction_date = Column(DateTime, nullable=False, index=True)

    location = Column(Text, nullable=True)
    latitude = Column(Numeric(10, 8), nullable=True)
    longitude = Column(Numeric(11, 8), nullable=True)
    mood = Column(Enum(Mood, name="transaction_mood"), nullable=True)
    rating = Column(Integer, nullable=True)
    receipt_url = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="transactions")

    def __repr__(self):
        return f"<Transaction {self.type.value if self.type else None} amount={self.amount} date={self.transaction_date} user_id={self.user_id}>"
