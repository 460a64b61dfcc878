# app/models/category.py
import uuid
from sqlalchemy import Column, String, ForeignKey, Boolean, DateTime, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.timestamp import utcnow

class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=100), nullable=False)
    icon = Column(String(length=50), nullable=True)
    color = Column(String(length=50), nullable=True)
    is_default = Column(Boolean(), default=False, nullable=False)  # True for built-in categories

    created_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="categories")

    def __repr__(self):
        return f"<Category name={self.name} user_id={self.user_id}>"
