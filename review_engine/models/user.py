from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from review_engine.database import Base
from review_engine.models.mixins import SoftDeleteColumns


class User(SoftDeleteColumns, Base):
    """Employee directory entry; only the fields the review engine reads."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String, nullable=False, default="")
    email = Column(String, unique=True, index=True, nullable=True)
    level = Column(String, nullable=True)  # JUNIOR | MID | SENIOR | LEAD | MANAGER
    department = Column(String, nullable=True, index=True)
    manager_id = Column(String(36), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User {self.id} ({self.level})>"
