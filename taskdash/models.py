from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    priority = Column(String, nullable=False, default="medium")  # low, medium, high
    status = Column(String, nullable=False, default="pending")  # pending, in-progress, done
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Task(id={self.id}, owner_id='{self.owner_id}', title='{self.title}', status='{self.status}')>"
