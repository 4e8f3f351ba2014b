from uuid import uuid4
from sqlalchemy import Column, String, Text, Integer, Date, ForeignKey
from sqlalchemy.orm import relationship
from app.database.base_class import Base


class WorkLog(Base):
    __tablename__ = "work_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    log_date = Column(Date, nullable=False)
    hours_worked = Column(Integer, nullable=True)  # minutes
    category = Column(String(100), nullable=True)
    description = Column(Text, nullable=False)

    user = relationship("User", back_populates="work_logs")
