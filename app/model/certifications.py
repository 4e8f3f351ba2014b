from uuid import uuid4
from sqlalchemy import Column, String, Integer, Text
from sqlalchemy.orm import relationship
from app.database.base_class import Base


class Certification(Base):
    __tablename__ = "certifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    total_steps = Column(Integer, nullable=False, default=1)

    users = relationship("UserCertification", back_populates="certification", cascade="all, delete-orphan")
