from uuid import uuid4
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship
from app.database.base_class import Base


class School(Base):
    __tablename__ = "schools"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    contact_email = Column(String(255), nullable=True)
    admin_name = Column(String(255), nullable=True)

    users = relationship("User", back_populates="school")
    tickets = relationship("Ticket", back_populates="school", cascade="all, delete-orphan")
