from uuid import uuid4
from sqlalchemy import Column, String, Text, Integer, Boolean, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.database.base_class import Base
from app.model.enums import Difficulty, Category


class Challenge(Base):
    __tablename__ = "challenges"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    difficulty = Column(SAEnum(Difficulty, name="difficulty"), nullable=False)
    points = Column(Integer, nullable=False)
    category = Column(SAEnum(Category, name="category"), nullable=False)
    days_to_complete = Column(Integer, nullable=True)
    participants = Column(Integer, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    completions = relationship("ChallengeCompletion", back_populates="challenge")
