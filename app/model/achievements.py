from uuid import uuid4
from sqlalchemy import Column, String, Integer, Text, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.database.base_class import Base
from app.model.enums import AchievementIcon


class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(SAEnum(AchievementIcon, name="achievement_icon"), nullable=False)
    points_required = Column(Integer, nullable=True)
    category = Column(String(100), nullable=True)

    users = relationship("UserAchievement", back_populates="achievement", cascade="all, delete-orphan")
