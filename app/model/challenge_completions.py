from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database.base_class import Base


class ChallengeCompletion(Base):
    __tablename__ = "challenge_completions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    challenge_id = Column(String(36), ForeignKey("challenges.id", ondelete="RESTRICT"), nullable=False)
    completed_at = Column(DateTime, nullable=False, default=datetime.now)
    points_earned = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "challenge_id", "school_id", name="uq_completion_user_challenge"),
    )

    user = relationship("User", back_populates="completions")
    challenge = relationship("Challenge", back_populates="completions")
