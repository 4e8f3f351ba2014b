from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, Boolean, ForeignKey, DateTime, Integer, Index, CheckConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.database.base_class import Base
from app.model.enums import UserRole, AvatarType


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid4()))
    # null only for super admins
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="CASCADE"), nullable=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(SAEnum(UserRole, name="user_role"), nullable=False, default=UserRole.student)
    points = Column(Integer, nullable=False, default=0)
    streak = Column(Integer, nullable=False, default=0)
    selected_avatar = Column(SAEnum(AvatarType, name="avatar_type"), default=AvatarType.rocket)
    is_active = Column(Boolean, nullable=False, default=True)
    password_reset_token = Column(String(255), nullable=True)
    password_reset_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        Index("IDX_user_school", "school_id"),
        Index("IDX_user_role", "role"),
        Index("IDX_user_email", "email"),
        CheckConstraint("points >= 0", name="ck_user_points_nonneg"),
        CheckConstraint("streak >= 0", name="ck_user_streak_nonneg"),
    )

    school = relationship("School", back_populates="users")
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    completions = relationship("ChallengeCompletion", back_populates="user", cascade="all, delete-orphan")
    work_logs = relationship("WorkLog", back_populates="user", cascade="all, delete-orphan")
    achievements = relationship("UserAchievement", back_populates="user", cascade="all, delete-orphan")
    certifications = relationship("UserCertification", back_populates="user", cascade="all, delete-orphan")
