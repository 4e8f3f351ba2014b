from uuid import uuid4
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.database.base_class import Base
from app.model.enums import CertificationStatus


class UserCertification(Base):
    __tablename__ = "user_certifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    certification_id = Column(String(36), ForeignKey("certifications.id", ondelete="CASCADE"), nullable=False)
    status = Column(
        SAEnum(CertificationStatus, name="certification_status"),
        nullable=False,
        default=CertificationStatus.not_started,
    )
    progress = Column(Integer, nullable=False, default=0)  # percentage
    earned_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "certification_id", name="uq_user_certification"),
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_certification_progress_range"),
    )

    user = relationship("User", back_populates="certifications")
    certification = relationship("Certification", back_populates="users")
