from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index, JSON, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.database.base_class import Base
from app.model.enums import DeviceType, IssueType, TicketStatus, TicketPriority

# populated only when issue_type == check
CHECK_FIELDS = (
    "teacher",
    "room_number",
    "all_present",
    "missing_students",
    "all_charged",
    "not_charged_students",
    "any_missing",
    "missing_device_students",
    "any_broken",
    "broken_asset_tag",
    "lte_working",
    "lte_broken_asset_tag",
)


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    assigned_to = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    student_name = Column(String(255), nullable=False)
    student_grade = Column(String(50), nullable=False)
    device_type = Column(SAEnum(DeviceType, name="device_type"), nullable=False)
    device_number = Column(String(100), nullable=True)
    issue_type = Column(SAEnum(IssueType, name="issue_type"), nullable=False)
    issue_description = Column(Text, nullable=False)
    status = Column(SAEnum(TicketStatus, name="ticket_status"), nullable=False, default=TicketStatus.pending)
    priority = Column(SAEnum(TicketPriority, name="ticket_priority"), nullable=True)

    # device check
    teacher = Column(String(255), nullable=True)
    room_number = Column(String(50), nullable=True)
    all_present = Column(Boolean, nullable=True)
    missing_students = Column(JSON, nullable=True)
    all_charged = Column(Boolean, nullable=True)
    not_charged_students = Column(JSON, nullable=True)
    any_missing = Column(Boolean, nullable=True)
    missing_device_students = Column(JSON, nullable=True)
    any_broken = Column(Boolean, nullable=True)
    broken_asset_tag = Column(String(100), nullable=True)
    lte_working = Column(Boolean, nullable=True)
    lte_broken_asset_tag = Column(String(100), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        Index("IDX_ticket_school", "school_id"),
        Index("IDX_ticket_status", "status"),
        Index("IDX_ticket_created", "created_at"),
        Index("IDX_ticket_assigned", "assigned_to"),
    )

    school = relationship("School", back_populates="tickets")
    assignee = relationship("User")
    notes = relationship("TicketNote", back_populates="ticket", cascade="all, delete-orphan")
