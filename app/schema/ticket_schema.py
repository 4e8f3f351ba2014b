from typing import Optional, List, Literal, Union, Annotated
from datetime import datetime

from pydantic import Field

from app.model.enums import DeviceType, TicketStatus, TicketPriority, IssueType
from app.schema.base_schema import CamelModel


class TicketBase(CamelModel):
    student_name: str = Field(min_length=1, max_length=255)
    student_grade: str = Field(min_length=1, max_length=50)
    device_type: DeviceType
    device_number: Optional[str] = Field(default=None, max_length=100)
    assigned_to: Optional[str] = None
    status: TicketStatus = TicketStatus.pending


class DeviceCheckCreate(TicketBase):
    """Classroom device check: the survey answers live in the check-only columns."""

    issue_type: Literal["check"]
    issue_description: str = "Device check"
    teacher: Optional[str] = Field(default=None, max_length=255)
    room_number: Optional[str] = Field(default=None, max_length=50)
    all_present: Optional[bool] = None
    missing_students: Optional[List[str]] = None
    all_charged: Optional[bool] = None
    not_charged_students: Optional[List[str]] = None
    any_missing: Optional[bool] = None
    missing_device_students: Optional[List[str]] = None
    any_broken: Optional[bool] = None
    broken_asset_tag: Optional[str] = Field(default=None, max_length=100)
    lte_working: Optional[bool] = None
    lte_broken_asset_tag: Optional[str] = Field(default=None, max_length=100)


class RepairCreate(TicketBase):
    issue_type: Literal["repair"]
    issue_description: str = Field(min_length=1)
    priority: TicketPriority = TicketPriority.medium


TicketCreate = Annotated[Union[DeviceCheckCreate, RepairCreate], Field(discriminator="issue_type")]


class TicketUpdate(CamelModel):
    assigned_to: Optional[str] = None
    student_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    student_grade: Optional[str] = Field(default=None, min_length=1, max_length=50)
    device_type: Optional[DeviceType] = None
    device_number: Optional[str] = Field(default=None, max_length=100)
    issue_description: Optional[str] = None
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    teacher: Optional[str] = Field(default=None, max_length=255)
    room_number: Optional[str] = Field(default=None, max_length=50)
    all_present: Optional[bool] = None
    missing_students: Optional[List[str]] = None
    all_charged: Optional[bool] = None
    not_charged_students: Optional[List[str]] = None
    any_missing: Optional[bool] = None
    missing_device_students: Optional[List[str]] = None
    any_broken: Optional[bool] = None
    broken_asset_tag: Optional[str] = Field(default=None, max_length=100)
    lte_working: Optional[bool] = None
    lte_broken_asset_tag: Optional[str] = Field(default=None, max_length=100)


class TicketOut(CamelModel):
    id: str
    school_id: str
    assigned_to: Optional[str] = None
    student_name: str
    student_grade: str
    device_type: DeviceType
    device_number: Optional[str] = None
    issue_type: IssueType
    issue_description: str
    status: TicketStatus
    priority: Optional[TicketPriority] = None
    teacher: Optional[str] = None
    room_number: Optional[str] = None
    all_present: Optional[bool] = None
    missing_students: Optional[List[str]] = None
    all_charged: Optional[bool] = None
    not_charged_students: Optional[List[str]] = None
    any_missing: Optional[bool] = None
    missing_device_students: Optional[List[str]] = None
    any_broken: Optional[bool] = None
    broken_asset_tag: Optional[str] = None
    lte_working: Optional[bool] = None
    lte_broken_asset_tag: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TicketSummary(CamelModel):
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    issue: int = 0
    total: int = 0


class TicketNoteCreate(CamelModel):
    note_text: str = Field(min_length=1)


class TicketNoteOut(CamelModel):
    id: str
    school_id: str
    ticket_id: str
    user_id: str
    note_text: str
    created_at: datetime
