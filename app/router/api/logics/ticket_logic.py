from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import asc, desc, func, or_
from sqlalchemy.orm import Session

from app.exceptions import BadRequest, NotFound, ValidationError
from app.log import get_logger
from app.model.enums import DeviceType, IssueType, TicketStatus, UserRole
from app.model.ticket_notes import TicketNote
from app.model.tickets import CHECK_FIELDS, Ticket
from app.model.users import User
from app.router.dependencies import AuthContext
from app.schema.ticket_schema import (
    DeviceCheckCreate,
    TicketCreate,
    TicketNoteCreate,
    TicketSummary,
    TicketUpdate,
)

log = get_logger(__name__)

NON_NULLABLE_FIELDS = ("student_name", "student_grade", "device_type", "issue_description", "status")


@dataclass
class TicketFilters:
    status: Optional[TicketStatus] = None
    device_type: Optional[DeviceType] = None
    issue_type: Optional[IssueType] = None
    assigned_to: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = "date"
    sort_order: str = "desc"


def _ensure_assignee_in_school(db: Session, user_id: str, school_id: str) -> None:
    assignee = db.query(User).filter(User.id == user_id, User.school_id == school_id).first()
    if not assignee:
        raise BadRequest("Assigned user does not belong to this school")


def create_ticket(db: Session, ctx: AuthContext, school_id: str, request: TicketCreate) -> Ticket:
    """Persists a device check or a repair.

    The request is one of the two ticket variants; this flattens it into the
    single tickets table. Check-only columns stay NULL for repairs and repairs
    alone carry a priority.

    Args:
        db (Session): Database session
        ctx (AuthContext): the caller
        school_id (str): tenant the ticket belongs to
        request (TicketCreate): DeviceCheckCreate or RepairCreate

    Raises:
        BadRequest: assignee is not a member of the school

    Returns:
        Ticket: the stored ticket
    """
    values = request.model_dump()
    values["issue_type"] = IssueType(values["issue_type"])
    if isinstance(request, DeviceCheckCreate):
        values["priority"] = None

    if values.get("assigned_to"):
        _ensure_assignee_in_school(db, values["assigned_to"], school_id)
    elif ctx.role == UserRole.student:
        values["assigned_to"] = ctx.user_id

    now = datetime.now()
    ticket = Ticket(school_id=school_id, created_at=now, updated_at=now, **values)
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    log.info("Created %s ticket %s in school %s", ticket.issue_type.value, ticket.id, school_id)
    return ticket


def list_tickets(db: Session, school_id: str, filters: Optional[TicketFilters] = None) -> List[Ticket]:
    """Tickets of one school, most recent first unless asked otherwise."""
    filters = filters or TicketFilters()
    query = db.query(Ticket).filter(Ticket.school_id == school_id)

    if filters.status:
        query = query.filter(Ticket.status == filters.status)
    if filters.device_type:
        query = query.filter(Ticket.device_type == filters.device_type)
    if filters.issue_type:
        query = query.filter(Ticket.issue_type == filters.issue_type)
    if filters.assigned_to:
        query = query.filter(Ticket.assigned_to == filters.assigned_to)
    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.filter(or_(
            Ticket.student_name.ilike(pattern),
            Ticket.issue_description.ilike(pattern),
        ))

    direction = asc if filters.sort_order == "asc" else desc
    if filters.sort_by == "student":
        query = query.order_by(direction(Ticket.student_name), desc(Ticket.created_at), Ticket.id)
    else:
        query = query.order_by(direction(Ticket.created_at), Ticket.id)
    return query.all()


def get_ticket(db: Session, ticket_id: str, school_id: str) -> Ticket:
    ticket = db.query(Ticket).filter(Ticket.id == ticket_id, Ticket.school_id == school_id).first()
    if not ticket:
        raise NotFound("Ticket not found")
    return ticket


def get_tickets_by_user(
    db: Session,
    user_id: str,
    school_id: str,
    issue_type: Optional[IssueType] = None,
) -> List[Ticket]:
    return list_tickets(db, school_id, TicketFilters(assigned_to=user_id, issue_type=issue_type))


def update_ticket(db: Session, ticket_id: str, school_id: str, request: TicketUpdate) -> Ticket:
    """Partial update under the (id, school_id) key.

    Raises:
        NotFound: no ticket with this id in this school
        ValidationError: a field that does not apply to the ticket's type, or
        a required field set to null

    Returns:
        Ticket: the updated ticket with `updated_at` bumped
    """
    ticket = get_ticket(db, ticket_id, school_id)
    updates = request.model_dump(exclude_unset=True)

    for key in NON_NULLABLE_FIELDS:
        if key in updates and updates[key] is None:
            raise ValidationError(f"{key} cannot be null")
    if ticket.issue_type == IssueType.repair:
        misplaced = [k for k in CHECK_FIELDS if updates.get(k) is not None]
        if misplaced:
            raise ValidationError(f"Device check fields cannot be set on a repair: {', '.join(misplaced)}")
    elif updates.get("priority") is not None:
        raise ValidationError("Priority only applies to repairs")
    if updates.get("assigned_to"):
        _ensure_assignee_in_school(db, updates["assigned_to"], school_id)

    for key, value in updates.items():
        setattr(ticket, key, value)
    ticket.updated_at = datetime.now()
    db.commit()
    db.refresh(ticket)
    log.info("Updated ticket %s in school %s: %s", ticket_id, school_id, sorted(updates))
    return ticket


def delete_ticket(db: Session, ticket_id: str, school_id: str) -> None:
    count = db.query(Ticket).filter(
        Ticket.id == ticket_id,
        Ticket.school_id == school_id,
    ).delete(synchronize_session="fetch")
    if not count:
        raise NotFound("Ticket not found")
    db.commit()
    log.info("Deleted ticket %s in school %s", ticket_id, school_id)


def summarize_tickets(db: Session, school_id: str, issue_type: Optional[IssueType] = None) -> TicketSummary:
    """Counts per status, recomputed from the current rows on every call."""
    query = db.query(Ticket.status, func.count(Ticket.id)).filter(Ticket.school_id == school_id)
    if issue_type:
        query = query.filter(Ticket.issue_type == issue_type)
    counts = {status.value: count for status, count in query.group_by(Ticket.status).all()}
    return TicketSummary(
        pending=counts.get(TicketStatus.pending.value, 0),
        in_progress=counts.get(TicketStatus.in_progress.value, 0),
        completed=counts.get(TicketStatus.completed.value, 0),
        issue=counts.get(TicketStatus.issue.value, 0),
        total=sum(counts.values()),
    )


##############
### Notes ###
##############

def create_ticket_note(
    db: Session,
    ctx: AuthContext,
    school_id: str,
    ticket_id: str,
    request: TicketNoteCreate,
) -> TicketNote:
    get_ticket(db, ticket_id, school_id)
    note = TicketNote(
        school_id=school_id,
        ticket_id=ticket_id,
        user_id=ctx.user_id,
        note_text=request.note_text,
        created_at=datetime.now(),
    )
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


def get_ticket_notes(db: Session, ticket_id: str, school_id: str) -> List[TicketNote]:
    get_ticket(db, ticket_id, school_id)
    return db.query(TicketNote).filter(
        TicketNote.ticket_id == ticket_id,
        TicketNote.school_id == school_id,
    ).order_by(TicketNote.created_at, TicketNote.id).all()
