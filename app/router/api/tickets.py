from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.model.enums import DeviceType, IssueType, TicketStatus
from app.router.api.logics.ticket_logic import (
    TicketFilters,
    create_ticket,
    create_ticket_note,
    delete_ticket,
    get_ticket,
    get_ticket_notes,
    list_tickets,
    summarize_tickets,
    update_ticket,
)
from app.router.dependencies import AuthContext, require_school_admin, require_school_context
from app.schema.ticket_schema import (
    TicketCreate,
    TicketNoteCreate,
    TicketNoteOut,
    TicketOut,
    TicketSummary,
    TicketUpdate,
)

router = APIRouter()


@router.get("", response_model=List[TicketOut], status_code=status.HTTP_200_OK)
def read_tickets(
    school_id: str,
    sort_by: Literal["date", "student"] = Query("date", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    issue_type: Optional[IssueType] = Query(None, alias="issueType"),
    ticket_status: Optional[TicketStatus] = Query(None, alias="status"),
    device_type: Optional[DeviceType] = Query(None, alias="deviceType"),
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_context),
):
    """Tickets of the school, newest first by default."""
    filters = TicketFilters(
        status=ticket_status,
        device_type=device_type,
        issue_type=issue_type,
        assigned_to=assigned_to,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return list_tickets(db, school_id, filters)


@router.get("/summary", response_model=TicketSummary, status_code=status.HTTP_200_OK)
def read_ticket_summary(
    school_id: str,
    issue_type: Optional[IssueType] = Query(None, alias="issueType"),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_context),
):
    return summarize_tickets(db, school_id, issue_type)


@router.post("", response_model=TicketOut, status_code=status.HTTP_201_CREATED)
def add_ticket(
    school_id: str,
    request: TicketCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_context),
):
    """Submits a device check or a repair, chosen by `issueType`."""
    return create_ticket(db, ctx, school_id, request)


@router.get("/{ticket_id}", response_model=TicketOut, status_code=status.HTTP_200_OK)
def read_ticket(
    school_id: str,
    ticket_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_context),
):
    return get_ticket(db, ticket_id, school_id)


@router.patch("/{ticket_id}", response_model=TicketOut, status_code=status.HTTP_200_OK)
def edit_ticket(
    school_id: str,
    ticket_id: str,
    request: TicketUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    return update_ticket(db, ticket_id, school_id, request)


@router.delete("/{ticket_id}", response_model=dict, status_code=status.HTTP_200_OK)
def remove_ticket(
    school_id: str,
    ticket_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    delete_ticket(db, ticket_id, school_id)
    return {"message": "Ticket deleted successfully"}


@router.get("/{ticket_id}/notes", response_model=List[TicketNoteOut], status_code=status.HTTP_200_OK)
def read_ticket_notes(
    school_id: str,
    ticket_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_context),
):
    return get_ticket_notes(db, ticket_id, school_id)


@router.post("/{ticket_id}/notes", response_model=TicketNoteOut, status_code=status.HTTP_201_CREATED)
def add_ticket_note(
    school_id: str,
    ticket_id: str,
    request: TicketNoteCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_context),
):
    return create_ticket_note(db, ctx, school_id, ticket_id, request)
