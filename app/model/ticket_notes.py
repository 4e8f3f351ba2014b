from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database.base_class import Base


class TicketNote(Base):
    __tablename__ = "ticket_notes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    ticket_id = Column(String(36), ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    note_text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    ticket = relationship("Ticket", back_populates="notes")
    user = relationship("User")
