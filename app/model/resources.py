from uuid import uuid4
from sqlalchemy import Column, String, Text, Integer, Enum as SAEnum
from app.database.base_class import Base
from app.model.enums import Category, ContentType


class Resource(Base):
    __tablename__ = "resources"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(255), nullable=False)
    category = Column(SAEnum(Category, name="category"), nullable=False)
    content_type = Column(SAEnum(ContentType, name="content_type"), nullable=False)
    url = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String(500), nullable=True)
    duration = Column(String(50), nullable=True)  # e.g. "5 min", "0:45"
    views = Column(Integer, default=0)
