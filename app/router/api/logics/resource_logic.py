from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.exceptions import NotFound
from app.model.enums import Category, ContentType
from app.model.resources import Resource
from app.schema.gamification_schema import ResourceCreate, ResourceUpdate


@dataclass
class ResourceFilters:
    category: Optional[Category] = None
    content_type: Optional[ContentType] = None
    search: Optional[str] = None


def get_resources(db: Session, filters: Optional[ResourceFilters] = None) -> List[Resource]:
    """Learning resources; `search` matches title or description, case-insensitive."""
    filters = filters or ResourceFilters()
    query = db.query(Resource)
    if filters.category:
        query = query.filter(Resource.category == filters.category)
    if filters.content_type:
        query = query.filter(Resource.content_type == filters.content_type)
    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.filter(or_(Resource.title.ilike(pattern), Resource.description.ilike(pattern)))
    return query.order_by(Resource.title, Resource.id).all()


def get_resource(db: Session, resource_id: str) -> Resource:
    resource = db.query(Resource).filter(Resource.id == resource_id).first()
    if not resource:
        raise NotFound("Resource not found")
    return resource


def create_resource(db: Session, request: ResourceCreate) -> Resource:
    resource = Resource(views=0, **request.model_dump())
    db.add(resource)
    db.commit()
    db.refresh(resource)
    return resource


def update_resource(db: Session, resource_id: str, request: ResourceUpdate) -> Resource:
    resource = get_resource(db, resource_id)
    for key, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(resource, key, value)
    db.commit()
    db.refresh(resource)
    return resource


def record_resource_view(db: Session, resource_id: str) -> Resource:
    count = db.query(Resource).filter(Resource.id == resource_id).update(
        {Resource.views: func.coalesce(Resource.views, 0) + 1},
        synchronize_session="fetch",
    )
    if not count:
        raise NotFound("Resource not found")
    db.commit()
    resource = get_resource(db, resource_id)
    db.refresh(resource)
    return resource
