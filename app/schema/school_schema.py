from typing import Optional

from pydantic import EmailStr, Field

from app.schema.base_schema import CamelModel


class SchoolCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    address: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    admin_name: Optional[str] = None


class SchoolUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    address: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    admin_name: Optional[str] = None


class SchoolOut(CamelModel):
    id: str
    name: str
    address: Optional[str] = None
    contact_email: Optional[str] = None
    admin_name: Optional[str] = None
