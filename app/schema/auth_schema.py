from datetime import datetime

from pydantic import Field

from app.schema.base_schema import CamelModel
from app.schema.user_schema import UserOut


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class Token(CamelModel):
    """Bearer session token handed out at login"""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserOut
