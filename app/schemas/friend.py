from datetime import datetime
from pydantic import BaseModel, EmailStr, ConfigDict
from app.schemas.user import UserOut

class FriendAdd(BaseModel):
    email: EmailStr

class FriendOut(BaseModel):
    id: int
    friend: UserOut
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

class FriendSearchOut(UserOut):
    is_already_friend: bool
    is_self: bool
