from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, ConfigDict

class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    avatar_url: str | None = None

class UserBrief(BaseModel):
    id: int
    name: str
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)

class UserOut(UserBrief):
    email: EmailStr
    created_at: datetime | None = None
