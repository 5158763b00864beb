from datetime import datetime
from typing import List
from pydantic import BaseModel, Field, ConfigDict
from app.schemas.user import UserBrief

class EventCreate(BaseModel):
    name: str = Field(min_length=1)
    participant_ids: List[int] = Field(min_length=1)

class EventUpdate(BaseModel):
    name: str = Field(min_length=1)

class ParticipantsIn(BaseModel):
    participant_ids: List[int] = Field(min_length=1)

class ParticipantOut(BaseModel):
    id: int
    user_id: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

class EventOut(BaseModel):
    id: int
    name: str
    created_by: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

class EventDetailOut(EventOut):
    participants: List[UserBrief]
