from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, condecimal, ConfigDict
from app.models.settlement import SettlementStatus

class SettlementCreate(BaseModel):
    to_user: int
    amount: condecimal(gt=0, max_digits=10, decimal_places=2)
    event_id: int | None = None

class SettlementOut(BaseModel):
    id: int
    event_id: int | None = None
    from_user: int
    to_user: int
    amount: Decimal
    status: SettlementStatus
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
