from datetime import datetime
from decimal import Decimal
from typing import Dict, List
from pydantic import BaseModel, Field, condecimal, ConfigDict
from app.schemas.user import UserBrief

Money = condecimal(gt=0, max_digits=10, decimal_places=2)

class SplitInput(BaseModel):
    user_id: int
    share: Money

class ExpenseCreate(BaseModel):
    description: str = Field(min_length=1)
    amount: Money

class EventExpenseCreate(ExpenseCreate):
    event_id: int
    splits: List[SplitInput] = Field(min_length=1)

class EventExpenseUpdate(ExpenseCreate):
    splits: List[SplitInput] = Field(min_length=1)

class SplitOut(BaseModel):
    user_id: int
    share: Decimal

    model_config = ConfigDict(from_attributes=True)

class ExpenseOut(BaseModel):
    id: int
    event_id: int | None = None
    description: str
    amount: Decimal
    paid_by: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

class ExpenseDetailOut(ExpenseOut):
    payer: UserBrief
    splits: List[SplitOut]

class ExpenseSummary(BaseModel):
    total_amount: Decimal
    total_expenses: int
    average_expense: Decimal
    expenses_by_month: Dict[str, Decimal]
