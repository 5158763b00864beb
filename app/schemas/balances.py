from decimal import Decimal
from typing import List
from pydantic import BaseModel
from app.schemas.user import UserBrief

class UserBalanceOut(BaseModel):
    user: UserBrief | None
    total_paid: Decimal
    total_owed: Decimal
    net_balance: Decimal

class SettlementSuggestionOut(BaseModel):
    from_user: UserBrief | None
    to_user: UserBrief | None
    amount: Decimal

class EventBalanceOut(BaseModel):
    balances: List[UserBalanceOut]
    settlements: List[SettlementSuggestionOut]
    unbalanced_expense_ids: List[int]
