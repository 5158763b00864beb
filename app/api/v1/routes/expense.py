from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.schemas.expense import ExpenseCreate, EventExpenseCreate, EventExpenseUpdate, ExpenseOut, ExpenseDetailOut, ExpenseSummary
from app.services.expense_services import (
    create_personal_expense, list_personal_expenses, update_personal_expense, delete_expense,
    get_expense_by_id, get_summary, get_recent, create_event_expense, update_event_expense, get_all_expenses
)
from app.core.dependencies import get_current_user

router = APIRouter()

@router.get("/", response_model=list[ExpenseOut])
async def personal_expenses(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await list_personal_expenses(db, current_user.id, limit=limit, offset=offset)

@router.post("/", response_model=ExpenseDetailOut)
async def add_expense(data: ExpenseCreate, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await create_personal_expense(db, data, current_user.id)

@router.get("/summary", response_model=ExpenseSummary)
async def summary(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await get_summary(db, current_user.id, start_date=start_date, end_date=end_date)

@router.get("/recent", response_model=list[ExpenseOut])
async def recent(
    limit: int = Query(5, ge=1, le=10),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await get_recent(db, current_user.id, limit=limit)

@router.get("/all", response_model=list[ExpenseDetailOut])
async def all_expenses(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await get_all_expenses(db, current_user.id, limit=limit, offset=offset)

@router.post("/event", response_model=ExpenseDetailOut)
async def add_event_expense(data: EventExpenseCreate, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await create_event_expense(db, data, current_user.id)

@router.put("/event/{expense_id}", response_model=ExpenseDetailOut)
async def edit_event_expense(
    expense_id: int,
    data: EventExpenseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await update_event_expense(db, expense_id, data, current_user.id)

@router.get("/{expense_id}", response_model=ExpenseDetailOut)
async def fetch(expense_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await get_expense_by_id(db, expense_id=expense_id, user_id=current_user.id)

@router.put("/{expense_id}", response_model=ExpenseDetailOut)
async def edit(expense_id: int, data: ExpenseCreate, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await update_personal_expense(db, expense_id, data, current_user.id)

@router.delete("/{expense_id}")
async def del_expense(expense_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await delete_expense(db, expense_id=expense_id, user_id=current_user.id)
