import logging
from datetime import datetime
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, or_
from sqlalchemy.orm import selectinload
from fastapi import HTTPException
from app.models.event import Event, EventParticipant
from app.models.expense import Expense
from app.models.expense_split import ExpenseSplit
from app.core.config import settings
from app.core.dependencies import check_event_access
from app.core.utils import qround, ZERO
from app.services.event_services import get_participant_ids

logger = logging.getLogger(__name__)

def _with_details(q):
    return q.options(selectinload(Expense.payer), selectinload(Expense.splits))

async def _load_expense(db: AsyncSession, expense_id: int):
    q = _with_details(select(Expense).where(Expense.id == expense_id))
    res = await db.execute(q.execution_options(populate_existing=True))
    return res.scalar_one_or_none()

def validate_splits(amount: Decimal, splits, participant_ids=None):
    """Reject split sets that cannot be stored alongside `amount`."""
    if not splits:
        raise HTTPException(400, "At least one split is required")

    user_ids = [s.user_id for s in splits]

    if len(user_ids) != len(set(user_ids)):
        raise HTTPException(400, "Duplicate users found in splits")

    if any(s.share <= 0 for s in splits):
        raise HTTPException(400, "Split shares must be positive")

    if participant_ids is not None and not set(user_ids) <= set(participant_ids):
        raise HTTPException(400, "Some users in split are not event participants")

    total = sum((s.share for s in splits), ZERO)
    if abs(total - amount) > settings.BALANCE_TOLERANCE:
        raise HTTPException(400, "Splits must add up to the total amount")

# Personal expenses

async def create_personal_expense(db: AsyncSession, data, user_id: int):
    expense = Expense(
        description=data.description,
        amount=data.amount,
        paid_by=user_id
    )
    db.add(expense)
    await db.flush()

    # the payer carries the whole amount
    db.add(ExpenseSplit(expense_id=expense.id, user_id=user_id, share=data.amount))

    await db.commit()
    logger.info("User %s added personal expense %s", user_id, expense.id)
    return await _load_expense(db, expense.id)

async def list_personal_expenses(db: AsyncSession, user_id: int, limit: int = 20, offset: int = 0):
    q = (
        select(Expense)
        .where(Expense.paid_by == user_id, Expense.event_id.is_(None))
        .order_by(Expense.created_at.desc(), Expense.id.desc())
        .limit(limit)
        .offset(offset)
    )
    res = await db.execute(q)
    return res.scalars().all()

async def _get_personal_expense(db: AsyncSession, expense_id: int, user_id: int) -> Expense:
    q = select(Expense).where(
        Expense.id == expense_id,
        Expense.paid_by == user_id,
        Expense.event_id.is_(None)
    )
    res = await db.execute(q)
    expense = res.scalar_one_or_none()

    if not expense:
        raise HTTPException(404, "Expense not found or not authorized")

    return expense

async def update_personal_expense(db: AsyncSession, expense_id: int, data, user_id: int):
    expense = await _get_personal_expense(db, expense_id, user_id)

    expense.description = data.description
    expense.amount = data.amount

    await db.execute(delete(ExpenseSplit).where(ExpenseSplit.expense_id == expense_id))
    db.add(ExpenseSplit(expense_id=expense_id, user_id=user_id, share=data.amount))

    await db.commit()
    return await _load_expense(db, expense_id)

async def delete_expense(db: AsyncSession, expense_id: int, user_id: int):
    res = await db.execute(select(Expense).where(Expense.id == expense_id))
    expense = res.scalar_one_or_none()

    if not expense:
        raise HTTPException(404, "Expense not found")

    if expense.paid_by != user_id:
        raise HTTPException(403, "You cannot delete this expense")

    await db.delete(expense)
    await db.commit()
    logger.info("User %s deleted expense %s", user_id, expense_id)

    return {"status": "deleted"}

async def get_expense_by_id(db: AsyncSession, expense_id: int, user_id: int):
    expense = await _load_expense(db, expense_id)

    if not expense:
        raise HTTPException(404, "Expense not found")

    if expense.paid_by != user_id:
        if expense.event_id is None:
            raise HTTPException(404, "Expense not found")
        await check_event_access(db, expense.event_id, user_id)

    return expense

async def get_summary(
    db: AsyncSession,
    user_id: int,
    start_date: datetime | None = None,
    end_date: datetime | None = None
):
    q = select(Expense.amount, Expense.created_at).where(
        Expense.paid_by == user_id,
        Expense.event_id.is_(None)
    )
    if start_date:
        q = q.where(Expense.created_at >= start_date)
    if end_date:
        q = q.where(Expense.created_at <= end_date)

    res = await db.execute(q)
    rows = res.all()

    total = ZERO
    by_month = {}

    for amount, created_at in rows:
        amount = Decimal(str(amount))
        total += amount
        month = created_at.strftime("%Y-%m")
        by_month[month] = by_month.get(month, ZERO) + amount

    count = len(rows)
    average = total / count if count else ZERO

    return {
        "total_amount": qround(total),
        "total_expenses": count,
        "average_expense": qround(average),
        "expenses_by_month": {m: qround(v) for m, v in sorted(by_month.items())}
    }

async def get_recent(db: AsyncSession, user_id: int, limit: int = 5):
    return await list_personal_expenses(db, user_id, limit=limit, offset=0)

# Event expenses

async def list_event_expenses(db: AsyncSession, event_id: int, limit: int | None = None, offset: int = 0):
    q = _with_details(
        select(Expense)
        .where(Expense.event_id == event_id)
        .order_by(Expense.created_at.desc(), Expense.id.desc())
        .offset(offset)
    )
    if limit is not None:
        q = q.limit(limit)

    res = await db.execute(q)
    return res.scalars().all()

async def create_event_expense(db: AsyncSession, data, user_id: int):
    await check_event_access(db, data.event_id, user_id)

    participant_ids = await get_participant_ids(db, data.event_id)
    validate_splits(data.amount, data.splits, participant_ids)

    expense = Expense(
        event_id=data.event_id,
        description=data.description,
        amount=data.amount,
        paid_by=user_id
    )
    db.add(expense)
    await db.flush()

    for s in data.splits:
        db.add(ExpenseSplit(expense_id=expense.id, user_id=s.user_id, share=s.share))

    await db.commit()
    logger.info("User %s added expense %s to event %s", user_id, expense.id, data.event_id)
    return await _load_expense(db, expense.id)

async def update_event_expense(db: AsyncSession, expense_id: int, data, user_id: int):
    q = select(Expense).where(Expense.id == expense_id, Expense.paid_by == user_id)
    res = await db.execute(q)
    expense = res.scalar_one_or_none()

    if not expense or expense.event_id is None:
        raise HTTPException(404, "Expense not found or not authorized")

    await check_event_access(db, expense.event_id, user_id)

    participant_ids = await get_participant_ids(db, expense.event_id)
    validate_splits(data.amount, data.splits, participant_ids)

    expense.description = data.description
    expense.amount = data.amount

    # replace the whole split set so shares always add up to the new amount
    await db.execute(delete(ExpenseSplit).where(ExpenseSplit.expense_id == expense_id))

    for s in data.splits:
        db.add(ExpenseSplit(expense_id=expense_id, user_id=s.user_id, share=s.share))

    await db.commit()
    logger.info("User %s updated expense %s", user_id, expense_id)
    return await _load_expense(db, expense_id)

async def get_all_expenses(db: AsyncSession, user_id: int, limit: int = 20, offset: int = 0):
    participating = select(EventParticipant.event_id).where(EventParticipant.user_id == user_id)
    created = select(Event.id).where(Event.created_by == user_id)

    q = _with_details(
        select(Expense)
        .where(
            or_(
                (Expense.paid_by == user_id) & Expense.event_id.is_(None),
                Expense.event_id.in_(participating),
                Expense.event_id.in_(created)
            )
        )
        .order_by(Expense.created_at.desc(), Expense.id.desc())
        .limit(limit)
        .offset(offset)
    )
    res = await db.execute(q)
    return res.scalars().all()
