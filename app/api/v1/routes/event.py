from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.dependencies import get_current_user, check_event_access
from app.schemas.event import EventCreate, EventUpdate, EventOut, EventDetailOut, ParticipantsIn, ParticipantOut
from app.schemas.expense import ExpenseDetailOut
from app.schemas.balances import EventBalanceOut
from app.services.event_services import (
    create_event, list_events_for_user, get_event_detail, edit_event, delete_event,
    add_participants, remove_participants
)
from app.services.expense_services import list_event_expenses
from app.services.balance_services import get_event_balance

router = APIRouter()

@router.get("/", response_model=list[EventOut], description="events the user created or takes part in")
async def my_events(db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await list_events_for_user(db, user.id)

@router.post("/", response_model=EventOut, description="create new event")
async def create_new_event(data: EventCreate, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await create_event(db, data.name, data.participant_ids, user.id)

@router.get("/{event_id}", response_model=EventDetailOut)
async def fetch_event(event_id: int, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    event = await check_event_access(db, event_id, user.id)
    return await get_event_detail(db, event)

@router.patch("/{event_id}", response_model=EventOut)
async def edit(event_id: int, data: EventUpdate, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await edit_event(db, event_id, user.id, data.name)

@router.delete("/{event_id}")
async def del_event(event_id: int, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await delete_event(db, event_id, user.id)

@router.post("/{event_id}/participants", response_model=list[ParticipantOut])
async def add_event_participants(
    event_id: int,
    data: ParticipantsIn,
    db: AsyncSession = Depends(get_db),
    user = Depends(get_current_user)
):
    return await add_participants(db, event_id, user.id, data.participant_ids)

@router.delete("/{event_id}/participants")
async def remove_event_participants(
    event_id: int,
    data: ParticipantsIn,
    db: AsyncSession = Depends(get_db),
    user = Depends(get_current_user)
):
    return await remove_participants(db, event_id, user.id, data.participant_ids)

@router.get("/{event_id}/expenses", response_model=list[ExpenseDetailOut], description="get all expenses of the event")
async def fetch_expenses(
    event_id: int,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    user = Depends(get_current_user)
):
    await check_event_access(db, event_id, user.id)
    return await list_event_expenses(db, event_id, limit=limit, offset=offset)

@router.get("/{event_id}/balances", response_model=EventBalanceOut)
async def event_balances(event_id: int, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    await check_event_access(db, event_id, user.id)
    return await get_event_balance(db, event_id)
