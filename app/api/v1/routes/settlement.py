from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.dependencies import get_current_user
from app.schemas.settlements import SettlementCreate, SettlementOut
from app.services.settlement_services import add_settlement, get_settlement_history, complete_settlement, undo_settlement

router = APIRouter()

@router.post("/", response_model=SettlementOut)
async def record_settlement(data: SettlementCreate, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await add_settlement(db, user.id, data)

@router.get("/", response_model=list[SettlementOut])
async def fetch_history(event_id: int | None = None, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await get_settlement_history(db, user.id, event_id=event_id)

@router.post("/{settlement_id}/complete", response_model=SettlementOut)
async def complete(settlement_id: int, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await complete_settlement(db, settlement_id, user.id)

@router.delete("/{settlement_id}")
async def undo(settlement_id: int, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await undo_settlement(db, settlement_id, user.id)
