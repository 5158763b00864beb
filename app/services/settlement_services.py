import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from fastapi import HTTPException
from app.core.dependencies import check_event_access
from app.models.settlement import Settlement, SettlementStatus
from app.models.user import User
from app.services.event_services import get_participant_ids

logger = logging.getLogger(__name__)

async def add_settlement(db: AsyncSession, user_id: int, data):
    if data.to_user == user_id:
        raise HTTPException(400, "Cannot settle with yourself")

    res = await db.execute(select(User.id).where(User.id == data.to_user))
    if res.scalar_one_or_none() is None:
        raise HTTPException(404, "Recipient not found")

    if data.event_id is not None:
        await check_event_access(db, data.event_id, user_id)
        participants = await get_participant_ids(db, data.event_id)
        if data.to_user not in participants:
            raise HTTPException(400, "Recipient is not an event participant")

    settlement = Settlement(
        event_id=data.event_id,
        from_user=user_id,
        to_user=data.to_user,
        amount=data.amount,
        status=SettlementStatus.pending
    )
    db.add(settlement)
    await db.commit()
    await db.refresh(settlement)
    logger.info("User %s recorded settlement %s to user %s", user_id, settlement.id, data.to_user)
    return settlement

async def get_settlement_history(db: AsyncSession, user_id: int, event_id: int | None = None):
    q = select(Settlement).where(
        or_(Settlement.from_user == user_id, Settlement.to_user == user_id)
    )
    if event_id is not None:
        q = q.where(Settlement.event_id == event_id)

    res = await db.execute(q.order_by(Settlement.created_at.desc(), Settlement.id.desc()))
    return res.scalars().all()

async def _get_settlement(db: AsyncSession, settlement_id: int) -> Settlement:
    res = await db.execute(select(Settlement).where(Settlement.id == settlement_id))
    settlement = res.scalar_one_or_none()

    if not settlement:
        raise HTTPException(404, "Settlement not found")

    return settlement

async def complete_settlement(db: AsyncSession, settlement_id: int, user_id: int):
    settlement = await _get_settlement(db, settlement_id)

    # only the person receiving the money can confirm it arrived
    if settlement.to_user != user_id:
        raise HTTPException(403, "Only the recipient can complete this settlement")

    if settlement.status == SettlementStatus.completed:
        raise HTTPException(400, "Settlement already completed")

    settlement.status = SettlementStatus.completed
    await db.commit()
    await db.refresh(settlement)
    return settlement

async def undo_settlement(db: AsyncSession, settlement_id: int, user_id: int):
    settlement = await _get_settlement(db, settlement_id)

    if settlement.from_user != user_id:
        raise HTTPException(403, "You cannot undo this settlement")

    if settlement.status == SettlementStatus.completed:
        raise HTTPException(400, "Completed settlements cannot be undone")

    await db.delete(settlement)
    await db.commit()

    return {"status": "undone"}
