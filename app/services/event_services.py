import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, delete
from fastapi import HTTPException
from app.models.event import Event, EventParticipant
from app.models.user import User

logger = logging.getLogger(__name__)

async def _get_owned_event(db: AsyncSession, event_id: int, user_id: int, action: str) -> Event:
    q = select(Event).where(Event.id == event_id, Event.created_by == user_id)
    res = await db.execute(q)
    event = res.scalar_one_or_none()

    if not event:
        raise HTTPException(404, f"Event not found or not authorized to {action}")

    return event

async def _existing_user_ids(db: AsyncSession, user_ids):
    res = await db.execute(select(User.id).where(User.id.in_(list(user_ids))))
    return set(res.scalars().all())

async def create_event(db: AsyncSession, name: str, participant_ids, creator_id: int):
    # creator always takes part; keep first-seen order, drop duplicates
    unique_ids = list(dict.fromkeys([creator_id, *participant_ids]))

    known = await _existing_user_ids(db, unique_ids)
    missing = [uid for uid in unique_ids if uid not in known]
    if missing:
        raise HTTPException(400, f"Unknown users: {missing}")

    event = Event(name=name, created_by=creator_id)
    db.add(event)
    await db.flush()

    for uid in unique_ids:
        db.add(EventParticipant(event_id=event.id, user_id=uid))

    await db.commit()
    await db.refresh(event)
    logger.info("User %s created event %s with %d participants", creator_id, event.id, len(unique_ids))
    return event

async def list_events_for_user(db: AsyncSession, user_id: int):
    participating = select(EventParticipant.event_id).where(EventParticipant.user_id == user_id)
    q = (
        select(Event)
        .where(or_(Event.created_by == user_id, Event.id.in_(participating)))
        .order_by(Event.created_at.desc(), Event.id.desc())
    )
    res = await db.execute(q)
    return res.scalars().all()

async def list_event_participants(db: AsyncSession, event_id: int):
    q = (
        select(User)
        .join(EventParticipant, User.id == EventParticipant.user_id)
        .where(EventParticipant.event_id == event_id)
        .order_by(EventParticipant.id)
    )
    res = await db.execute(q)
    return res.scalars().all()

async def get_event_detail(db: AsyncSession, event: Event):
    participants = await list_event_participants(db, event.id)
    return {
        "id": event.id,
        "name": event.name,
        "created_by": event.created_by,
        "created_at": event.created_at,
        "participants": participants
    }

async def edit_event(db: AsyncSession, event_id: int, user_id: int, name: str):
    event = await _get_owned_event(db, event_id, user_id, "update")
    event.name = name
    await db.commit()
    await db.refresh(event)
    return event

async def delete_event(db: AsyncSession, event_id: int, user_id: int):
    event = await _get_owned_event(db, event_id, user_id, "delete")

    # participants, expenses and their splits go with it
    await db.delete(event)
    await db.commit()
    logger.info("User %s deleted event %s", user_id, event_id)

    return {"status": "deleted"}

async def add_participants(db: AsyncSession, event_id: int, user_id: int, participant_ids):
    await _get_owned_event(db, event_id, user_id, "add participants")

    res = await db.execute(
        select(EventParticipant.user_id).where(EventParticipant.event_id == event_id)
    )
    existing = set(res.scalars().all())

    new_ids = [uid for uid in dict.fromkeys(participant_ids) if uid not in existing]

    if not new_ids:
        raise HTTPException(400, "All participants are already in the event")

    known = await _existing_user_ids(db, new_ids)
    missing = [uid for uid in new_ids if uid not in known]
    if missing:
        raise HTTPException(400, f"Unknown users: {missing}")

    added = [EventParticipant(event_id=event_id, user_id=uid) for uid in new_ids]
    db.add_all(added)
    await db.commit()

    for p in added:
        await db.refresh(p)

    return added

async def remove_participants(db: AsyncSession, event_id: int, user_id: int, participant_ids):
    await _get_owned_event(db, event_id, user_id, "remove participants")

    to_remove = [uid for uid in participant_ids if uid != user_id]

    if not to_remove:
        raise HTTPException(400, "Cannot remove the event creator")

    await db.execute(
        delete(EventParticipant).where(
            EventParticipant.event_id == event_id,
            EventParticipant.user_id.in_(to_remove)
        )
    )
    await db.commit()

    return {"status": "participants_removed"}

async def get_participant_ids(db: AsyncSession, event_id: int):
    res = await db.execute(
        select(EventParticipant.user_id).where(EventParticipant.event_id == event_id)
    )
    return set(res.scalars().all())
