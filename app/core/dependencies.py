from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.jwt_config import decode_token, get_token_from_cookie
from app.core.security import verify_password
from app.models.event import Event, EventParticipant
from app.services.user_service import get_user_by_id, get_user_by_email

async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)):
    token = get_token_from_cookie(request=request)
    payload = decode_token(token)
    user_id = payload.get("sub")

    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    try:
        user = await get_user_by_id(db, int(user_id))
    except ValueError:
        raise HTTPException(status_code=401, detail="Could not validate credentials")

    if user is None:
        raise HTTPException(status_code=401, detail="User not found")

    return user

async def authenticate_user(db: AsyncSession, email: str, password: str):
    user = await get_user_by_email(db, email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user

async def check_event_access(db: AsyncSession, event_id: int, user_id: int) -> Event:
    """Return the event if the user created it or takes part in it."""
    res = await db.execute(select(Event).where(Event.id == event_id))
    event = res.scalar_one_or_none()

    if not event:
        raise HTTPException(404, "Event not found")

    if event.created_by == user_id:
        return event

    q = select(EventParticipant).where(
        EventParticipant.event_id == event_id,
        EventParticipant.user_id == user_id
    )
    member = await db.execute(q)

    if not member.scalar_one_or_none():
        raise HTTPException(403, "Not authorized to access this event")

    return event
