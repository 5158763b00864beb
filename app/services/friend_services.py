from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, and_
from sqlalchemy.orm import selectinload
from fastapi import HTTPException
from app.models.friend import Friend
from app.services.user_service import get_user_by_email

def _between(user_id: int, other_id: int):
    return or_(
        and_(Friend.user_id == user_id, Friend.friend_user_id == other_id),
        and_(Friend.user_id == other_id, Friend.friend_user_id == user_id)
    )

def _as_friend_view(friendship: Friend, user_id: int):
    # rows are stored once per pair, so pick whichever side isn't the caller
    other = friendship.friend if friendship.user_id == user_id else friendship.user
    return {
        "id": friendship.id,
        "friend": other,
        "created_at": friendship.created_at
    }

async def _find_friendship(db: AsyncSession, user_id: int, other_id: int):
    q = (
        select(Friend)
        .options(selectinload(Friend.user), selectinload(Friend.friend))
        .where(_between(user_id, other_id))
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return res.scalars().first()

async def list_friends(db: AsyncSession, user_id: int):
    q = (
        select(Friend)
        .options(selectinload(Friend.user), selectinload(Friend.friend))
        .where(or_(Friend.user_id == user_id, Friend.friend_user_id == user_id))
        .order_by(Friend.created_at.desc(), Friend.id.desc())
    )
    res = await db.execute(q)
    return [_as_friend_view(f, user_id) for f in res.scalars().all()]

async def add_friend_by_email(db: AsyncSession, user_id: int, email: str):
    friend_user = await get_user_by_email(db, email)

    if not friend_user:
        raise HTTPException(404, "User with this email not found")

    if friend_user.id == user_id:
        raise HTTPException(400, "Cannot add yourself as a friend")

    if await _find_friendship(db, user_id, friend_user.id):
        raise HTTPException(400, "Friendship already exists")

    friendship = Friend(user_id=user_id, friend_user_id=friend_user.id)
    db.add(friendship)
    await db.commit()

    friendship = await _find_friendship(db, user_id, friend_user.id)
    return _as_friend_view(friendship, user_id)

async def remove_friend(db: AsyncSession, user_id: int, friend_id: int):
    friendship = await _find_friendship(db, user_id, friend_id)

    if not friendship:
        raise HTTPException(404, "Friendship not found")

    await db.delete(friendship)
    await db.commit()

    return {"status": "removed"}

async def search_by_email(db: AsyncSession, user_id: int, email: str):
    user = await get_user_by_email(db, email)

    if not user:
        return None

    existing = await _find_friendship(db, user_id, user.id)

    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "avatar_url": user.avatar_url,
        "created_at": user.created_at,
        "is_already_friend": existing is not None,
        "is_self": user.id == user_id
    }

async def get_friend(db: AsyncSession, user_id: int, friend_id: int):
    friendship = await _find_friendship(db, user_id, friend_id)

    if not friendship:
        raise HTTPException(404, "Friend not found")

    return _as_friend_view(friendship, user_id)

