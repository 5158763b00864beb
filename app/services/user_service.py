import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.core.security import hash_password
from fastapi import HTTPException

logger = logging.getLogger(__name__)

async def get_user_by_email(db: AsyncSession, email: str):
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()

async def get_user_by_id(db: AsyncSession, id: int):
    result = await db.execute(select(User).where(User.id == id))
    return result.scalar_one_or_none()

async def get_users_by_ids(db: AsyncSession, ids):
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(list(ids))))
    return {u.id: u for u in result.scalars().all()}

async def create_user(db: AsyncSession, data: UserCreate):
    existing = await get_user_by_email(db, data.email)
    if existing:
        raise ValueError("User already exists")

    user = User(
        email=data.email.lower(),
        name=data.name,
        password_hash=hash_password(data.password)
    )

    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user

async def edit_user(db: AsyncSession, data: UserUpdate, user_id: int):
    user = await get_user_by_id(db, user_id)

    if not user:
        raise HTTPException(404, "User not found")

    if data.name:
        user.name = data.name

    if data.avatar_url is not None:
        user.avatar_url = data.avatar_url

    await db.commit()
    await db.refresh(user)

    return user
