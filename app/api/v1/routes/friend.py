from fastapi import APIRouter, Depends
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.dependencies import get_current_user
from app.schemas.friend import FriendAdd, FriendOut, FriendSearchOut
from app.services.friend_services import list_friends, add_friend_by_email, remove_friend, search_by_email, get_friend

router = APIRouter()

@router.get("/", response_model=list[FriendOut])
async def my_friends(db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await list_friends(db, current_user.id)

@router.post("/", response_model=FriendOut)
async def add_friend(data: FriendAdd, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await add_friend_by_email(db, current_user.id, data.email)

@router.get("/search", response_model=FriendSearchOut | None)
async def search(email: EmailStr, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await search_by_email(db, current_user.id, email)

@router.get("/{friend_id}", response_model=FriendOut)
async def fetch_friend(friend_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await get_friend(db, current_user.id, friend_id)

@router.delete("/{friend_id}")
async def del_friend(friend_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await remove_friend(db, current_user.id, friend_id)
