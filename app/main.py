from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.db.init_db import init_models
from app.api.v1.routes.user import router as user_router
from app.api.v1.routes.friend import router as friend_router
from app.api.v1.routes.event import router as event_router
from app.api.v1.routes.expense import router as expense_router
from app.api.v1.routes.settlement import router as settlement_router

configure_logging(settings.LOG_LEVEL)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    yield

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

@app.get("/")
async def root():
    return {"message": "Expense events backend is live"}

app.include_router(user_router, prefix="/api/v1/users", tags=["users"])
app.include_router(friend_router, prefix="/api/v1/friends", tags=["friends"])
app.include_router(event_router, prefix="/api/v1/events", tags=["events"])
app.include_router(expense_router, prefix="/api/v1/expenses", tags=["expenses"])
app.include_router(settlement_router, prefix="/api/v1/settlements", tags=["settlements"])
