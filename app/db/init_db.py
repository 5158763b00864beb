import logging
from app.db.session import Base, engine

# every model has to be imported before create_all sees its table
import app.models.user  # noqa: F401
import app.models.friend  # noqa: F401
import app.models.event  # noqa: F401
import app.models.expense  # noqa: F401
import app.models.expense_split  # noqa: F401
import app.models.settlement  # noqa: F401

logger = logging.getLogger(__name__)

async def init_models(bind=engine):
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")
