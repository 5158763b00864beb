import enum
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric, Enum
from sqlalchemy.sql import func
from app.db.session import Base

class SettlementStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"

class Settlement(Base):
    __tablename__ = "settlements"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=True)
    from_user = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    to_user = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(Enum(SettlementStatus), nullable=False, default=SettlementStatus.pending)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
