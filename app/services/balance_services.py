import logging
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.balances import aggregate_balances, plan_settlements, find_unbalanced_expenses, net_total
from app.core.config import settings
from app.core.utils import display_amount
from app.services.expense_services import list_event_expenses
from app.services.user_service import get_users_by_ids

logger = logging.getLogger(__name__)

async def get_event_balance(db: AsyncSession, event_id: int):
    """Balances and suggested settlements for one event, ready for the response schema."""
    tolerance = settings.BALANCE_TOLERANCE
    expenses = await list_event_expenses(db, event_id)

    balances = aggregate_balances(expenses)
    transfers = plan_settlements(balances, tolerance)

    flagged = find_unbalanced_expenses(expenses, tolerance)
    if flagged:
        logger.warning("Event %s has expenses whose splits do not match the amount: %s", event_id, flagged)

    drift = net_total(balances)
    if abs(drift) > tolerance * max(len(balances), 1):
        logger.warning("Event %s net balances do not cancel out (off by %s)", event_id, drift)

    users = await get_users_by_ids(db, set(balances))

    return {
        "balances": [
            {
                "user": users.get(uid),
                "total_paid": display_amount(b.total_paid, tolerance),
                "total_owed": display_amount(b.total_owed, tolerance),
                "net_balance": display_amount(b.net_balance, tolerance)
            }
            for uid, b in balances.items()
        ],
        "settlements": [
            {
                "from_user": users.get(t.from_user),
                "to_user": users.get(t.to_user),
                "amount": t.amount
            }
            for t in transfers
        ],
        "unbalanced_expense_ids": flagged
    }
