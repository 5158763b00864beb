"""
Balance aggregation and settlement planning for a single event.

Both entry points are pure functions over the records they are handed: no
database access, no retained state, safe to call concurrently. Money is
carried as Decimal end to end and only quantized when a value leaves this
module as a settlement amount, or when the caller renders it.
"""
from decimal import Decimal
from typing import Dict, Hashable, Iterable, List, Mapping, NamedTuple, Optional, Union

from app.core.config import settings
from app.core.utils import ZERO, qround, to_decimal

UserId = Hashable


class Balance(NamedTuple):
    user_id: UserId
    total_paid: Decimal
    total_owed: Decimal

    @property
    def net_balance(self) -> Decimal:
        return self.total_paid - self.total_owed


class SettlementSuggestion(NamedTuple):
    from_user: UserId
    to_user: UserId
    amount: Decimal


def _split_user(split):
    return split.user_id


def _split_share(split) -> Decimal:
    # ORM rows call it share, request payloads sometimes amount
    share = getattr(split, "share", None)
    if share is None:
        share = split.amount
    return to_decimal(share)


def aggregate_balances(expenses: Iterable) -> Dict[UserId, Balance]:
    """
    Reduce expenses to per-user paid/owed totals.

    Each expense needs `paid_by`, `amount` and `splits`; each split needs
    `user_id` and `share`. Insertion order of the result follows the order
    users are first seen.
    """
    paid: Dict[UserId, Decimal] = {}
    owed: Dict[UserId, Decimal] = {}

    for expense in expenses:
        payer = expense.paid_by
        paid[payer] = paid.get(payer, ZERO) + to_decimal(expense.amount)
        owed.setdefault(payer, ZERO)

        for split in expense.splits:
            uid = _split_user(split)
            owed[uid] = owed.get(uid, ZERO) + _split_share(split)
            paid.setdefault(uid, ZERO)

    return {
        uid: Balance(user_id=uid, total_paid=paid[uid], total_owed=owed[uid])
        for uid in owed
    }


def find_unbalanced_expenses(expenses: Iterable, tolerance: Optional[Decimal] = None) -> List:
    """Ids of expenses whose split shares do not add up to the expense amount."""
    tolerance = settings.BALANCE_TOLERANCE if tolerance is None else to_decimal(tolerance)
    flagged = []
    for expense in expenses:
        total = sum((_split_share(s) for s in expense.splits), ZERO)
        if abs(total - to_decimal(expense.amount)) > tolerance:
            flagged.append(expense.id)
    return flagged


def _net(value) -> Decimal:
    if isinstance(value, Balance):
        return value.net_balance
    return to_decimal(value)


def net_total(balances: Mapping[UserId, Union[Balance, Decimal]]) -> Decimal:
    return sum((_net(v) for v in balances.values()), ZERO)


def _order_key(uid) -> str:
    return str(uid)


def plan_settlements(
    balances: Mapping[UserId, Union[Balance, Decimal]],
    tolerance: Optional[Decimal] = None,
) -> List[SettlementSuggestion]:
    """
    Greedy two-cursor matching of debtors against creditors.

    Balances within `tolerance` of zero count as settled and are left out.
    Creditors are walked largest credit first, debtors largest debt first,
    ties broken by the user id's string form. Each creditor is paid by the
    current debtor until one side rounds to 0.00, then that cursor moves on.
    Lines are rounded to cents; a debtor's last line absorbs the rounding of
    its earlier ones, so each debtor pays exactly its debt rounded to the cent.
    Does not minimise the number of transfers globally.
    """
    tolerance = settings.BALANCE_TOLERANCE if tolerance is None else to_decimal(tolerance)

    creditors = sorted(
        ((uid, _net(b)) for uid, b in balances.items() if _net(b) > tolerance),
        key=lambda x: (-x[1], _order_key(x[0])),
    )
    # stored as positive debt so both cursors count down
    debtors = sorted(
        ((uid, -_net(b)) for uid, b in balances.items() if _net(b) < -tolerance),
        key=lambda x: (-x[1], _order_key(x[0])),
    )

    transfers: List[SettlementSuggestion] = []
    if not creditors or not debtors:
        return transfers

    d = 0
    debt_left = debtors[0][1]
    # sum of the lines already emitted for debtors[d]
    sent = ZERO

    for cred_id, credit in creditors:
        remaining = credit

        while qround(remaining) > 0 and d < len(debtors):
            debt_id, debt_total = debtors[d]
            pay_amt = min(remaining, debt_left)

            remaining = remaining - pay_amt
            debt_left = debt_left - pay_amt
            done = qround(debt_left) == 0

            # the debtor's last line pays off whatever rounding the earlier lines left
            rounded = qround(debt_total) - sent if done else qround(pay_amt)
            if rounded > 0:
                transfers.append(SettlementSuggestion(debt_id, cred_id, rounded))
                sent += rounded

            if done:
                d += 1
                debt_left = debtors[d][1] if d < len(debtors) else ZERO
                sent = ZERO

        if d >= len(debtors):
            break

    return transfers


def apply_settlements(
    balances: Mapping[UserId, Union[Balance, Decimal]],
    settlements: Iterable[SettlementSuggestion],
) -> Dict[UserId, Decimal]:
    """Net balances left over once every suggested payment has been made."""
    residual = {uid: _net(b) for uid, b in balances.items()}
    for s in settlements:
        residual[s.from_user] = residual.get(s.from_user, ZERO) + s.amount
        residual[s.to_user] = residual.get(s.to_user, ZERO) - s.amount
    return residual
