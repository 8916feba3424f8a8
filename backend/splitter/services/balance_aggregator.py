"""Fold a group's expense and settlement history into net balances."""
import logging
from collections import defaultdict
from decimal import Decimal

from splitter.schemas import BalanceEntry
from splitter.services.money import clean, is_zero

logger = logging.getLogger(__name__)


def compute_balances(group_id: int, expenses, settlements, members) -> list[BalanceEntry]:
    """
    expenses: records with amount, paid_by_user_id and shares (user_id, owed_amount).
    settlements: records with from_user_id, to_user_id and amount.
    members: current group members (id, name), in display order.

    Positive net balance = the group owes this member; negative = they owe.
    Every member gets an entry, zero balances included. The fold is a plain sum,
    so the order of the history does not matter.
    """
    running: dict[int, Decimal] = defaultdict(Decimal)
    for m in members:
        running[m.id] = Decimal(0)

    for e in expenses:
        running[e.paid_by_user_id] += e.amount
        for s in e.shares:
            running[s.user_id] -= s.owed_amount

    for s in settlements:
        # the payer's debt shrinks, the receiver has been paid back
        running[s.from_user_id] += s.amount
        running[s.to_user_id] -= s.amount

    member_ids = {m.id for m in members}
    for uid, bal in running.items():
        if uid not in member_ids and not is_zero(bal):
            logger.warning("Group %s: former member %s still carries balance %s", group_id, uid, bal)

    return [
        BalanceEntry(group_id=group_id, user_id=m.id, user_name=m.name, net_balance=clean(running[m.id]))
        for m in members
    ]
