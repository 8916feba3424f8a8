"""Greedy settlement planning: who should pay whom so everyone ends up at zero."""
import heapq
import logging
from decimal import Decimal
from typing import Iterable

from splitter.schemas import BalanceEntry, SettlementPlan, SettlementSuggestion
from splitter.services.money import ZERO_THRESHOLD, to_money

logger = logging.getLogger(__name__)


def plan(group_id: int, balances: Iterable[BalanceEntry]) -> SettlementPlan:
    """
    Largest creditor is repeatedly matched with the largest debtor; the smaller of
    the two outstanding amounts is transferred and whoever reaches zero drops out.
    Ties on amount go to the lower user id, so identical input always yields the
    same suggestion sequence.

    Complexity: O(n log n) for n members with a non-zero balance. Every step
    retires at least one party, so there are at most n - 1 suggestions, each
    costing a constant number of heap operations.

    This is an approximation: it does not always find the fewest possible
    transfers (that is a subset-sum style search), but it always settles the
    group and never emits more than n - 1 transfers.
    """
    # heap entries: (-remaining, user_id) -> largest first, then lowest id
    creditors: list[tuple[Decimal, int]] = []
    debtors: list[tuple[Decimal, int]] = []
    for entry in balances:
        if entry.net_balance >= ZERO_THRESHOLD:
            creditors.append((-entry.net_balance, entry.user_id))
        elif entry.net_balance <= -ZERO_THRESHOLD:
            debtors.append((entry.net_balance, entry.user_id))
    heapq.heapify(creditors)
    heapq.heapify(debtors)

    suggestions: list[SettlementSuggestion] = []
    while creditors and debtors:
        credit_neg, creditor = heapq.heappop(creditors)
        debt_neg, debtor = heapq.heappop(debtors)
        credit, debt = -credit_neg, -debt_neg

        transfer = min(credit, debt)
        suggestions.append(
            SettlementSuggestion(from_user_id=debtor, to_user_id=creditor, amount=to_money(transfer))
        )

        if credit - transfer >= ZERO_THRESHOLD:
            heapq.heappush(creditors, (transfer - credit, creditor))
        if debt - transfer >= ZERO_THRESHOLD:
            heapq.heappush(debtors, (transfer - debt, debtor))

    logger.debug("Group %s: %d settlement suggestion(s)", group_id, len(suggestions))
    return SettlementPlan(group_id=group_id, suggestions=suggestions, transaction_count=len(suggestions))
