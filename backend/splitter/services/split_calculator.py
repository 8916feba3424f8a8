"""Turn an expense amount and split strategy into per-member owed amounts."""
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from splitter.errors import ValidationError
from splitter.schemas import SplitType
from splitter.services.money import CENT, SUM_TOLERANCE, to_decimal, to_money

HUNDRED = Decimal("100")


def compute_shares(
    amount,
    split_type,
    members: Sequence[int],
    provided_shares: Optional[Iterable[tuple[int, Decimal]]] = None,
    participant_ids: Optional[Sequence[int]] = None,
    paid_by: Optional[int] = None,
) -> dict[int, Decimal]:
    """
    members: ordered user ids of the expense's group.
    provided_shares: (user_id, value) pairs; amounts for EXACT, percentages for PERCENT.
    Returns user_id -> owed amount in cents, always summing exactly to the
    (quantized) expense amount.
    Raises ValidationError on any inconsistency. Pure: touches nothing else.
    """
    try:
        split_type = SplitType(split_type)
    except ValueError:
        raise ValidationError(f"Unknown split type: {split_type}")

    amount = to_decimal(amount)
    if amount <= 0 or to_money(amount) <= 0:
        raise ValidationError("Amount must be positive")
    amount = to_money(amount)

    member_set = set(members)
    if paid_by is not None and paid_by not in member_set:
        raise ValidationError("Payer must be a group member")

    if split_type == SplitType.EQUAL:
        participants = list(participant_ids) if participant_ids is not None else list(members)
        _check_members(participants, member_set)
        return _split_equal(amount, participants)

    shares = [(uid, to_decimal(value)) for uid, value in (provided_shares or [])]
    if not shares:
        raise ValidationError(f"{split_type.value} split requires shares")
    _check_members([uid for uid, _ in shares], member_set)

    if split_type == SplitType.EXACT:
        return _split_exact(amount, shares)
    return _split_percent(amount, shares)


def _check_members(user_ids: list[int], member_set: set[int]) -> None:
    if not user_ids:
        raise ValidationError("At least one participant required")
    seen = set()
    for uid in user_ids:
        if uid not in member_set:
            raise ValidationError(f"User {uid} is not a member of this group")
        if uid in seen:
            raise ValidationError(f"User {uid} appears more than once in the split")
        seen.add(uid)


def _split_equal(amount: Decimal, participants: list[int]) -> dict[int, Decimal]:
    # Floor to cents; the first `remainder` participants carry one extra cent.
    base, remainder = divmod(int(amount / CENT), len(participants))
    return {
        uid: (base + (1 if i < remainder else 0)) * CENT
        for i, uid in enumerate(participants)
    }


def _split_exact(amount: Decimal, shares: list[tuple[int, Decimal]]) -> dict[int, Decimal]:
    for uid, value in shares:
        if value < 0:
            raise ValidationError(f"Share for user {uid} must not be negative")
    total = sum((value for _, value in shares), Decimal(0))
    if abs(total - amount) > SUM_TOLERANCE:
        raise ValidationError(f"Shares total ({total}) must equal expense amount ({amount})")
    owed = {uid: to_money(value) for uid, value in shares}
    return _reconcile(amount, owed, [uid for uid, value in shares if value > 0])


def _split_percent(amount: Decimal, shares: list[tuple[int, Decimal]]) -> dict[int, Decimal]:
    for uid, pct in shares:
        if pct < 0 or pct > HUNDRED:
            raise ValidationError(f"Percentage for user {uid} must be between 0 and 100")
    total = sum((pct for _, pct in shares), Decimal(0))
    if abs(total - HUNDRED) > SUM_TOLERANCE:
        raise ValidationError(f"Percentages total ({total}) must equal 100")

    owed = {uid: to_money(amount * pct / HUNDRED) for uid, pct in shares}
    return _reconcile(amount, owed, [uid for uid, pct in shares if pct > 0])


def _reconcile(amount: Decimal, owed: dict[int, Decimal], eligible: list[int]) -> dict[int, Decimal]:
    """
    Hand the cents lost (or gained) by rounding back to `eligible` holders so the
    owed amounts sum exactly to `amount`. Cents are spread evenly, the first
    holders in share order taking the odd ones; nobody is pushed below zero.
    """
    residue = int((amount - sum(owed.values(), Decimal(0))) / CENT)
    sign = 1 if residue > 0 else -1
    remaining = abs(residue)
    holders = eligible or list(owed)
    while remaining and holders:
        base, extra = divmod(remaining, len(holders))
        for i, uid in enumerate(holders):
            cents = base + (1 if i < extra else 0)
            if sign < 0:
                cents = min(cents, int(owed[uid] / CENT))
            owed[uid] += sign * cents * CENT
            remaining -= cents
        # only reached when taking cents back drained some holders
        holders = [uid for uid in holders if owed[uid] > 0]
    return owed
