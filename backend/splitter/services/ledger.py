"""Ledger operations: what the expense, settlement and report routes call.

Each operation runs inside the group's ``group_scope``; validation happens
before anything is stored, so a rejected request leaves the ledger untouched.
"""
import logging

from sqlalchemy.orm import Session

from splitter.errors import NotFoundError, ValidationError
from splitter.models import Expense, ExpenseShare, Group, Settlement
from splitter.schemas import BalanceEntry, ExpenseCreate, SettlementCreate, SettlementPlan, SplitType
from splitter.services import directory, settlement_planner
from splitter.services.balance_aggregator import compute_balances
from splitter.services.money import to_decimal, to_money
from splitter.services.split_calculator import compute_shares
from splitter.store import LedgerStore, group_scope

logger = logging.getLogger(__name__)


def _group_for_write(db: Session, group_id: int) -> Group:
    # On writes the group id is part of the request body, so a bad one is bad input.
    try:
        return directory.get_group(db, group_id)
    except NotFoundError:
        raise ValidationError(f"Group {group_id} does not exist")


def _build_expense(group: Group, data: ExpenseCreate) -> Expense:
    provided = [(s.user_id, s.value) for s in data.shares] if data.shares else None
    owed = compute_shares(
        data.amount,
        data.split_type,
        directory.member_ids(group),
        provided_shares=provided,
        participant_ids=data.participant_ids,
        paid_by=data.paid_by_user_id,
    )
    values = owed if data.split_type == SplitType.EQUAL else dict(provided)
    shares = [
        ExpenseShare(user_id=uid, position=i, value=values[uid], owed_amount=amount)
        for i, (uid, amount) in enumerate(owed.items())
    ]
    return Expense(
        group_id=group.id,
        paid_by_user_id=data.paid_by_user_id,
        amount=to_money(data.amount),
        description=data.description,
        date=data.date,
        split_type=data.split_type.value,
        shares=shares,
    )


# ----- Expenses -----
def create_expense(db: Session, data: ExpenseCreate) -> Expense:
    with group_scope(data.group_id):
        group = _group_for_write(db, data.group_id)
        return LedgerStore(db).append(_build_expense(group, data))


def update_expense(db: Session, expense_id: int, data: ExpenseCreate) -> Expense:
    """Full replace: the new body is validated exactly like a new expense."""
    store = LedgerStore(db)
    group_id = store.find(Expense, expense_id).group_id
    with group_scope(group_id):
        if data.group_id != group_id:
            raise ValidationError("An expense cannot be moved to another group")
        group = directory.get_group(db, group_id)
        return store.replace(Expense, group_id, expense_id, _build_expense(group, data))


def delete_expense(db: Session, expense_id: int) -> None:
    store = LedgerStore(db)
    group_id = store.find(Expense, expense_id).group_id
    with group_scope(group_id):
        store.delete(Expense, group_id, expense_id)


def get_expense(db: Session, expense_id: int) -> Expense:
    return LedgerStore(db).find(Expense, expense_id)


def list_expenses(db: Session, group_id: int) -> list[Expense]:
    with group_scope(group_id):
        return LedgerStore(db).list_by_group(Expense, group_id)


# ----- Settlements -----
def create_settlement(db: Session, data: SettlementCreate) -> Settlement:
    with group_scope(data.group_id):
        group = _group_for_write(db, data.group_id)
        amount = to_decimal(data.amount)
        if amount <= 0 or to_money(amount) <= 0:
            raise ValidationError("Amount must be positive")
        if data.from_user_id == data.to_user_id:
            raise ValidationError("A member cannot settle with themselves")
        members = set(directory.member_ids(group))
        for uid in (data.from_user_id, data.to_user_id):
            if uid not in members:
                raise ValidationError(f"User {uid} is not a member of this group")
        settlement = Settlement(
            group_id=group.id,
            from_user_id=data.from_user_id,
            to_user_id=data.to_user_id,
            amount=to_money(amount),
            date=data.date,
            note=data.note,
        )
        return LedgerStore(db).append(settlement)


def delete_settlement(db: Session, settlement_id: int) -> None:
    store = LedgerStore(db)
    group_id = store.find(Settlement, settlement_id).group_id
    with group_scope(group_id):
        store.delete(Settlement, group_id, settlement_id)


def get_settlement(db: Session, settlement_id: int) -> Settlement:
    return LedgerStore(db).find(Settlement, settlement_id)


def list_settlements(db: Session, group_id: int) -> list[Settlement]:
    with group_scope(group_id):
        return LedgerStore(db).list_by_group(Settlement, group_id)


# ----- Reports -----
def balances_for(db: Session, group: Group) -> list[BalanceEntry]:
    """Fold the group's full history. Caller must hold the group's scope."""
    store = LedgerStore(db)
    expenses = store.list_by_group(Expense, group.id)
    settlements = store.list_by_group(Settlement, group.id)
    return compute_balances(group.id, expenses, settlements, group.members)


def group_balances(db: Session, group_id: int) -> list[BalanceEntry]:
    with group_scope(group_id):
        group = directory.get_group(db, group_id)
        return balances_for(db, group)


def settlement_plan(db: Session, group_id: int) -> SettlementPlan:
    with group_scope(group_id):
        group = directory.get_group(db, group_id)
        return settlement_planner.plan(group.id, balances_for(db, group))
