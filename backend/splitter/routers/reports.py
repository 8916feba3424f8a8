"""Reports: per-member balances and the settlement plan for a group."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from splitter.database import get_db
from splitter.schemas import BalanceEntry, SettlementPlan
from splitter.services import ledger

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/groups/{group_id}/balances", response_model=list[BalanceEntry])
def get_group_balances(group_id: int, db: Session = Depends(get_db)):
    return ledger.group_balances(db, group_id)


@router.get("/groups/{group_id}/settlement-plan", response_model=SettlementPlan)
def get_settlement_plan(group_id: int, db: Session = Depends(get_db)):
    return ledger.settlement_plan(db, group_id)
