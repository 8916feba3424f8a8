"""Settlements: record, list, get and delete repayments between members."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from splitter.database import get_db
from splitter.schemas import SettlementCreate, SettlementResponse
from splitter.services import ledger

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.post("", response_model=SettlementResponse, status_code=201)
def create_settlement(data: SettlementCreate, db: Session = Depends(get_db)):
    return SettlementResponse.model_validate(ledger.create_settlement(db, data))


@router.get("/group/{group_id}", response_model=list[SettlementResponse])
def list_settlements(group_id: int, db: Session = Depends(get_db)):
    return [SettlementResponse.model_validate(s) for s in ledger.list_settlements(db, group_id)]


@router.get("/{settlement_id}", response_model=SettlementResponse)
def get_settlement(settlement_id: int, db: Session = Depends(get_db)):
    return SettlementResponse.model_validate(ledger.get_settlement(db, settlement_id))


@router.delete("/{settlement_id}", status_code=204)
def delete_settlement(settlement_id: int, db: Session = Depends(get_db)):
    ledger.delete_settlement(db, settlement_id)
