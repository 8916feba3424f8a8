"""Expenses: create, list, get, replace, delete, export."""
import csv
import io

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from splitter.database import get_db
from splitter.schemas import ExpenseCreate, ExpenseResponse
from splitter.services import directory, ledger

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post("", response_model=ExpenseResponse, status_code=201)
def create_expense(data: ExpenseCreate, db: Session = Depends(get_db)):
    return ExpenseResponse.model_validate(ledger.create_expense(db, data))


@router.get("/group/{group_id}", response_model=list[ExpenseResponse])
def list_expenses(group_id: int, db: Session = Depends(get_db)):
    return [ExpenseResponse.model_validate(e) for e in ledger.list_expenses(db, group_id)]


@router.get("/group/{group_id}/export")
def export_expenses(group_id: int, db: Session = Depends(get_db)):
    group = directory.get_group(db, group_id)
    expenses = ledger.list_expenses(db, group_id)
    member_map = {m.id: m.name for m in group.members}

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Date", "Description", "Amount", "Paid By", "Split Type", "Shares"])
    for e in expenses:
        payer_name = member_map.get(e.paid_by_user_id, str(e.paid_by_user_id))
        shares = ", ".join(
            f"{member_map.get(s.user_id, str(s.user_id))}: {s.owed_amount:.2f}" for s in e.shares
        )
        writer.writerow([
            e.date.isoformat(),
            e.description or "",
            f"{e.amount:.2f}",
            payer_name,
            e.split_type,
            shares,
        ])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=expenses-group-{group_id}.csv"},
    )


@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense(expense_id: int, db: Session = Depends(get_db)):
    return ExpenseResponse.model_validate(ledger.get_expense(db, expense_id))


@router.put("/{expense_id}", response_model=ExpenseResponse)
def update_expense(expense_id: int, data: ExpenseCreate, db: Session = Depends(get_db)):
    return ExpenseResponse.model_validate(ledger.update_expense(db, expense_id, data))


@router.delete("/{expense_id}", status_code=204)
def delete_expense(expense_id: int, db: Session = Depends(get_db)):
    ledger.delete_expense(db, expense_id)
