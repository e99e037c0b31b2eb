from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from database import get_db
from schemas.financial_reports import ProfitAndLoss, BalanceSheet
from schemas.ledgers import GeneralLedger
from crud import financial_reports as crud_financial_reports
from datetime import date
from utils.tenancy import get_tenant_id
from utils.auth_utils import get_current_db_user

router = APIRouter(
    prefix="/financial-reports",
    tags=["Financial Reports"],
    dependencies=[Depends(get_current_db_user)],
)


def _check_range(start_date: date, end_date: date):
    if start_date > end_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Start date cannot be after the end date")


@router.get("/profit-and-loss", response_model=ProfitAndLoss)
def get_profit_and_loss(
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_range(start_date, end_date)
    return crud_financial_reports.get_profit_and_loss(
        db=db,
        start_date=start_date,
        end_date=end_date,
        tenant_id=tenant_id
    )


@router.get("/balance-sheet", response_model=BalanceSheet)
def get_balance_sheet(
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_range(start_date, end_date)
    return crud_financial_reports.get_balance_sheet(
        db=db,
        start_date=start_date,
        end_date=end_date,
        tenant_id=tenant_id
    )


@router.get("/ledger", response_model=GeneralLedger)
def get_general_ledger(
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_range(start_date, end_date)
    return crud_financial_reports.get_general_ledger(
        db=db,
        start_date=start_date,
        end_date=end_date,
        tenant_id=tenant_id
    )
