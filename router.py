from fastapi import APIRouter, Depends, status

from auth import get_current_claim
from dependencies import get_expense_service
from schemas import (
    ExpenseCreate,
    ExpenseDeleted,
    ExpenseOut,
    ExpenseUpdate,
    WeeklySummary,
)
from services import ExpenseService
from tokens import TokenClaim
from weekly import WeeklyTracker


router = APIRouter()


@router.get("/expenses", response_model=list[ExpenseOut])
async def get_expenses(
    service: ExpenseService = Depends(get_expense_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.list(claim.user_id)


@router.post(
    "/expenses", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED
)
async def create_expense(
    expense: ExpenseCreate,
    service: ExpenseService = Depends(get_expense_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.create(claim.user_id, expense)


# Registered before /expenses/{expense_id} so "weekly" is not read as an id.
@router.get("/expenses/weekly", response_model=WeeklySummary)
async def get_weekly_summary(
    offset: int = 0,
    service: ExpenseService = Depends(get_expense_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    """Totals for the Sunday-to-Saturday week ``offset`` weeks from this one."""
    tracker = WeeklyTracker(service.list(claim.user_id))
    if offset:
        tracker.navigate_week(offset)
    return tracker.summary()


@router.get("/expenses/{expense_id}", response_model=ExpenseOut)
async def get_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expense_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.get(claim.user_id, expense_id)


@router.put("/expenses/{expense_id}", response_model=ExpenseOut)
async def update_expense(
    expense_id: int,
    changes: ExpenseUpdate,
    service: ExpenseService = Depends(get_expense_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.update(claim.user_id, expense_id, changes)


@router.delete("/expenses/{expense_id}", response_model=ExpenseDeleted)
async def delete_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expense_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    expense = service.delete(claim.user_id, expense_id)
    return ExpenseDeleted(
        message="Expense deleted successfully",
        expense=ExpenseOut.model_validate(expense),
    )
