from fastapi import APIRouter, Depends, status

from auth import get_current_claim
from dependencies import get_budget_service
from schemas import (
    BudgetCreate,
    BudgetDeleted,
    BudgetItemCreate,
    BudgetOut,
    BudgetUpdate,
)
from services import BudgetService
from tokens import TokenClaim


budget_router = APIRouter()


@budget_router.get("/budgets", response_model=list[BudgetOut])
async def get_budgets(
    service: BudgetService = Depends(get_budget_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.list_budgets(claim.user_id)


@budget_router.post(
    "/budgets", response_model=BudgetOut, status_code=status.HTTP_201_CREATED
)
async def create_budget(
    budget: BudgetCreate,
    service: BudgetService = Depends(get_budget_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.create_budget(claim.user_id, budget)


@budget_router.get("/budgets/{budget_id}", response_model=BudgetOut)
async def get_budget(
    budget_id: int,
    service: BudgetService = Depends(get_budget_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.get_budget(claim.user_id, budget_id)


@budget_router.put("/budgets/{budget_id}", response_model=BudgetOut)
async def update_budget(
    budget_id: int,
    changes: BudgetUpdate,
    service: BudgetService = Depends(get_budget_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.update_budget(claim.user_id, budget_id, changes)


@budget_router.delete("/budgets/{budget_id}", response_model=BudgetDeleted)
async def delete_budget(
    budget_id: int,
    service: BudgetService = Depends(get_budget_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    budget = service.delete_budget(claim.user_id, budget_id)
    return BudgetDeleted(
        message="Budget deleted successfully", budget=BudgetOut.model_validate(budget)
    )


@budget_router.post(
    "/budgets/{budget_id}/items",
    response_model=BudgetOut,
    status_code=status.HTTP_201_CREATED,
)
async def add_budget_item(
    budget_id: int,
    item: BudgetItemCreate,
    service: BudgetService = Depends(get_budget_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.add_item(claim.user_id, budget_id, item)


@budget_router.delete("/budgets/{budget_id}/items/{item_id}", response_model=BudgetOut)
async def remove_budget_item(
    budget_id: int,
    item_id: int,
    service: BudgetService = Depends(get_budget_service),
    claim: TokenClaim = Depends(get_current_claim),
):
    return service.remove_item(claim.user_id, budget_id, item_id)
