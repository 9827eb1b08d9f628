from fastapi import Depends
from sqlalchemy.orm import Session

from database import get_db
from services import AuthService, BudgetService, ExpenseService
from store import SqlBudgetStore, SqlExpenseStore, SqlUserStore


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(SqlUserStore(db))


def get_expense_service(db: Session = Depends(get_db)) -> ExpenseService:
    return ExpenseService(SqlExpenseStore(db))


def get_budget_service(db: Session = Depends(get_db)) -> BudgetService:
    return BudgetService(SqlBudgetStore(db))
