"""
Owner-scoped operations behind the HTTP routes.

Services take already-validated request schemas, talk to the stores and
raise the errors from :mod:`errors`. A record owned by someone else is
reported exactly like a missing one.
"""

import logging

from passlib.context import CryptContext

import tokens
from errors import Conflict, NotFound, Unauthorized
from schemas import (
    BudgetCreate,
    BudgetItemCreate,
    BudgetUpdate,
    ExpenseCreate,
    ExpenseUpdate,
    UserLogin,
    UserRegister,
)
from store import BudgetStore, ExpenseStore, UserStore

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)

INVALID_CREDENTIALS = "Invalid email or password"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


class AuthService:
    def __init__(self, users: UserStore):
        self.users = users

    def register(self, payload: UserRegister):
        if self.users.get_by_email(payload.email) is not None:
            raise Conflict("Email already registered")

        user = self.users.create(
            name=payload.name,
            email=payload.email,
            password_hash=get_password_hash(payload.password),
        )
        logger.info("Registered user %s", user.id)
        return tokens.issue(user.id, user.email), user

    def login(self, payload: UserLogin):
        user = self.users.get_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.info("Failed login attempt for %s", payload.email)
            raise Unauthorized(INVALID_CREDENTIALS)
        return tokens.issue(user.id, user.email), user

    def current_user(self, claim: tokens.TokenClaim):
        user = self.users.get(claim.user_id)
        if user is None:
            raise NotFound("User not found")
        return user


class ExpenseService:
    def __init__(self, expenses: ExpenseStore):
        self.expenses = expenses

    def list(self, owner_id: int):
        return self.expenses.list(owner_id)

    def create(self, owner_id: int, payload: ExpenseCreate):
        return self.expenses.create(owner_id, **payload.model_dump())

    def get(self, owner_id: int, expense_id: int):
        expense = self.expenses.get(owner_id, expense_id)
        if expense is None:
            raise NotFound("Expense not found")
        return expense

    def update(self, owner_id: int, expense_id: int, payload: ExpenseUpdate):
        changes = payload.model_dump(exclude_none=True)
        expense = self.expenses.update(owner_id, expense_id, **changes)
        if expense is None:
            raise NotFound("Expense not found")
        return expense

    def delete(self, owner_id: int, expense_id: int):
        expense = self.expenses.delete(owner_id, expense_id)
        if expense is None:
            raise NotFound("Expense not found")
        logger.info("User %s deleted expense %s", owner_id, expense_id)
        return expense


class BudgetService:
    def __init__(self, budgets: BudgetStore):
        self.budgets = budgets

    def list_budgets(self, owner_id: int):
        return self.budgets.list(owner_id)

    def create_budget(self, owner_id: int, payload: BudgetCreate):
        return self.budgets.create(owner_id, **payload.model_dump())

    def get_budget(self, owner_id: int, budget_id: int):
        budget = self.budgets.get(owner_id, budget_id)
        if budget is None:
            raise NotFound("Budget not found")
        return budget

    def update_budget(self, owner_id: int, budget_id: int, payload: BudgetUpdate):
        changes = payload.model_dump(exclude_none=True)
        budget = self.budgets.update(owner_id, budget_id, **changes)
        if budget is None:
            raise NotFound("Budget not found")
        return budget

    def delete_budget(self, owner_id: int, budget_id: int):
        budget = self.budgets.delete(owner_id, budget_id)
        if budget is None:
            raise NotFound("Budget not found")
        logger.info("User %s deleted budget table %s", owner_id, budget_id)
        return budget

    def add_item(self, owner_id: int, budget_id: int, payload: BudgetItemCreate):
        budget = self.get_budget(owner_id, budget_id)
        self.budgets.add_item(budget, **payload.model_dump())
        return budget

    def remove_item(self, owner_id: int, budget_id: int, item_id: int):
        budget = self.get_budget(owner_id, budget_id)
        if self.budgets.remove_item(budget, item_id) is None:
            raise NotFound("Budget item not found")
        return budget
