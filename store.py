"""
Persistence layer.

Each store is an interface with two implementations: a SQLAlchemy one bound
to a request session, and (for users and expenses) an in-memory one that
keeps records in plain dicts so services can be exercised without a database.
Stores return ``None`` for missing or foreign records; services decide which
error to raise.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from database import BudgetItem, BudgetTable, Expense, User, utcnow
from errors import Conflict

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------------
class UserStore(ABC):
    @abstractmethod
    def get(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def create(self, name: str, email: str, password_hash: str) -> User: ...


class SqlUserStore(UserStore):
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id):
        return self.db.get(User, user_id)

    def get_by_email(self, email):
        return self.db.query(User).filter(User.email == email).first()

    def create(self, name, email, password_hash):
        user = User(name=name, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # lost a race against another registration with the same email
            self.db.rollback()
            raise Conflict("Email already registered")
        self.db.refresh(user)
        return user


class MemoryUserStore(UserStore):
    def __init__(self):
        self._users = {}
        self._ids = itertools.count(1)

    def get(self, user_id):
        return self._users.get(user_id)

    def get_by_email(self, email):
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    def create(self, name, email, password_hash):
        if self.get_by_email(email) is not None:
            raise Conflict("Email already registered")
        user = User(
            id=next(self._ids),
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=utcnow(),
        )
        self._users[user.id] = user
        return user


# ----------------------------------------------------------------------------
# Expenses
# ----------------------------------------------------------------------------
class ExpenseStore(ABC):
    @abstractmethod
    def list(self, owner_id: int) -> List[Expense]:
        """Owner's expenses, newest ``date`` first, ties in insertion order."""

    @abstractmethod
    def get(self, owner_id: int, expense_id: int) -> Optional[Expense]: ...

    @abstractmethod
    def create(self, owner_id: int, **fields) -> Expense: ...

    @abstractmethod
    def update(self, owner_id: int, expense_id: int, **changes) -> Optional[Expense]: ...

    @abstractmethod
    def delete(self, owner_id: int, expense_id: int) -> Optional[Expense]: ...


class SqlExpenseStore(ExpenseStore):
    def __init__(self, db: Session):
        self.db = db

    def _query(self, owner_id):
        return self.db.query(Expense).filter(Expense.owner_id == owner_id)

    def list(self, owner_id):
        return (
            self._query(owner_id)
            .order_by(Expense.date.desc(), Expense.id.asc())
            .all()
        )

    def get(self, owner_id, expense_id):
        return self._query(owner_id).filter(Expense.id == expense_id).first()

    def create(self, owner_id, **fields):
        expense = Expense(owner_id=owner_id, **fields)
        self.db.add(expense)
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def update(self, owner_id, expense_id, **changes):
        expense = self.get(owner_id, expense_id)
        if expense is None:
            return None
        for field, value in changes.items():
            setattr(expense, field, value)
        expense.updated_at = utcnow()
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            logger.info("Expense %s was deleted during update", expense_id)
            return None
        self.db.refresh(expense)
        return expense

    def delete(self, owner_id, expense_id):
        expense = self.get(owner_id, expense_id)
        if expense is None:
            return None
        # a concurrent delete leaves nothing to match; report it as missing
        deleted = (
            self._query(owner_id)
            .filter(Expense.id == expense_id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            self.db.rollback()
            return None
        self.db.commit()
        self.db.expunge(expense)
        return expense


class MemoryExpenseStore(ExpenseStore):
    def __init__(self):
        self._expenses = {}
        self._ids = itertools.count(1)

    def list(self, owner_id):
        owned = [e for e in self._expenses.values() if e.owner_id == owner_id]
        # sorted() is stable, so equal dates keep insertion order
        return sorted(owned, key=lambda e: e.date, reverse=True)

    def get(self, owner_id, expense_id):
        expense = self._expenses.get(expense_id)
        if expense is None or expense.owner_id != owner_id:
            return None
        return expense

    def create(self, owner_id, **fields):
        now = utcnow()
        expense = Expense(
            id=next(self._ids),
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            **fields,
        )
        self._expenses[expense.id] = expense
        return expense

    def update(self, owner_id, expense_id, **changes):
        expense = self.get(owner_id, expense_id)
        if expense is None:
            return None
        for field, value in changes.items():
            setattr(expense, field, value)
        expense.updated_at = utcnow()
        return expense

    def delete(self, owner_id, expense_id):
        expense = self.get(owner_id, expense_id)
        if expense is None:
            return None
        return self._expenses.pop(expense_id)


# ----------------------------------------------------------------------------
# Budget tables
# ----------------------------------------------------------------------------
class BudgetStore(ABC):
    @abstractmethod
    def list(self, owner_id: int) -> List[BudgetTable]: ...

    @abstractmethod
    def get(self, owner_id: int, budget_id: int) -> Optional[BudgetTable]: ...

    @abstractmethod
    def create(self, owner_id: int, **fields) -> BudgetTable: ...

    @abstractmethod
    def update(self, owner_id: int, budget_id: int, **changes) -> Optional[BudgetTable]: ...

    @abstractmethod
    def delete(self, owner_id: int, budget_id: int) -> Optional[BudgetTable]: ...

    @abstractmethod
    def add_item(self, budget: BudgetTable, **fields) -> BudgetItem: ...

    @abstractmethod
    def remove_item(self, budget: BudgetTable, item_id: int) -> Optional[BudgetItem]: ...


class SqlBudgetStore(BudgetStore):
    def __init__(self, db: Session):
        self.db = db

    def _query(self, owner_id):
        return self.db.query(BudgetTable).filter(BudgetTable.owner_id == owner_id)

    def list(self, owner_id):
        return (
            self._query(owner_id)
            .order_by(BudgetTable.created_at.desc(), BudgetTable.id.desc())
            .all()
        )

    def get(self, owner_id, budget_id):
        return self._query(owner_id).filter(BudgetTable.id == budget_id).first()

    def create(self, owner_id, **fields):
        budget = BudgetTable(owner_id=owner_id, **fields)
        self.db.add(budget)
        self.db.commit()
        self.db.refresh(budget)
        return budget

    def update(self, owner_id, budget_id, **changes):
        budget = self.get(owner_id, budget_id)
        if budget is None:
            return None
        for field, value in changes.items():
            setattr(budget, field, value)
        budget.updated_at = utcnow()
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            return None
        self.db.refresh(budget)
        return budget

    def delete(self, owner_id, budget_id):
        budget = self.get(owner_id, budget_id)
        if budget is None:
            return None
        # load items so the returned table still reports them once detached
        list(budget.items)
        self.db.query(BudgetItem).filter(BudgetItem.budget_id == budget_id).delete(
            synchronize_session=False
        )
        deleted = (
            self._query(owner_id)
            .filter(BudgetTable.id == budget_id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            self.db.rollback()
            return None
        self.db.commit()
        self.db.expunge(budget)
        return budget

    def add_item(self, budget, **fields):
        item = BudgetItem(**fields)
        budget.items.append(item)
        budget.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(budget)
        return item

    def remove_item(self, budget, item_id):
        item = next((i for i in budget.items if i.id == item_id), None)
        if item is None:
            return None
        budget.items.remove(item)
        budget.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(budget)
        return item
