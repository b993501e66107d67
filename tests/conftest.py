"""Pytest configuration and shared fixtures for BudgetWise tests.

This module provides database fixtures, test data factories and a Flask client
so domain logic, repositories and routes are tested against a throwaway SQLite
database instead of the real data directory.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from sqlmodel import create_engine

from budgetwise import create_app
from budgetwise.extensions import session_scope
from budgetwise.infra.database import create_session_factory, init_database
from budgetwise.infra.repositories import (
    SQLModelAccountRepository,
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelRecurringRepository,
    SQLModelTransactionRepository,
)
from budgetwise.models import Account, Budget, Category, User
from budgetwise.services.reconciler import BalanceReconciler
from budgetwise.services.recurring import RecurringService

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with every table created
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", echo=False)
    init_database(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory whose sessions commit on success and roll back on error."""

    return create_session_factory(db_engine)


@pytest.fixture
def user(session_factory) -> User:
    """Create the default user that owns test data."""

    with session_factory() as session:
        u = User(username="tester")
        session.add(u)
        session.flush()
        session.refresh(u)
        session.expunge(u)
    return u


@pytest.fixture
def other_user(session_factory) -> User:
    """A second user for ownership checks."""

    with session_factory() as session:
        u = User(username="intruder")
        session.add(u)
        session.flush()
        session.refresh(u)
        session.expunge(u)
    return u


# =============================================================================
# Repositories and services
# =============================================================================


@pytest.fixture
def accounts(session_factory) -> SQLModelAccountRepository:
    return SQLModelAccountRepository(session_factory)


@pytest.fixture
def transactions(session_factory) -> SQLModelTransactionRepository:
    return SQLModelTransactionRepository(session_factory)


@pytest.fixture
def categories(session_factory) -> SQLModelCategoryRepository:
    return SQLModelCategoryRepository(session_factory)


@pytest.fixture
def budgets(session_factory) -> SQLModelBudgetRepository:
    return SQLModelBudgetRepository(session_factory)


@pytest.fixture
def reconciler(session_factory, accounts, transactions, categories) -> BalanceReconciler:
    return BalanceReconciler(
        session_factory,
        accounts=accounts,
        transactions=transactions,
        categories=categories,
    )


@pytest.fixture
def recurring(session_factory, reconciler) -> RecurringService:
    return RecurringService(
        session_factory,
        templates=SQLModelRecurringRepository(session_factory),
        reconciler=reconciler,
    )


@pytest.fixture
def balance_of(accounts, user):
    """Return a function reading the stored balance of an account."""

    def _balance(account_id: int, owner: User | None = None) -> Decimal:
        owner = owner or user
        account = accounts.get_by_id(account_id, user_id=owner.id)
        assert account is not None
        return Decimal(str(account.balance))

    return _balance


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def account_factory(accounts, user):
    """Factory for creating test accounts through the repository.

    Returns:
        Callable: Function that creates and persists Account instances
    """

    def _create_account(
        name: str = "Test Account",
        balance: Decimal | str | int = Decimal("0"),
        account_type: str = "checking",
        owner: User | None = None,
    ) -> Account:
        owner = owner or user
        account = Account(name=name, balance=Decimal(str(balance)), account_type=account_type)
        return accounts.create(account, user_id=owner.id)

    return _create_account


@pytest.fixture
def category_factory(categories, user):
    """Factory for creating test categories."""

    def _create_category(
        name: str = "Groceries",
        category_type: str = "expense",
        color: str = "#FF5733",
        owner: User | None = None,
    ) -> Category:
        owner = owner or user
        return categories.create(
            Category(name=name, category_type=category_type, color=color), user_id=owner.id
        )

    return _create_category


@pytest.fixture
def budget_factory(budgets, user):
    """Factory for creating test budgets."""

    def _create_budget(
        amount: Decimal | str | int = Decimal("300"),
        period: str = "monthly",
        start_date: datetime = datetime(2024, 1, 1),
        end_date: datetime | None = None,
        category_id: int | None = None,
        name: str = "Test Budget",
        is_active: bool = True,
        owner: User | None = None,
    ) -> Budget:
        owner = owner or user
        budget = Budget(
            name=name,
            amount=Decimal(str(amount)),
            period=period,
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            is_active=is_active,
        )
        return budgets.create(budget, user_id=owner.id)

    return _create_budget


# =============================================================================
# Flask app fixtures
# =============================================================================


@pytest.fixture()
def app_timezone() -> str | None:
    """Value for BUDGETWISE_TIMEZONE; None keeps server-local time.

    Override in a test module to pin the app to a zone.
    """
    return None


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch, app_timezone):
    """Application wired to a temporary data directory and database."""

    monkeypatch.setenv("BUDGETWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("BUDGETWISE_DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    monkeypatch.delenv("BUDGETWISE_WEEK_START", raising=False)
    if app_timezone is None:
        monkeypatch.delenv("BUDGETWISE_TIMEZONE", raising=False)
    else:
        monkeypatch.setenv("BUDGETWISE_TIMEZONE", app_timezone)
    return create_app("testing")


@pytest.fixture()
def api_user_id(app) -> int:
    """Id of a user created inside the app's database."""

    with app.app_context():
        with session_scope() as session:
            u = User(username="api-tester")
            session.add(u)
            session.flush()
            return u.id  # type: ignore[return-value]


@pytest.fixture()
def client(app, api_user_id):
    """Test client that sends ``X-User-Id`` on every request."""

    with app.test_client() as test_client:
        test_client.environ_base["HTTP_X_USER_ID"] = str(api_user_id)
        yield test_client


@pytest.fixture()
def anonymous_client(app):
    with app.test_client() as test_client:
        yield test_client

