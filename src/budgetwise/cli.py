"""Flask CLI commands for BudgetWise."""

from __future__ import annotations

from decimal import Decimal

import click
from sqlmodel import select

DEFAULT_CATEGORIES: tuple[tuple[str, str, str, str], ...] = (
    ("Salary", "income", "#4CAF50", "work"),
    ("Investments", "income", "#2196F3", "trending_up"),
    ("Gifts", "income", "#9C27B0", "card_giftcard"),
    ("Other Income", "income", "#607D8B", "attach_money"),
    ("Housing", "expense", "#F44336", "home"),
    ("Food", "expense", "#FF9800", "restaurant"),
    ("Transportation", "expense", "#795548", "directions_car"),
    ("Utilities", "expense", "#673AB7", "power"),
    ("Entertainment", "expense", "#E91E63", "movie"),
    ("Shopping", "expense", "#00BCD4", "shopping_cart"),
    ("Health", "expense", "#8BC34A", "favorite"),
    ("Education", "expense", "#3F51B5", "school"),
    ("Personal", "expense", "#009688", "person"),
    ("Debt", "expense", "#FF5722", "credit_card"),
    ("Savings", "expense", "#CDDC39", "savings"),
    ("Gifts & Donations", "expense", "#9C27B0", "volunteer_activism"),
    ("Taxes", "expense", "#607D8B", "receipt"),
    ("Other Expenses", "expense", "#9E9E9E", "more_horiz"),
)

DEMO_ACCOUNTS: tuple[tuple[str, str, Decimal], ...] = (
    ("Everyday Checking", "checking", Decimal("2500.00")),
    ("Rainy Day Savings", "savings", Decimal("10000.00")),
    ("Travel Card", "credit", Decimal("0.00")),
)


def _lookup_user_id(username: str) -> int:
    from .extensions import session_scope
    from .models.user import User

    with session_scope() as session:
        user_id = session.exec(select(User.id).where(User.username == username)).first()
    if user_id is None:
        raise click.ClickException(f"Unknown user: {username}")
    return user_id


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("budgetwise-create-user")
    @click.argument("username")
    def budgetwise_create_user(username: str) -> None:
        """Create a user and print its id (used as the X-User-Id header)."""

        from .extensions import session_scope
        from .models.user import User

        username = username.strip()
        with session_scope() as session:
            if session.exec(select(User.id).where(User.username == username)).first() is not None:
                raise click.ClickException(f"User already exists: {username}")
            user = User(username=username)
            session.add(user)
            session.flush()
            user_id = user.id
        click.echo(f"Created user {username} with id {user_id}")

    @app.cli.command("budgetwise-seed")
    @click.option("--user", "username", required=True, help="Username to seed data for")
    @click.option(
        "--demo-accounts/--no-demo-accounts",
        default=True,
        help="Also open demo accounts when the user has none",
    )
    def budgetwise_seed(username: str, demo_accounts: bool) -> None:
        """Create the default categories and, optionally, demo accounts."""

        from .extensions import get_session_factory
        from .infra.repositories import SQLModelAccountRepository, SQLModelCategoryRepository
        from .models import Account, Category

        user_id = _lookup_user_id(username)
        factory = get_session_factory()
        categories = SQLModelCategoryRepository(factory)

        created = 0
        for name, category_type, color, icon in DEFAULT_CATEGORIES:
            if categories.get_by_name(name, user_id=user_id) is None:
                category = Category(
                    name=name,
                    category_type=category_type,
                    color=color,
                    icon=icon,
                    is_default=True,
                )
                categories.create(category, user_id=user_id)
                created += 1
        click.echo(f"Seeded {created} categories.")

        if not demo_accounts:
            return
        accounts = SQLModelAccountRepository(factory)
        if accounts.list_all(user_id=user_id):
            click.echo("User already has accounts; skipping demo accounts.")
            return
        for name, account_type, balance in DEMO_ACCOUNTS:
            accounts.create(
                Account(name=name, account_type=account_type, balance=balance), user_id=user_id
            )
        click.echo(f"Opened {len(DEMO_ACCOUNTS)} demo accounts.")

    @app.cli.command("budgetwise-audit-balances")
    @click.option("--user", "username", required=True, help="Username to audit")
    def budgetwise_audit_balances(username: str) -> None:
        """Compare stored balances with opening balance plus ledger."""

        from .extensions import get_session_factory
        from .infra.repositories import SQLModelAccountRepository, SQLModelTransactionRepository
        from .services.balances import audit_balances

        user_id = _lookup_user_id(username)
        factory = get_session_factory()
        report = audit_balances(
            user_id=user_id,
            accounts=SQLModelAccountRepository(factory),
            transactions=SQLModelTransactionRepository(factory),
        )

        for row in report:
            marker = "ok" if row.consistent else f"DRIFT {row.drift}"
            click.echo(
                f"{row.account_id:>5}  {row.account_name:<30} stored={row.stored} "
                f"expected={row.expected}  {marker}"
            )

        drifted = [row for row in report if not row.consistent]
        if drifted:
            raise click.ClickException(f"Balance drift detected in {len(drifted)} account(s)")
        click.echo(f"All {len(report)} account balances match the ledger.")
