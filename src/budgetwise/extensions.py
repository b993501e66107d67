"""Database and extension wiring for BudgetWise."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from flask import Flask, current_app
from sqlmodel import Session

from .config import BaseConfig
from .infra import database
from .infra.database import SessionFactory

_EXTENSION_KEY = "budgetwise"


def init_db(app: Flask) -> None:
    """Initialize the SQLModel engine using configuration from the app."""

    config: BaseConfig = app.config["BUDGETWISE_CONFIG"]
    engine, session_factory = database.bootstrap_database(config)
    app.extensions[_EXTENSION_KEY] = {"engine": engine, "session_factory": session_factory}


def _state() -> dict:
    state = current_app.extensions.get(_EXTENSION_KEY)
    if state is None:  # pragma: no cover - exercised only on misconfigured apps
        raise RuntimeError("Database engine not initialized")
    return state


def get_session_factory() -> SessionFactory:
    """Return the session factory bound to the current app."""

    return _state()["session_factory"]


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around operations."""

    with get_session_factory()() as session:
        yield session
