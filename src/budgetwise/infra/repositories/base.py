"""Shared session handling for SQLModel repositories."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlmodel import Session

from ..database import SessionFactory


class SessionBoundRepository:
    """Base for repositories that either own a session or join the caller's."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @contextmanager
    def _session(self, session: Session | None = None) -> Iterator[Session]:
        """Yield the caller's session, or a fresh one committed on exit."""
        if session is not None:
            yield session
            return
        with self.session_factory() as own:
            yield own
            own.commit()
