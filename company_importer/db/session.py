"""Database engine and session lifecycle."""
import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

class SessionManager:
    """Owns the engine and hands out short-lived sessions.

    Each ``with`` block opens a session, commits it when the block succeeds
    and rolls it back when it raises. Blocks must not be nested on the same
    manager.
    """

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            if not database_url:
                raise ValueError("database_url or engine is required")
            engine = create_engine(database_url)
        self.engine = engine
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False
        )
        self.logger = logging.getLogger(__name__)

    def get_session(self) -> Session:
        """Create a session the caller is responsible for closing."""
        return self.SessionLocal()

    def __enter__(self) -> Session:
        self.session = self.get_session()
        self.logger.debug(f"Opened session {id(self.session)}")
        return self.session

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.session.commit()
            else:
                self.logger.debug(f"Rolling back session {id(self.session)} after {exc_type.__name__}")
                self.session.rollback()
        finally:
            self.session.close()
