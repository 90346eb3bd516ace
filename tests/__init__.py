#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v

Database-backed tests use a throwaway SQLite file per test case, so no
external database is needed.
"""

import contextlib
import os
import tempfile

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database.models import Base


class SQLiteTestDatabase:
    """File-backed SQLite database with the notification schema created."""

    def __init__(self):
        fd, self.path = tempfile.mkstemp(suffix='.db', prefix='pawsconnect_test_')
        os.close(fd)
        self.engine = create_engine(
            f"sqlite:///{self.path}",
            connect_args={'check_same_thread': False, 'timeout': 30},
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    @contextlib.contextmanager
    def session_scope(self):
        session = self.Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        self.engine.dispose()
        if os.path.exists(self.path):
            os.remove(self.path)
