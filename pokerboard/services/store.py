"""
Document-store style access to one mapped table.

The workflow and the leaderboard only need a handful of operations
(find, find_one, insert, update_fields, delete_all, insert_many). Keeping
them behind one small class means the services never build queries
themselves, and connection failures are translated to StoreUnavailable
in a single place.

Repository methods never commit: the caller owns the transaction.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from pokerboard.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


@contextmanager
def translate_store_errors(operation: str):
    """Re-raise connection/timeout failures as StoreUnavailable."""
    try:
        yield
    except _UNAVAILABLE_ERRORS as exc:
        logger.error(f"Store unavailable during {operation}: {exc}")
        raise StoreUnavailable(f"Store unavailable during {operation}") from exc


class Repository:
    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def find(self, order_by=None, limit: Optional[int] = None, **filters) -> List[Any]:
        """All records matching ``filters`` (every record when none are given)."""
        query = select(self.model).filter_by(**filters)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        with translate_store_errors(f"find on {self.model.__tablename__}"):
            return list(self.db.scalars(query).all())

    def find_one(self, **filters) -> Optional[Any]:
        query = select(self.model).filter_by(**filters).limit(1)
        with translate_store_errors(f"find_one on {self.model.__tablename__}"):
            return self.db.scalars(query).first()

    def insert(self, record) -> Any:
        """Stage ``record`` and flush it; returns the generated id."""
        with translate_store_errors(f"insert on {self.model.__tablename__}"):
            self.db.add(record)
            self.db.flush()
        return record.id

    def update_fields(self, record_id, values: Dict[str, Any]) -> int:
        """
        Update the given columns of one record by id.

        Values may be SQL expressions (``Player.wins + 1``), which makes the
        update an atomic read-modify-write inside the store.
        Returns the number of rows matched.
        """
        statement = (
            update(self.model)
            .where(self.model.id == record_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with translate_store_errors(f"update on {self.model.__tablename__}"):
            return self.db.execute(statement).rowcount

    def delete_all(self, **filters) -> int:
        # Default session sync evicts matched objects, so a later insert may
        # reuse their primary keys within the same session.
        statement = delete(self.model).filter_by(**filters)
        with translate_store_errors(f"delete on {self.model.__tablename__}"):
            return self.db.execute(statement).rowcount

    def insert_many(self, records: Iterable[Any]) -> int:
        records = list(records)
        if not records:
            return 0
        with translate_store_errors(f"insert_many on {self.model.__tablename__}"):
            self.db.add_all(records)
            self.db.flush()
        return len(records)

    def commit(self):
        with translate_store_errors(f"commit on {self.model.__tablename__}"):
            self.db.commit()
