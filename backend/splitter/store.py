"""Ledger storage: expense and settlement records keyed by group.

The store only keeps and fetches records; it never computes anything.
``group_scope`` is the per-group lock every ledger read and write runs under,
so a balance fold never sees half of a write.
"""
import logging
import threading
import weakref
from contextlib import contextmanager

from sqlalchemy.orm import Session

from splitter.errors import NotFoundError

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
# Entries vanish once no request holds or waits on the lock.
_group_locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()


def _lock_for(group_id: int) -> threading.Lock:
    with _registry_lock:
        lock = _group_locks.get(group_id)
        if lock is None:
            lock = _group_locks[group_id] = threading.Lock()
        return lock


@contextmanager
def group_scope(group_id: int):
    """Serialize ledger access for one group. Other groups are never blocked."""
    lock = _lock_for(group_id)
    with lock:
        yield


def _label(model) -> str:
    return model.__name__


class LedgerStore:
    """Append/get/list/delete/replace over a SQLAlchemy session.

    Every write commits on success and rolls back on failure, so a record is
    either fully stored or not stored at all.
    """

    def __init__(self, db: Session):
        self.db = db

    def append(self, record):
        self.db.add(record)
        self._commit()
        self.db.refresh(record)
        logger.info("Stored %s %s in group %s", _label(type(record)), record.id, record.group_id)
        return record

    def find(self, model, record_id: int):
        record = self.db.get(model, record_id)
        if record is None:
            raise NotFoundError(f"{_label(model)} not found")
        return record

    def get(self, model, group_id: int, record_id: int):
        record = self.db.get(model, record_id)
        if record is None or record.group_id != group_id:
            raise NotFoundError(f"{_label(model)} not found")
        return record

    def list_by_group(self, model, group_id: int) -> list:
        return self.db.query(model).filter(model.group_id == group_id).order_by(model.id).all()

    def delete(self, model, group_id: int, record_id: int) -> None:
        record = self.get(model, group_id, record_id)
        self.db.delete(record)
        self._commit()
        logger.info("Deleted %s %s from group %s", _label(model), record_id, group_id)

    def replace(self, model, group_id: int, record_id: int, new_record):
        """Swap the stored record's contents for ``new_record``'s, keeping its id."""
        record = self.get(model, group_id, record_id)
        for column in model.__table__.columns:
            if column.primary_key or column.name == "created_at":
                continue
            setattr(record, column.name, getattr(new_record, column.name))
        if hasattr(model, "shares"):
            record.shares = list(new_record.shares)
        self._commit()
        self.db.refresh(record)
        logger.info("Replaced %s %s in group %s", _label(model), record_id, group_id)
        return record

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
