"""Process-wide memoization for template data."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from . import db

logger = logging.getLogger(__name__)


class CacheService(Protocol):
    def cache_for(self, key: str, compute: Callable[[], Any]) -> Any: ...


class TemplateCache:
    """Lazily computed values keyed by name.

    Each key is computed at most once per cache generation, even when many
    threads ask for it at the same time: the first caller computes while the
    others wait on the key's lock and then read the stored value. A failing
    computation stores nothing and the exception reaches the caller.

    With a ``session_factory`` values are also persisted through
    :mod:`subscribe_button.db` and must therefore be JSON serialisable.
    Database errors are logged and the cache carries on in memory.
    """

    _instance: Optional["TemplateCache"] = None
    _instance_lock = threading.Lock()

    def __init__(self, session_factory: Optional[sessionmaker[Session]] = None):
        self._session_factory = session_factory
        self._values: Dict[str, Any] = {}
        self._key_locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._generation = 0

    @classmethod
    def get_instance(cls) -> "TemplateCache":
        """Return the shared default cache."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @property
    def generation(self) -> int:
        return self._generation

    def _key_lock(self, key: str) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock

    def _lookup(self, key: str) -> Any:
        with self._lock:
            return self._values.get(key, db.MISSING)

    def cache_for(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the value stored under ``key``, computing it on first use."""
        value = self._lookup(key)
        if not db.is_missing(value):
            logger.debug("Cache hit for %s", key)
            return value

        with self._key_lock(key):
            value = self._lookup(key)
            if not db.is_missing(value):
                logger.debug("Cache hit for %s after wait", key)
                return value

            generation = self._generation
            value = self._load(key)
            computed = db.is_missing(value)
            if computed:
                logger.debug("Cache miss for %s; computing", key)
                value = compute()

            with self._lock:
                current = generation == self._generation
                if current:
                    self._values[key] = value
            if computed and current:
                self._store(key, value)
            return value

    def _load(self, key: str) -> Any:
        if not self._session_factory:
            return db.MISSING
        try:
            with self._session_factory() as session:
                value = db.get_entry(session, key)
        except SQLAlchemyError:
            logger.exception("Failed to read %s from cache database", key)
            return db.MISSING
        if not db.is_missing(value):
            logger.debug("Loaded %s from cache database", key)
        return value

    def _store(self, key: str, value: Any) -> None:
        if not self._session_factory:
            return
        try:
            with self._session_factory() as session:
                db.upsert_entry(session, key, value)
        except SQLAlchemyError:
            logger.exception("Failed to persist %s to cache database", key)

    def delete(self, key: str) -> None:
        """Forget a single key."""
        with self._lock:
            self._values.pop(key, None)
            lock = self._key_locks.get(key)
            if lock is not None and not lock.locked():
                del self._key_locks[key]
        self._purge(key)

    def invalidate(self) -> None:
        """Drop every value and start a new generation."""
        with self._lock:
            self._values.clear()
            self._generation += 1
            # locks still held belong to computations of the old generation
            self._key_locks = {
                key: lock for key, lock in self._key_locks.items() if lock.locked()
            }
        self._purge()
        logger.info("Template cache invalidated (generation %d)", self._generation)

    def _purge(self, key: Optional[str] = None) -> None:
        if not self._session_factory:
            return
        try:
            with self._session_factory() as session:
                db.delete_entries(session, key)
        except SQLAlchemyError:
            logger.exception("Failed to clear cache database")

    def __contains__(self, key: str) -> bool:
        return not db.is_missing(self._lookup(key))
