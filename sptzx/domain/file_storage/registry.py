"""
Object Registry

In-memory mapping from object id to metadata. The registry is the sole
authority on whether an object still exists; it is owned by the
application factory and injected into the services that need it.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .entities import ObjectMetadata


class ReadWriteLock:
    """
    Reader/writer lock built on a condition variable.

    Any number of readers may hold the lock at once; a writer holds it
    alone. Waiting writers block new readers so writers are not starved.
    """

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._condition:
            while self._writer_active or self._writers_waiting:
                self._condition.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._condition:
            self._readers -= 1
            if self._readers == 0:
                self._condition.notify_all()

    def acquire_write(self) -> None:
        with self._condition:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._condition.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True

    def release_write(self) -> None:
        with self._condition:
            self._writer_active = False
            self._condition.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class DuplicateObjectError(Exception):
    """Raised when an id is published twice."""
    pass


class ObjectRegistry:
    """
    Concurrent ``id -> ObjectMetadata`` mapping.

    Lookups take the shared side of the lock; insert and remove take the
    exclusive side. Entries are inserted once and removed at most once.
    """

    def __init__(self):
        self._entries: Dict[str, ObjectMetadata] = {}
        self._lock = ReadWriteLock()

    def insert(self, metadata: ObjectMetadata) -> None:
        """
        Publish metadata as a single atomic insert.

        Raises:
            DuplicateObjectError: If the id is already registered
        """
        with self._lock.write_locked():
            if metadata.id in self._entries:
                raise DuplicateObjectError(f"Object already registered: {metadata.id}")
            self._entries[metadata.id] = metadata

    def get(self, object_id: str) -> Optional[ObjectMetadata]:
        with self._lock.read_locked():
            return self._entries.get(object_id)

    def remove(self, object_id: str) -> Optional[ObjectMetadata]:
        """
        Remove an entry.

        Returns:
            The removed metadata, or None if the id was not registered.
            Exactly one of several concurrent callers receives the entry.
        """
        with self._lock.write_locked():
            return self._entries.pop(object_id, None)

    def find_expired(self, ttl_seconds: int, now: float) -> List[str]:
        """Ids of every entry whose age exceeds ``ttl_seconds``."""
        with self._lock.read_locked():
            return [
                object_id
                for object_id, metadata in self._entries.items()
                if metadata.is_expired(ttl_seconds, now)
            ]

    def __contains__(self, object_id: object) -> bool:
        with self._lock.read_locked():
            return object_id in self._entries

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)
