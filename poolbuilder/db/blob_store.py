"""
Key-value blob storage.

The submission service only needs get/put over JSON blobs. Writes are
compare-and-swap on a per-key version so two requests that read the same
state cannot silently overwrite each other's update.
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from poolbuilder.models.db import BlobDB

logger = logging.getLogger(__name__)


class WriteConflictError(Exception):
    """Raised when a key changed between read and conditional write."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Concurrent write detected for key {key!r}")


@dataclass(frozen=True, slots=True)
class StoredBlob:
    """A blob value plus the version it was read at."""

    value: Any
    version: int


class BlobStore(ABC):
    """Async key-value store of JSON-serializable blobs."""

    @abstractmethod
    async def get(self, key: str) -> StoredBlob | None:
        """Return the blob under key, or None when the key was never written."""

    @abstractmethod
    async def put(self, key: str, value: Any, expected_version: int | None) -> int:
        """
        Write value if the key is still at expected_version.

        Args:
            key: Blob key
            value: JSON-serializable value
            expected_version: Version seen by the caller's read, or None if
                the key did not exist

        Returns:
            The new version

        Raises:
            WriteConflictError: If another writer got there first
        """

    @abstractmethod
    async def discard(self) -> None:
        """Drop writes made since the last commit so a caller can retry."""


class SqlBlobStore(BlobStore):
    """BlobStore backed by the blobs table, scoped to one session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, key: str) -> StoredBlob | None:
        result = await self._session.execute(
            select(BlobDB.value, BlobDB.version).where(BlobDB.key == key)
        )
        row = result.one_or_none()
        if row is None:
            return None
        # Callers mutate what they read
        return StoredBlob(value=copy.deepcopy(row.value), version=row.version)

    async def put(self, key: str, value: Any, expected_version: int | None) -> int:
        if expected_version is None:
            self._session.add(BlobDB(key=key, value=value, version=1))
            try:
                await self._session.flush()
            except IntegrityError as e:
                raise WriteConflictError(key) from e
            return 1

        new_version = expected_version + 1
        result = await self._session.execute(
            update(BlobDB)
            .where(BlobDB.key == key, BlobDB.version == expected_version)
            .values(value=value, version=new_version)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise WriteConflictError(key)
        return new_version

    async def discard(self) -> None:
        logger.debug("Rolling back pending blob writes")
        await self._session.rollback()
