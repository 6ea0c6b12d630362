"""
Document backends for the score document.

The whole score document lives in one storage object and is always read
and written in full. A backend only knows how to load and save that
object; it does no merging or locking.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sqlalchemy import select

from coffee_golf_bot.config import Config
from coffee_golf_bot.database.database import Database
from coffee_golf_bot.database.models import StoredDocument
from coffee_golf_bot.utils.redis_utils import RedisUtils

logger = logging.getLogger(__name__)


class DocumentBackend(ABC):
    """Opaque load/save pair for one JSON document."""

    @abstractmethod
    async def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored document, or None if it does not exist yet."""
        pass

    @abstractmethod
    async def save(self, document: Dict[str, Any]):
        """Replace the stored document."""
        pass

    async def close(self):
        pass


class SqlDocumentBackend(DocumentBackend):
    """Stores the document as a single row through SQLAlchemy."""

    def __init__(self, database: Database, key: str = 'scores'):
        self.database = database
        self.key = key

    async def load(self) -> Optional[Dict[str, Any]]:
        async with self.database.get_session() as session:
            result = await session.execute(
                select(StoredDocument).where(StoredDocument.key == self.key)
            )
            row = result.scalar_one_or_none()
            if row is None:
                return None
            return json.loads(row.body)

    async def save(self, document: Dict[str, Any]):
        body = json.dumps(document, ensure_ascii=False)
        async with self.database.get_session() as session:
            row = await session.get(StoredDocument, self.key)
            if row is None:
                session.add(StoredDocument(key=self.key, body=body))
            else:
                row.body = body
        logger.debug(f"Saved document '{self.key}' ({len(body)} bytes)")

    async def close(self):
        await self.database.close()


class RedisDocumentBackend(DocumentBackend):
    """Stores the document as one JSON string under a single Redis key."""

    def __init__(self, client, key: str):
        self.client = client
        self.key = key

    async def load(self) -> Optional[Dict[str, Any]]:
        raw = await self.client.get(self.key)
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode('utf-8')
        return json.loads(raw)

    async def save(self, document: Dict[str, Any]):
        await self.client.set(self.key, json.dumps(document, ensure_ascii=False))

    async def close(self):
        await self.client.aclose()


async def create_backend() -> DocumentBackend:
    """Build the backend selected by Config.STORAGE_BACKEND."""
    if Config.STORAGE_BACKEND == 'redis':
        client = await RedisUtils.create_redis_client()
        if client is None:
            raise RuntimeError("STORAGE_BACKEND is 'redis' but no Redis connection could be established")
        logger.info(f"Using Redis document backend (key: {Config.DOCUMENT_KEY})")
        return RedisDocumentBackend(client, Config.DOCUMENT_KEY)

    database = Database()
    await database.initialize()
    logger.info(f"Using SQL document backend (key: {Config.DOCUMENT_KEY})")
    return SqlDocumentBackend(database, Config.DOCUMENT_KEY)
