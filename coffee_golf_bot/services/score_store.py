"""
Score store: the only owner of the persisted score document.

Every mutation runs its load-modify-save cycle under one asyncio lock
(``transaction()`` for general edits, ``record_attempt`` for scores),
writes the whole document back and clears the read cache synchronously.
Reads go through a TTL cache so leaderboard queries don't hit storage on
every command.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional, Tuple

from coffee_golf_bot.config import Config
from coffee_golf_bot.constants import CacheConstants
from coffee_golf_bot.data_models.scores import Attempt, PlayerStats, RecordResult, ScoreDocument
from coffee_golf_bot.database.document_backend import DocumentBackend
from coffee_golf_bot.utils.score_exceptions import AttemptLimitError, StorageError

logger = logging.getLogger(__name__)


class ScoreStore:
    """Holds attempts, daily index, player aggregates and tournaments."""

    def __init__(
        self,
        backend: DocumentBackend,
        cache_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.backend = backend
        self._cache_ttl = Config.CACHE_TTL_SECONDS if cache_ttl is None else cache_ttl
        self._clock = clock
        self._document: Optional[ScoreDocument] = None
        self._document_loaded_at = 0.0
        # Per-date values derived from the cached document, e.g. daily leaderboards
        self._derived: Dict[str, Tuple[float, Any]] = {}
        self._generation = 0
        self._cache_max_size = CacheConstants.DEFAULT_MAX_CACHE_SIZE
        self._write_lock = asyncio.Lock()

    # Cache management

    def _is_fresh(self, loaded_at: float) -> bool:
        return self._clock() - loaded_at < self._cache_ttl

    @property
    def generation(self) -> int:
        """Bumped on every invalidation; lets readers detect a write during a load."""
        return self._generation

    def invalidate(self):
        """Drop the cached document and everything derived from it."""
        self._generation += 1
        self._document = None
        self._document_loaded_at = 0.0
        self._derived.clear()
        logger.debug("Score document cache invalidated")

    def get_derived(self, key: str) -> Optional[Any]:
        entry = self._derived.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if not self._is_fresh(stored_at):
            self._derived.pop(key, None)
            return None
        return value

    def set_derived(self, key: str, value: Any, generation: Optional[int] = None):
        if generation is not None and generation != self._generation:
            # Computed from a document that has since been replaced
            return
        self._derived[key] = (self._clock(), value)
        if len(self._derived) > self._cache_max_size:
            # Keep the newest entries
            newest = sorted(self._derived.items(), key=lambda item: item[1][0], reverse=True)
            self._derived = dict(newest[:self._cache_max_size])

    # Document I/O

    async def _read_document(self) -> Tuple[ScoreDocument, int]:
        """Read straight from the backend, creating the document if absent.

        Also returns the cache generation the document is current for.
        """
        generation = self._generation
        raw = await self.backend.load()
        if raw is None:
            logger.info("No score document found, creating an empty one")
            document = ScoreDocument()
            await self._write_document(document)
            return document, self._generation
        return ScoreDocument.from_dict(raw), generation

    async def _write_document(self, document: ScoreDocument):
        try:
            await self.backend.save(document.to_dict())
        except Exception as e:
            logger.error(f"Failed to save score document: {e}", exc_info=True)
            raise StorageError("save", str(e)) from e
        finally:
            self.invalidate()

    async def load(self) -> ScoreDocument:
        """Return the score document, served from cache while it is fresh.

        A failed read is logged and answered with an empty document so
        read-only callers keep working; the fallback is never cached.
        Neither is a document read while a write was landing.
        """
        if self._document is not None and self._is_fresh(self._document_loaded_at):
            return self._document

        try:
            document, generation = await self._read_document()
        except Exception as e:
            logger.error(f"Failed to load score document, using empty default: {e}", exc_info=True)
            return ScoreDocument()

        if generation == self._generation:
            self._document = document
            self._document_loaded_at = self._clock()
        return document

    async def save(self, document: ScoreDocument):
        """Persist a whole document and invalidate the cache."""
        async with self._write_lock:
            await self._write_document(document)

    async def _load_for_update(self) -> ScoreDocument:
        """Uncached read for a write; failures raise instead of falling back.

        Callers must hold the write lock.
        """
        try:
            document, _ = await self._read_document()
        except StorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to load score document for update: {e}", exc_info=True)
            raise StorageError("load", str(e)) from e
        return document

    @asynccontextmanager
    async def transaction(self):
        """Serialized load-modify-save on a fresh copy of the document.

        The document is saved only if the block exits without raising.
        Read failures are raised as StorageError rather than falling back
        to an empty document, which would overwrite stored data.
        """
        async with self._write_lock:
            document = await self._load_for_update()
            yield document
            await self._write_document(document)

    # Score operations

    async def record_attempt(self, attempt: Attempt, daily_cap: Optional[int] = None) -> RecordResult:
        """
        Record an attempt and refresh the player's aggregate.

        Args:
            attempt: Parsed attempt to store
            daily_cap: If given, reject the attempt when the player already
                has this many attempts for ``attempt.date``

        Returns:
            RecordResult with whether this was the player's first attempt of
            the day and its 1-based index in timestamp order

        Raises:
            AttemptLimitError: The daily cap is already reached; nothing is stored
            StorageError: The document could not be read or saved
        """
        async with self._write_lock:
            document = await self._load_for_update()
            attempts = document.daily_scores.get(attempt.date, {}).get(attempt.player_id, [])

            for position, existing in enumerate(sorted(attempts, key=lambda a: a.timestamp), start=1):
                if existing.message_id == attempt.message_id:
                    # Same message delivered twice; nothing to write
                    logger.info(f"Message {attempt.message_id} already recorded, skipping")
                    return RecordResult(is_first_of_day=len(attempts) == 1, attempt_index=position)

            if daily_cap is not None and len(attempts) >= daily_cap:
                raise AttemptLimitError(attempt.player_id, attempt.date, daily_cap)

            attempts = document.daily_scores.setdefault(attempt.date, {}).setdefault(attempt.player_id, [])
            attempts.append(attempt)
            attempts.sort(key=lambda a: a.timestamp)
            attempt_index = attempts.index(attempt) + 1

            stats = document.players.get(attempt.player_id)
            if stats is None:
                stats = PlayerStats(id=attempt.player_id, name=attempt.player_name)
                document.players[attempt.player_id] = stats
            stats.add_attempt(attempt)

            self._track_tournament_participant(document, attempt)
            await self._write_document(document)

        logger.info(
            f"Recorded {attempt.strokes} strokes for {attempt.player_name} on {attempt.date} "
            f"(attempt {attempt_index})"
        )
        return RecordResult(is_first_of_day=len(attempts) == 1, attempt_index=attempt_index)

    def _track_tournament_participant(self, document: ScoreDocument, attempt: Attempt):
        if not document.current_tournament:
            return
        tournament = document.find_tournament(document.current_tournament)
        if tournament and tournament.active and tournament.covers(attempt.date):
            if attempt.player_id not in tournament.participants:
                tournament.participants.append(attempt.player_id)
                logger.info(f"Added {attempt.player_name} to tournament '{tournament.name}'")

    async def attempts_for(self, date: str) -> Dict[str, List[Attempt]]:
        document = await self.load()
        return document.attempts_for(date)

    async def attempt_count(self, player_id: str, date: str) -> int:
        document = await self.load()
        return document.attempt_count(str(player_id), date)

    async def player_stats(self, player_id: str) -> Optional[PlayerStats]:
        document = await self.load()
        return document.players.get(str(player_id))

    async def close(self):
        await self.backend.close()
