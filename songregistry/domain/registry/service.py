#!/usr/bin/env python
"""
Registry engine: song registration, ownership transfer, detail updates and
read-only queries.

Each mutating call is one unit of work on the SQLAlchemy session. All checks
run before the first write; any failure rolls the session back, so callers
never observe a song without its creator permission or a counter bump without
a song.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from songregistry.database.db_manager import db

from .errors import NotFoundError, RegistryError, UnauthorizedError
from .ledger import LedgerClock
from .models import (
    SongDetails,
    SongEntry,
    SongPermissionRecord,
    SongRegistration,
    validate_identity,
    validate_record,
)
from .stores import IdentifierAllocator, PermissionStore, SongStore


logger = logging.getLogger(__name__)

# Song ids are stored as signed 64-bit integers
MAX_SONG_ID = 2**63 - 1


class SongRegistry:
    def __init__(self, session=None, ledger: Optional[LedgerClock] = None) -> None:
        self.session = session if session is not None else db.session
        self.songs = SongStore(self.session)
        self.permissions = PermissionStore(self.session)
        self.allocator = IdentifierAllocator(self.session)
        self.ledger = ledger if ledger is not None else LedgerClock(self.session)

    # --- unit of work -------------------------------------------------

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        try:
            yield
            self.ledger.advance()
            self.session.commit()
        except RegistryError as exc:
            self.session.rollback()
            logger.warning("%s rejected: %s (%s)", operation, exc.code.value, exc.message)
            raise
        except Exception:
            self.session.rollback()
            logger.error("%s failed; transaction rolled back", operation, exc_info=True)
            raise

    @staticmethod
    def _require_id(song_id: int) -> int:
        # Ids outside the storable range were never allocated
        if isinstance(song_id, bool) or not isinstance(song_id, int) or not 0 < song_id <= MAX_SONG_ID:
            raise NotFoundError(f"Song {song_id} not found")
        return song_id

    def _require_song(self, song_id: int) -> SongEntry:
        entry = self.songs.get(self._require_id(song_id))
        if entry is None:
            raise NotFoundError(f"Song {song_id} not found")
        return entry

    def _require_owned(self, caller: str, song_id: int) -> SongEntry:
        entry = self._require_song(song_id)
        if entry.owner != caller:
            raise UnauthorizedError(f"Caller is not the owner of song {song_id}")
        return entry

    # --- mutations ----------------------------------------------------

    def create(
        self,
        caller: str,
        title: str,
        artist: str,
        duration: int,
        genre: str,
        tags: Sequence[str],
    ) -> int:
        """Register a song owned by ``caller`` and return its new id."""
        with self._transaction("create"):
            caller = validate_identity(caller, "caller")
            registration = validate_record(
                SongRegistration,
                title=title,
                artist=artist,
                duration=duration,
                genre=genre,
                tags=tags,
            )
            song_id = self.allocator.next()
            entry = SongEntry(
                id=song_id,
                owner=caller,
                creation_height=self.ledger.pending_height(),
                **registration.model_dump(),
            )
            self.songs.insert(song_id, entry)
            self.permissions.insert(song_id, caller, SongPermissionRecord(authorized=True))
        logger.info("Song %s registered by %s at height %s", song_id, caller, entry.creation_height)
        return song_id

    def transfer_ownership(self, caller: str, song_id: int, new_owner: str) -> bool:
        """Hand a song to ``new_owner``. Permission rows are left as they are."""
        with self._transaction("transfer_ownership"):
            entry = self._require_owned(caller, song_id)
            new_owner = validate_identity(new_owner, "new_owner")
            self.songs.set(song_id, entry.model_copy(update={"owner": new_owner}))
        logger.info("Song %s transferred from %s to %s", song_id, caller, new_owner)
        return True

    def update_details(
        self,
        caller: str,
        song_id: int,
        title: str,
        duration: int,
        genre: str,
        tags: Sequence[str],
    ) -> bool:
        """Replace title, duration, genre and tags. Artist, owner and height are kept."""
        with self._transaction("update_details"):
            entry = self._require_owned(caller, song_id)
            details = validate_record(
                SongDetails,
                title=title,
                duration=duration,
                genre=genre,
                tags=tags,
            )
            self.songs.set(song_id, entry.model_copy(update=details.model_dump()))
        logger.info("Song %s details updated by %s", song_id, caller)
        return True

    # --- queries ------------------------------------------------------

    def get_details(self, song_id: int) -> SongEntry:
        return self._require_song(song_id)

    def get_owner(self, song_id: int) -> str:
        return self._require_song(song_id).owner

    def get_genre(self, song_id: int) -> str:
        return self._require_song(song_id).genre

    def get_tags(self, song_id: int) -> List[str]:
        return list(self._require_song(song_id).tags)

    def get_artist(self, song_id: int) -> str:
        return self._require_song(song_id).artist

    def get_total_count(self) -> int:
        return self.allocator.current()

    def get_user_permission(self, song_id: int, user: str) -> bool:
        # A missing row is reported as NotFound, never as False
        record = self.permissions.get(self._require_id(song_id), user)
        if record is None:
            raise NotFoundError(f"No permission record for song {song_id} and user {user!r}")
        return record.authorized


__all__ = ["SongRegistry"]
