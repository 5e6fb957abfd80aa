from __future__ import annotations

import logging
from typing import Optional

from songregistry.database.db_manager import (
    TOTAL_COUNT_KEY,
    RegistryState,
    Song,
    SongPermission,
)

from .errors import DuplicateKeyError, NotFoundError
from .models import SongEntry, SongPermissionRecord


logger = logging.getLogger(__name__)


class SongStore:
    """Point access to song rows, returned as ``SongEntry`` records."""

    def __init__(self, session) -> None:
        self.session = session

    def get(self, song_id: int) -> Optional[SongEntry]:
        row = self.session.get(Song, song_id)
        if row is None:
            return None
        return SongEntry.model_validate(row.to_dict())

    def insert(self, song_id: int, entry: SongEntry) -> None:
        if self.session.get(Song, song_id) is not None:
            raise DuplicateKeyError(f"Song {song_id} already exists")
        row = Song(id=song_id)
        self._write(row, entry)
        self.session.add(row)
        self.session.flush()

    def set(self, song_id: int, entry: SongEntry) -> None:
        row = self.session.get(Song, song_id)
        if row is None:
            raise NotFoundError(f"Song {song_id} not found")
        self._write(row, entry)
        self.session.flush()

    @staticmethod
    def _write(row: Song, entry: SongEntry) -> None:
        row.title = entry.title
        row.artist = entry.artist
        row.owner = entry.owner
        row.duration = entry.duration
        row.creation_height = entry.creation_height
        row.genre = entry.genre
        row.tags = list(entry.tags)


class PermissionStore:
    def __init__(self, session) -> None:
        self.session = session

    def get(self, song_id: int, user: str) -> Optional[SongPermissionRecord]:
        row = self.session.get(SongPermission, (song_id, user))
        if row is None:
            return None
        return SongPermissionRecord(authorized=row.authorized)

    def insert(self, song_id: int, user: str, record: SongPermissionRecord) -> None:
        if self.session.get(SongPermission, (song_id, user)) is not None:
            raise DuplicateKeyError(f"Permission for song {song_id} and {user!r} already exists")
        self.session.add(SongPermission(song_id=song_id, user=user, authorized=record.authorized))
        self.session.flush()


class StateCell:
    """A single named integer in ``registry_state`` that only moves forward."""

    def __init__(self, session, name: str) -> None:
        self.session = session
        self.name = name

    def _row(self) -> RegistryState:
        row = self.session.get(RegistryState, self.name)
        if row is None:
            row = RegistryState(name=self.name, value=0)
            self.session.add(row)
        return row

    def current(self) -> int:
        row = self.session.get(RegistryState, self.name)
        return int(row.value) if row is not None else 0

    def advance(self) -> int:
        row = self._row()
        row.value = int(row.value or 0) + 1
        self.session.flush()
        return row.value


class IdentifierAllocator(StateCell):
    """Hands out song ids: ``next()`` returns ``current + 1`` and persists it."""

    def __init__(self, session) -> None:
        super().__init__(session, TOTAL_COUNT_KEY)

    def next(self) -> int:
        song_id = self.advance()
        logger.debug("Allocated song id %s", song_id)
        return song_id


__all__ = ["SongStore", "PermissionStore", "StateCell", "IdentifierAllocator"]
