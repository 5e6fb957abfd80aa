"""Factory Boy factories for database models used in tests."""

import factory
from factory.alchemy import SQLAlchemyModelFactory

from songregistry.database.db_manager import Song, SongPermission


class _BaseFactory(SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "flush"


class SongFactory(_BaseFactory):
    class Meta:
        model = Song

    # Rows written straight to the table; the registry counter is not touched
    id = factory.Sequence(lambda n: n + 1)
    title = factory.Sequence(lambda n: f"Song {n}")
    artist = factory.Sequence(lambda n: f"Artist {n}")
    owner = "SP-OWNER"
    duration = 180
    creation_height = 1
    genre = "Rock"
    tags = factory.LazyFunction(lambda: ["live"])


class SongPermissionFactory(_BaseFactory):
    class Meta:
        model = SongPermission

    song = factory.SubFactory(SongFactory)
    user = factory.LazyAttribute(lambda obj: obj.song.owner)
    authorized = True


_FACTORIES = [SongFactory, SongPermissionFactory]


def set_session(session):
    for factory_cls in _FACTORIES:
        factory_cls._meta.sqlalchemy_session = session


def reset_session():
    for factory_cls in _FACTORIES:
        factory_cls._meta.sqlalchemy_session = None


__all__ = [
    "SongFactory",
    "SongPermissionFactory",
    "set_session",
    "reset_session",
]
