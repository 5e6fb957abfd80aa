import pytest

from songregistry.domain.registry import (
    DuplicateKeyError,
    IdentifierAllocator,
    LedgerClock,
    NotFoundError,
    PermissionStore,
    SongEntry,
    SongPermissionRecord,
    SongStore,
)


def _entry(song_id=7, **overrides):
    values = dict(
        id=song_id,
        title="Blue Train",
        artist="Coltrane",
        owner="SP-OWNER",
        duration=643,
        creation_height=4,
        genre="Jazz",
        tags=("hard bop",),
    )
    values.update(overrides)
    return SongEntry(**values)


@pytest.mark.unit
def test_song_store_get_returns_none_for_missing_row(db_session):
    assert SongStore(db_session).get(99) is None


@pytest.mark.unit
def test_song_store_insert_then_get(db_session):
    store = SongStore(db_session)
    store.insert(7, _entry())
    assert store.get(7) == _entry()


@pytest.mark.unit
def test_song_store_insert_refuses_existing_id(db_session, factories):
    factories.SongFactory(id=7)
    with pytest.raises(DuplicateKeyError):
        SongStore(db_session).insert(7, _entry())


@pytest.mark.unit
def test_song_store_set_requires_existing_row(db_session):
    with pytest.raises(NotFoundError):
        SongStore(db_session).set(7, _entry())


@pytest.mark.unit
def test_song_store_set_overwrites_row(db_session, factories):
    factories.SongFactory(id=7, title="Old")
    store = SongStore(db_session)
    store.set(7, _entry(title="New"))
    assert store.get(7).title == "New"


@pytest.mark.unit
def test_song_store_reads_factory_rows_as_entries(db_session, factories):
    row = factories.SongFactory(tags=["a", "b"])
    entry = SongStore(db_session).get(row.id)
    assert entry.tags == ("a", "b")
    assert entry.owner == row.owner


@pytest.mark.unit
def test_permission_store_distinguishes_missing_and_false(db_session, factories):
    permission = factories.SongPermissionFactory(authorized=False)
    store = PermissionStore(db_session)

    assert store.get(permission.song_id, permission.user) == SongPermissionRecord(authorized=False)
    assert store.get(permission.song_id, "someone-else") is None


@pytest.mark.unit
def test_permission_store_insert_refuses_existing_pair(db_session, factories):
    permission = factories.SongPermissionFactory()
    store = PermissionStore(db_session)
    with pytest.raises(DuplicateKeyError):
        store.insert(permission.song_id, permission.user, SongPermissionRecord(authorized=True))


@pytest.mark.unit
def test_allocator_advances_by_one(db_session):
    allocator = IdentifierAllocator(db_session)
    assert allocator.current() == 0
    assert allocator.next() == 1
    assert allocator.next() == 2
    assert allocator.current() == 2


@pytest.mark.unit
def test_ledger_and_allocator_are_independent(db_session):
    allocator = IdentifierAllocator(db_session)
    ledger = LedgerClock(db_session)
    allocator.next()
    assert ledger.current() == 0
    assert ledger.pending_height() == 1
    assert ledger.advance() == 1
    assert allocator.current() == 1
