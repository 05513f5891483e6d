"""Tests for change tracking across the twin graph.

Critical Invariants:
- changed() is False right after construction, overrides included
- Only writer calls mark properties dirty
- Nested twins and collections propagate their state to the parent
"""

from hypothesis import given
from hypothesis import strategies as st

from conftest import Album, Song, build_album_schema
from twinkit import Twin, TwinSettings
from twinkit.twin import ChangeTracker

ALBUM_SCHEMA = build_album_schema()

titles = st.text(max_size=20)
song_lists = st.lists(st.builds(Song, st.text(max_size=10), st.integers()), max_size=4)


@given(title=titles, songs=song_lists, override_title=st.none() | titles)
def test_never_changed_after_construction(title, songs, override_title):
    """PROPERTY: A freshly built twin reports no change, even with overrides."""
    overrides = {} if override_title is None else {"title": override_title}

    twin = Twin(ALBUM_SCHEMA, Album(title, songs=songs), overrides)

    assert not twin.changed()
    assert twin.changed_properties() == []
    assert twin.changes.dirty_names() == ()


@given(title=titles, value=titles)
def test_write_reads_back_and_marks_dirty(title, value):
    """PROPERTY: set(p, v) then get(p) == v and changed(p), model untouched."""
    album = Album(title)
    twin = Twin(ALBUM_SCHEMA, album)

    twin["title"] = value

    assert twin["title"] == value
    assert twin.changed("title")
    assert album.title == title


def test_identical_write_marks_dirty_by_default(twin):
    twin["title"] = twin["title"]

    assert twin.changed("title")


def test_identical_write_ignored_when_configured(album_schema, album):
    twin = Twin(album_schema, album, settings=TwinSettings(mark_identical_writes_dirty=False))

    twin["title"] = "Nice Try"
    assert not twin.changed()

    twin["title"] = "Skamobile"
    assert twin.changed("title")


def test_nested_change_propagates(persisted_twin):
    persisted_twin["artist"]["name"] = "Soulfly"

    assert persisted_twin.changed("artist")
    assert persisted_twin.changed()
    assert not persisted_twin.changed("title")
    assert persisted_twin.changed_properties() == ["artist"]
    assert persisted_twin.changes.dirty_names() == ()


def test_deep_collection_change_propagates(persisted_twin):
    from conftest import Artist

    persisted_twin["songs"][1]["composer"] = Artist("Max Cavalera")

    assert persisted_twin["songs"][1].changed("composer")
    assert persisted_twin.changed("songs")
    assert persisted_twin.changed()


def test_collection_delete_propagates(persisted_twin):
    songs = persisted_twin["songs"]
    songs.delete(songs[0])

    assert persisted_twin.changed("songs")


def test_tracker_records_first_write_order():
    tracker = ChangeTracker()

    tracker.mark("b")
    tracker.mark("a")
    tracker.mark("b")

    assert tracker.dirty_names() == ("b", "a")
    assert tracker.is_dirty("a")
    assert not tracker.is_dirty("c")
    assert not tracker.persisted_at_construction
