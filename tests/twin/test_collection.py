"""Tests for collection proxy mutation and tracking."""

import pytest
from conftest import Song

from twinkit import Twin


@pytest.fixture
def songs(persisted_twin):
    return persisted_twin["songs"]


def test_append_twins_and_tracks_added(songs):
    song = Song("Ratamahatta", 3)

    twin = songs.append(song)

    assert isinstance(twin, Twin)
    assert twin.model is song
    assert twin in songs.current
    assert songs.added == (twin,)
    assert songs.changed()


def test_append_keeps_existing_twin(songs, album_schema):
    element = Twin(album_schema["songs"].schema, Song("Dictatorshit"))

    assert songs.append(element) is element


def test_append_none_is_rejected(songs):
    with pytest.raises(TypeError, match="cannot hold None"):
        songs.append(None)


def test_insert_at_position(songs):
    twin = songs.insert(0, Song("Intro", 0))

    assert songs[0] is twin
    assert len(songs) == 3
    assert twin in songs.added


def test_extend(songs):
    added = songs.extend([Song("a"), Song("b")])

    assert list(songs.added) == added
    assert len(songs) == 4


def test_delete_removes_without_destroying(songs):
    first = songs[0]

    songs.delete(first)

    assert first not in songs
    assert songs.deleted == (first,)
    assert songs.to_destroy == ()
    assert first.model.destroys == 0


def test_destroy_removes_and_marks_for_destruction(songs):
    first = songs[0]

    songs.destroy(first)

    assert first not in songs.current
    assert songs.to_destroy == (first,)
    assert first in songs.deleted
    assert songs.destroyed == ()
    assert first.model.destroys == 0


def test_delete_of_non_member_raises(songs, album_schema):
    stranger = Twin(album_schema["songs"].schema, Song("Stranger"))

    with pytest.raises(ValueError, match="not in collection"):
        songs.delete(stranger)
    with pytest.raises(ValueError, match="not in collection"):
        songs.destroy(stranger)


def test_membership_is_by_identity(songs, album_schema):
    lookalike = Twin(album_schema["songs"].schema, songs[0].model)

    assert lookalike not in songs


def test_replace_tracks_old_as_deleted_and_new_as_added(songs):
    old = songs[1]

    songs[1] = Song("Breed Apart", 2)

    assert songs[1]["name"] == "Breed Apart"
    assert songs.deleted == (old,)
    assert songs.added == (songs[1],)


def test_replace_with_same_twin_is_noop(songs):
    same = songs[0]

    songs.replace(0, same)

    assert songs.added == ()
    assert songs.deleted == ()


def test_move_reorders_without_tracking(songs):
    first, second = songs.current

    songs.move(first, 1)

    assert songs.current == (second, first)
    assert songs.index(first) == 1
    assert not songs.changed()


def test_find_by(songs):
    assert songs.find_by(index=2) is songs[1]
    assert songs.find_by(name="Roots Bloody Roots", index=1) is songs[0]
    assert songs.find_by(name="missing") is None


def test_element_change_marks_collection_changed(songs):
    songs[0]["name"] = "Roots"

    assert songs.changed()
    assert songs.added == ()


def test_models_in_current_order(songs, persisted_album):
    songs.move(songs[1], 0)

    assert songs.models() == [persisted_album.songs[1], persisted_album.songs[0]]


def test_finalize_destroys_runs_once(songs):
    doomed = songs[0]
    songs.destroy(doomed)

    assert songs.finalize_destroys() == [doomed]
    assert songs.finalize_destroys() == []
    assert songs.destroyed == (doomed,)
    assert doomed.model.destroys == 1


def test_tracking_views_are_read_only_snapshots(songs):
    added = songs.added
    songs.append(Song("x"))

    assert added == ()
    assert len(songs.added) == 1


def test_readding_deleted_element_clears_deleted(songs):
    first = songs[0]
    songs.delete(first)

    songs.append(first)

    assert first in songs.current
    assert first not in songs.deleted
    assert first in songs.added


def test_readding_destroyed_element_cancels_destruction(songs, persisted_twin, persisted_album):
    """CRITICAL: A live element is never both current and pending destruction."""
    first = songs[0]
    songs.destroy(first)

    songs.insert(0, first)
    persisted_twin.save()

    assert songs.to_destroy == ()
    assert songs.destroyed == ()
    assert first.model.destroys == 0
    assert persisted_album.songs[0] is first.model


def test_destroyed_element_cannot_rejoin(songs):
    first = songs[0]
    songs.destroy(first)
    songs.finalize_destroys()

    with pytest.raises(ValueError, match="was destroyed"):
        songs.append(first)
    assert first not in songs.current
