"""Tests for sync: write-back of a twin graph into its models.

Critical Invariants:
- Nothing reaches the model before sync
- Sync of an unmodified graph leaves the model as it was
- Sync twice equals sync once
- Block mode never writes a model
"""

import copy

from hypothesis import given
from hypothesis import strategies as st

from conftest import Album, Artist, Song, build_album_schema
from twinkit import Schema, Twin, sync, to_nested

ALBUM_SCHEMA = build_album_schema()

albums = st.builds(
    Album,
    st.text(max_size=20),
    songs=st.lists(st.builds(Song, st.text(max_size=10), st.integers()), max_size=3),
    artist=st.none() | st.builds(Artist, st.text(max_size=10)),
)


def test_album_scenario(album_schema, album):
    """Title change and song append reach the model only on sync."""
    twin = Twin(album_schema, album)

    twin["title"] = "Skamobile"
    twin["songs"].append(Song("Adondo", 1))

    assert album.title == "Nice Try"
    assert album.songs == []

    twin.sync()

    assert album.title == "Skamobile"
    assert album.songs == [Song("Adondo", 1)]
    assert twin.changed("title")
    assert twin["songs"].changed()


def test_album_scenario_with_block(album_schema, album):
    twin = Twin(album_schema, album)
    twin["title"] = "Skamobile"
    twin["songs"].append(Song("Adondo", 1))
    received = []

    result = twin.sync(lambda nested: received.append(nested) or "done")

    assert result == "done"
    assert received == [
        {
            "title": "Skamobile",
            "artist": None,
            "songs": [{"name": "Adondo", "index": 1, "composer": None}],
        }
    ]
    assert album.title == "Nice Try"
    assert album.songs == []


@given(album=albums)
def test_round_trip_without_writes_is_noop(album):
    """PROPERTY: Building a twin and syncing it leaves the model unchanged."""
    before = copy.deepcopy(album)

    sync(Twin(ALBUM_SCHEMA, album))

    assert album == before


@given(album=albums, title=st.text(max_size=20))
def test_sync_is_idempotent(album, title):
    """PROPERTY: Syncing twice produces the same model state as syncing once."""
    twin = Twin(ALBUM_SCHEMA, album)
    twin["title"] = title
    twin["songs"].append(Song("extra", 99))

    sync(twin)
    once = copy.deepcopy(album)
    sync(twin)

    assert album == once


def test_nested_twin_synced_before_parent_reference(persisted_twin, persisted_album):
    artist = persisted_album.artist
    persisted_twin["artist"]["name"] = "Soulfly"

    persisted_twin.sync()

    assert persisted_album.artist is artist
    assert artist.name == "Soulfly"


def test_new_nested_model_is_written(twin, album):
    twin["artist"] = Artist("Less Than Jake")
    twin["artist"]["name"] = "LTJ"

    twin.sync()

    assert album.artist == Artist("LTJ")


def test_collection_writes_list_of_element_models(persisted_twin, persisted_album):
    songs = persisted_twin["songs"]
    first, second = persisted_album.songs
    songs.delete(songs[0])
    songs[0]["name"] = "Attitude (remaster)"
    songs.append(Song("Ratamahatta", 3))

    persisted_twin.sync()

    assert persisted_album.songs[0] is second
    assert second.name == "Attitude (remaster)"
    assert [s.name for s in persisted_album.songs] == ["Attitude (remaster)", "Ratamahatta"]
    assert first.name == "Roots Bloody Roots"


def test_deep_nested_write(persisted_twin, persisted_album):
    persisted_twin["songs"][0]["composer"] = Artist("Igor")

    persisted_twin.sync()

    assert persisted_album.songs[0].composer == Artist("Igor")


def test_virtual_and_unwriteable_properties_are_skipped():
    schema = (
        Schema("Album")
        .property("title")
        .property("note", virtual=True)
        .property("artist", writeable=False, nested=lambda a: a.property("name"))
    )
    album = Album("Nice Try", artist=Artist("Bosstones"))
    twin = Twin(schema, album)
    twin["note"] = "draft"
    twin["artist"] = Artist("Other")

    twin.sync()

    assert album.artist == Artist("Bosstones")
    assert to_nested(twin) == {"title": "Nice Try"}


def test_to_nested_of_persisted_graph(persisted_twin):
    nested = to_nested(persisted_twin)

    assert nested == {
        "title": "Roots",
        "artist": {"name": "Sepultura"},
        "songs": [
            {"name": "Roots Bloody Roots", "index": 1, "composer": None},
            {"name": "Attitude", "index": 2, "composer": None},
        ],
    }
