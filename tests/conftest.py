"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass, field

from twinkit import Schema, Twin


@dataclass
class Artist:
    name: str
    persisted: bool = field(default=False, compare=False)
    saves: int = field(default=0, compare=False)

    def save(self) -> bool:
        self.saves += 1
        self.persisted = True
        return True


@dataclass
class Song:
    name: str
    index: int = 0
    composer: Artist | None = None
    persisted: bool = field(default=False, compare=False)
    saves: int = field(default=0, compare=False)
    destroys: int = field(default=0, compare=False)

    def save(self) -> bool:
        self.saves += 1
        self.persisted = True
        return True

    def destroy(self) -> bool:
        self.destroys += 1
        return True


@dataclass
class Album:
    title: str
    songs: list[Song] = field(default_factory=list)
    artist: Artist | None = None
    persisted: bool = field(default=False, compare=False)
    saves: int = field(default=0, compare=False)

    def save(self) -> bool:
        self.saves += 1
        self.persisted = True
        return True


def build_album_schema() -> Schema:
    """Album with nested artist and a songs collection with a nested composer."""
    artist = Schema("Artist").property("name")
    song = (
        Schema("Song")
        .property("name")
        .property("index")
        .property("composer", twin=artist)
    )
    return (
        Schema("Album")
        .property("title")
        .property("artist", twin=artist)
        .collection("songs", twin=song)
    )


@pytest.fixture
def album_schema():
    """Fresh Album schema."""
    return build_album_schema()


@pytest.fixture
def album():
    """Unsaved album with no songs."""
    return Album("Nice Try")


@pytest.fixture
def persisted_album():
    """Album already in storage with two songs and an artist."""
    return Album(
        "Roots",
        songs=[
            Song("Roots Bloody Roots", 1, persisted=True),
            Song("Attitude", 2, persisted=True),
        ],
        artist=Artist("Sepultura", persisted=True),
        persisted=True,
    )


@pytest.fixture
def twin(album_schema, album):
    """Twin over the unsaved album."""
    return Twin(album_schema, album)


@pytest.fixture
def persisted_twin(album_schema, persisted_album):
    """Twin over the persisted album."""
    return Twin(album_schema, persisted_album)
