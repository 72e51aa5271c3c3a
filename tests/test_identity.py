"""Tests for songstore.identity module."""

from unittest.mock import patch

from songstore.identity import generate_song_key, generate_unique_id
from songstore.schemas.fingerprint import UINT32_MAX


class TestGenerateUniqueId:
    def test_within_uint32_and_non_zero(self) -> None:
        for _ in range(200):
            song_id = generate_unique_id()
            assert 0 < song_id <= UINT32_MAX

    def test_bounds(self) -> None:
        with patch("songstore.identity.secrets.randbelow", return_value=0):
            assert generate_unique_id() == 1
        with patch("songstore.identity.secrets.randbelow", return_value=UINT32_MAX - 1):
            assert generate_unique_id() == UINT32_MAX


class TestGenerateSongKey:
    def test_deterministic(self) -> None:
        assert generate_song_key("Song A", "Artist X") == generate_song_key("Song A", "Artist X")

    def test_format(self) -> None:
        assert generate_song_key("Song A", "Artist X") == "Song A---Artist X"

    def test_title_and_artist_not_interchangeable(self) -> None:
        assert generate_song_key("A", "B") != generate_song_key("B", "A")
