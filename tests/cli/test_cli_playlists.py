"""Tests for the playlists command group and the console chooser."""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from src.application.services import CurationService
from src.domain.entities import ConnectorArtist, Playlist, PlaylistDetail
from src.domain.errors import InputError
from src.infrastructure.cli.app import app
from src.infrastructure.cli.ui import ConsoleArtistChooser, parse_choice

RADAR = "spotify:playlist:radar"


@pytest.fixture
def runner():
    """CLI test runner."""
    return CliRunner()


@pytest.fixture
def service(store, music):
    service = CurationService(store=store, music=music, chooser=ConsoleArtistChooser())
    with (
        patch(
            "src.infrastructure.cli.async_helpers.build_curation_service",
            new=AsyncMock(return_value=service),
        ),
        patch("src.infrastructure.cli.app.setup_loguru_logger"),
    ):
        yield service


@pytest.fixture
def radar(store):
    store.playlists.append((RADAR, "Radar"))
    return RADAR


class TestListAndShow:
    def test_list_marks_automated_playlists(self, runner, service, music, store, radar):
        store.links = [(radar, "spotify:artist:1"), (radar, "spotify:artist:2")]
        music.user_playlists = [Playlist(id="spotify:playlist:mix", name="Mix")]

        result = runner.invoke(app, ["playlists", "list"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Radar [automated, number of artists: 2]",
            "Mix",
        ]

    def test_show_prints_artists_and_metadata(self, runner, service, music, store, radar):
        music.add_artist("spotify:artist:1", "Boards", popularity=60, follower_count=900)
        store.links = [(radar, "spotify:artist:1")]
        music.details[radar] = PlaylistDetail(
            id=radar, name="Radar", track_count=12, follower_count=3, public=True
        )

        result = runner.invoke(app, ["playlists", "show", "Radar"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Artists:",
            "\tBoards (popularity: 60, followers: 900)",
            "Description: ",
            "Number of tracks: 12",
            "Number of followers: 3",
            "Is collaborative: False",
            "Is public: True",
        ]

    def test_show_unknown_playlist_fails(self, runner, service):
        result = runner.invoke(app, ["playlists", "show", "Missing"])

        assert result.exit_code == 1
        assert "No automated playlist named 'Missing'" in result.output


class TestRegistryCommands:
    """Test create, automate, link and unlink."""

    def test_create(self, runner, service, store):
        result = runner.invoke(app, ["playlists", "create", "Fresh"])

        assert result.exit_code == 0
        assert "Created automated playlist 'Fresh'" in result.output
        assert [name for _, name in store.playlists] == ["Fresh"]

    def test_automate_unknown_playlist_fails(self, runner, service, store):
        result = runner.invoke(app, ["playlists", "automate", "Missing"])

        assert result.exit_code == 1
        assert store.playlists == []

    def test_link_prompts_until_choice_is_valid(self, runner, service, music, store, radar):
        first = music.add_artist("spotify:artist:1", "Boards", follower_count=10)
        second = music.add_artist("spotify:artist:2", "Boards of Canada", follower_count=20)
        music.search_results["boards"] = [first, second]

        result = runner.invoke(
            app, ["playlists", "link", "Radar", "boards"], input="7\nabc\n2\n"
        )

        assert result.exit_code == 0
        assert "choose one of the following artists:" in result.output
        assert "[1] Boards (followers: 10)" in result.output
        assert "[2] Boards of Canada (followers: 20)" in result.output
        assert result.output.count("Wrong choice. Try again") == 2
        assert store.links == [(radar, "spotify:artist:2")]

    def test_link_with_seed(self, runner, service, music, radar):
        artist = music.add_artist("spotify:artist:1", "Boards", top_track_count=6)
        music.search_results["boards"] = [artist]

        result = runner.invoke(
            app, ["playlists", "link", "Radar", "boards", "--seed", "3"], input="1\n"
        )

        assert result.exit_code == 0
        assert "Added 3 top tracks" in result.output
        assert len(music.added[0][1]) == 3

    def test_duplicate_link_fails(self, runner, service, music, store, radar):
        artist = music.add_artist("spotify:artist:1", "Boards")
        music.search_results["boards"] = [artist]
        store.links = [(radar, artist.id)]

        result = runner.invoke(app, ["playlists", "link", "Radar", "boards"], input="1\n")

        assert result.exit_code == 1
        assert "already linked" in result.output

    def test_unlink(self, runner, service, music, store, radar):
        artist = music.add_artist("spotify:artist:1", "Boards")
        music.search_results["boards"] = [artist]
        store.links = [(radar, artist.id)]

        result = runner.invoke(app, ["playlists", "unlink", "Radar", "boards"])

        assert result.exit_code == 0
        assert "Unlinked Boards from 'Radar'" in result.output
        assert store.links == []


class TestUpdateCommand:
    def test_prints_one_line_per_playlist(self, runner, service, music, store, radar):
        music.add_artist("spotify:artist:1", "Boards", top_track_count=9)
        store.links = [(radar, "spotify:artist:1")]

        result = runner.invoke(app, ["playlists", "update"])

        assert result.exit_code == 0
        assert "Radar: 5 tracks added" in result.output

    def test_failure_exits_with_error(self, runner, service, music, store, radar):
        store.links = [(radar, "spotify:artist:1")]
        music.fail_on.add("playlist_detail")

        result = runner.invoke(app, ["playlists", "update"])

        assert result.exit_code == 1
        assert "Error during update playlists" in result.output


class TestConsoleArtistChooser:
    """Test the line-oriented chooser without the CLI."""

    def test_returns_chosen_candidate(self):
        answers = iter(["0", "3", "2"])
        written = []
        chooser = ConsoleArtistChooser(read_line=lambda: next(answers), write_line=written.append)
        candidates = [ConnectorArtist("spotify:artist:1", "A"), ConnectorArtist("spotify:artist:2", "B")]

        assert chooser.choose_artist(candidates) == candidates[1]
        assert written.count("Wrong choice. Try again") == 2

    @pytest.mark.parametrize(("text", "expected"), [("1", 0), (" 3 \n", 2)])
    def test_parse_choice_is_one_based(self, text, expected):
        assert parse_choice(text, 3) == expected

    @pytest.mark.parametrize("text", ["0", "4", "", "two"])
    def test_parse_choice_rejects_out_of_range(self, text):
        with pytest.raises(InputError):
            parse_choice(text, 3)
