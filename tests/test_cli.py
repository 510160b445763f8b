"""Tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from feedscout import __version__
from feedscout import cli
from feedscout import config as config_module
from feedscout.errors import NotFoundError, RequestError
from feedscout.models import FeedCandidate, FeedKind

runner = CliRunner()

FEEDS = [
    FeedCandidate(url="https://example.com/feed.xml", kind=FeedKind.RSS, title="Example RSS Feed"),
    FeedCandidate(url="https://example.com/atom.xml", kind=FeedKind.ATOM),
]


@pytest.fixture(autouse=True)
def no_config_files(monkeypatch, tmp_path):
    """Keep user config files out of the tests."""
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATHS", [tmp_path / "none.yaml"])


@pytest.fixture
def fake_find_feeds(monkeypatch):
    """Replace discovery with a recorder returning FEEDS."""
    calls = []

    async def fake(url, options=None, **kwargs):
        calls.append((url, options))
        return FEEDS

    monkeypatch.setattr(cli, "find_feeds", fake)
    return calls


class TestCli:
    """Tests for the feedscout command."""

    def test_prints_one_url_per_line(self, fake_find_feeds):
        """Test plain output."""
        result = runner.invoke(cli.app, ["https://example.com"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "https://example.com/feed.xml",
            "https://example.com/atom.xml",
        ]

    def test_with_attributes(self, fake_find_feeds):
        """Test attribute output, omitting empty titles."""
        result = runner.invoke(cli.app, ["https://example.com", "--with-attributes"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "https://example.com/feed.xml title=Example RSS Feed type=rss",
            "https://example.com/atom.xml type=atom",
        ]

    def test_options_passed_through(self, fake_find_feeds):
        """Test that flags reach the discovery options."""
        result = runner.invoke(
            cli.app,
            ["example.com", "--scan-common-paths", "--max-concurrency", "6", "--timeout", "4"],
        )
        assert result.exit_code == 0
        url, options = fake_find_feeds[0]
        assert url == "https://example.com"
        assert options.scan_common_paths is True
        assert options.max_concurrency == 6
        assert options.timeout == 4.0

    def test_fallback_off_by_default(self, fake_find_feeds):
        """Test that probing is disabled unless requested."""
        runner.invoke(cli.app, ["https://example.com"])
        _, options = fake_find_feeds[0]
        assert options.scan_common_paths is False

    def test_config_file(self, fake_find_feeds, tmp_path):
        """Test that a config file supplies defaults."""
        path = tmp_path / "custom.yaml"
        path.write_text("discovery:\n  scan_common_paths: true\n  max_concurrency: 9\n")
        result = runner.invoke(cli.app, ["https://example.com", "--config", str(path)])
        assert result.exit_code == 0
        _, options = fake_find_feeds[0]
        assert options.scan_common_paths is True
        assert options.max_concurrency == 9

    def test_missing_config_file(self, fake_find_feeds, tmp_path):
        """Test that a missing config file is an error."""
        result = runner.invoke(
            cli.app, ["https://example.com", "--config", str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code == 1
        assert fake_find_feeds == []

    def test_not_found(self, monkeypatch):
        """Test exit code and message when no feeds exist."""

        async def fake(url, options=None, **kwargs):
            raise NotFoundError(url)

        monkeypatch.setattr(cli, "find_feeds", fake)
        result = runner.invoke(cli.app, ["https://example.com"])
        assert result.exit_code == 1
        assert "Error: no feeds found" in result.output

    def test_request_error(self, monkeypatch):
        """Test exit code and message on HTTP failure."""

        async def fake(url, options=None, **kwargs):
            raise RequestError(url, status_code=404)

        monkeypatch.setattr(cli, "find_feeds", fake)
        result = runner.invoke(cli.app, ["https://example.com"])
        assert result.exit_code == 1
        assert "Error: HTTP request failed with status 404" in result.output

    def test_invalid_url(self, fake_find_feeds):
        """Test that unusable URLs are rejected before any request."""
        result = runner.invoke(cli.app, ["https://exa mple.com:port/"])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert fake_find_feeds == []

    def test_version(self):
        """Test --version without a URL."""
        result = runner.invoke(cli.app, ["--version"])
        assert result.exit_code == 0
        assert f"feedscout v{__version__}" in result.output

    def test_missing_url(self):
        """Test that the URL argument is required."""
        result = runner.invoke(cli.app, [])
        assert result.exit_code != 0


class TestFormatFeed:
    """Tests for output formatting."""

    def test_plain(self):
        """Test URL-only output."""
        assert cli.format_feed(FEEDS[0]) == "https://example.com/feed.xml"

    def test_attributes(self):
        """Test attribute output."""
        assert (
            cli.format_feed(FEEDS[0], with_attributes=True)
            == "https://example.com/feed.xml title=Example RSS Feed type=rss"
        )


class TestCliOutputIsLiteral:
    """Tests that feed text is printed exactly as discovered."""

    def test_emoji_codes_in_title_and_url(self, monkeypatch):
        """Test that :name: tokens are not turned into emoji."""
        feed = FeedCandidate(
            url="https://example.com/tag/:fire:/feed",
            kind=FeedKind.RSS,
            title="Hot :fire: news",
        )

        async def fake(url, options=None, **kwargs):
            return [feed]

        monkeypatch.setattr(cli, "find_feeds", fake)
        result = runner.invoke(cli.app, ["https://example.com", "--with-attributes"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "https://example.com/tag/:fire:/feed title=Hot :fire: news type=rss"
        ]

    def test_emoji_codes_in_error(self, monkeypatch):
        """Test that error messages keep :name: tokens."""

        async def fake(url, options=None, **kwargs):
            raise RequestError("https://example.com/:fire:", cause=OSError("bad :fire: host"))

        monkeypatch.setattr(cli, "find_feeds", fake)
        result = runner.invoke(cli.app, ["https://example.com"])
        assert result.exit_code == 1
        assert ":fire:" in result.output
        assert "\U0001f525" not in result.output


class TestCliConfigErrors:
    """Tests for invalid configuration values."""

    @pytest.mark.parametrize(
        "body",
        [
            "discovery:\n  max_concurrency: lots\n",
            "discovery:\n  timeout: soon\n",
            "discovery:\n  max_head_size: [1, 2]\n",
        ],
    )
    def test_invalid_value_is_reported(self, fake_find_feeds, tmp_path, body):
        """Test that bad values exit with an error instead of a traceback."""
        path = tmp_path / "bad.yaml"
        path.write_text(body)
        result = runner.invoke(cli.app, ["https://example.com", "--config", str(path)])
        assert result.exit_code == 1
        assert "Error loading config:" in result.output
        assert "discovery." in result.output
        assert not isinstance(result.exception, ValueError)
        assert fake_find_feeds == []
