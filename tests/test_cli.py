import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from activity_lens.cli import app
from activity_lens.models import ActivityEvent, EventKind, RepositorySummary
from activity_lens.platforms.github.fetcher import AccountData, FetchResult

runner = CliRunner()

EVENTS = [
    ActivityEvent(kind=EventKind.PUSH, repo="octo/api", created_at=datetime(2023, 11, 25, 20, 0, tzinfo=timezone.utc), commit_count=2),
]
REPOS = [RepositorySummary(name="octo/api", language="Python", size=10)]


def _account(username="octo", events=EVENTS, repos=REPOS, error=None) -> AccountData:
    if error:
        return AccountData(username=username, events=FetchResult(error=error), repos=FetchResult(error=error))
    return AccountData(username=username, events=FetchResult(items=list(events)), repos=FetchResult(items=list(repos)))


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setenv("ACTIVITY_LENS_CONFIG", str(path))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("ACTIVITY_LENS_TZ", raising=False)
    return path


def test_analyze_writes_report(config_file, tmp_path):
    out = tmp_path / "report.md"
    with patch("activity_lens.cli.fetch_account", new=AsyncMock(return_value=_account())):
        result = runner.invoke(app, ["analyze", "@octo", "--tz", "8", "--output", str(out)])
    assert result.exit_code == 0, result.output
    md = out.read_text()
    assert "**Primary language**: Python" in md
    assert "04:00–04:59 (UTC +8 (PHT))" in md


def test_analyze_uses_configured_timezone(config_file, tmp_path):
    config_file.write_text(json.dumps({"timezone_offset": -5}))
    out = tmp_path / "report.md"
    with patch("activity_lens.cli.fetch_account", new=AsyncMock(return_value=_account())):
        result = runner.invoke(app, ["analyze", "octo", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "15:00–15:59 (UTC -5)" in out.read_text()


def test_analyze_rejects_bad_timezone(config_file):
    result = runner.invoke(app, ["analyze", "octo", "--tz", "20"])
    assert result.exit_code == 1
    assert "Timezone offset" in result.output


def test_analyze_fetch_failure_exits(config_file):
    with patch("activity_lens.cli.fetch_account", new=AsyncMock(return_value=_account(error="User 'nobody' not found"))):
        result = runner.invoke(app, ["analyze", "nobody"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_analyze_open_launches_browser(config_file, tmp_path):
    with patch("activity_lens.cli.fetch_account", new=AsyncMock(return_value=_account())), \
         patch("activity_lens.cli.typer.launch") as launch:
        result = runner.invoke(app, ["analyze", "octo", "-o", str(tmp_path / "r.md"), "--open"])
    assert result.exit_code == 0, result.output
    launch.assert_called_once_with("https://github.com/octo")


def test_activity_lists_events(config_file):
    with patch("activity_lens.cli.fetch_events", new=AsyncMock(return_value=FetchResult(items=list(EVENTS)))) as events, \
         patch("activity_lens.cli.fetch_account") as account:
        result = runner.invoke(app, ["activity", "octo", "--limit", "5"])
    assert result.exit_code == 0, result.output
    account.assert_not_called()
    assert events.await_args.args[1:] == ("octo", 5)
    assert "Pushed 2 commits to octo/api" in result.output


def test_activity_empty_feed(config_file):
    with patch("activity_lens.cli.fetch_events", new=AsyncMock(return_value=FetchResult(items=[]))):
        result = runner.invoke(app, ["activity", "octo"])
    assert result.exit_code == 0
    assert "No recent public activity" in result.output


def test_watch_with_empty_watchlist(config_file):
    result = runner.invoke(app, ["watch"])
    assert result.exit_code == 0
    assert "Watchlist is empty" in result.output


def test_watch_profiles_each_account(config_file):
    config_file.write_text(json.dumps({"watchlist": ["octo", "ghost"]}))
    accounts = [_account("octo"), _account("ghost", error="User 'ghost' not found")]
    with patch("activity_lens.cli.fetch_accounts", new=AsyncMock(return_value=accounts)) as fetch:
        result = runner.invoke(app, ["watch"])
    assert result.exit_code == 0, result.output
    assert fetch.await_args.args[0] == ["octo", "ghost"]
    assert "@octo" in result.output
    assert "@ghost" in result.output


def test_config_set_timezone_and_show(config_file):
    result = runner.invoke(app, ["config", "set-timezone", "8"])
    assert result.exit_code == 0, result.output
    assert json.loads(config_file.read_text())["timezone_offset"] == 8
    result = runner.invoke(app, ["config", "show"])
    assert "UTC +8 (PHT)" in result.output


def test_config_set_negative_timezone(config_file):
    result = runner.invoke(app, ["config", "set-timezone", "--", "-5"])
    assert result.exit_code == 0, result.output
    assert json.loads(config_file.read_text())["timezone_offset"] == -5


def test_config_set_timezone_out_of_range(config_file):
    result = runner.invoke(app, ["config", "set-timezone", "15"])
    assert result.exit_code == 1
    assert not config_file.exists()


def test_config_token_roundtrip(config_file, monkeypatch):
    runner.invoke(app, ["config", "set-token", "ghp_abc"])
    assert json.loads(config_file.read_text())["token"] == "ghp_abc"
    runner.invoke(app, ["config", "clear-token"])
    assert json.loads(config_file.read_text())["token"] is None


def test_env_token_not_persisted(config_file, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    runner.invoke(app, ["config", "set-timezone", "3"])
    assert json.loads(config_file.read_text())["token"] is None


def test_config_watchlist(config_file):
    runner.invoke(app, ["config", "watch-add", "@octo"])
    runner.invoke(app, ["config", "watch-add", "OCTO"])
    runner.invoke(app, ["config", "watch-add", "torvalds"])
    assert json.loads(config_file.read_text())["watchlist"] == ["octo", "torvalds"]
    result = runner.invoke(app, ["config", "watch-remove", "octo"])
    assert result.exit_code == 0
    assert json.loads(config_file.read_text())["watchlist"] == ["torvalds"]
    result = runner.invoke(app, ["config", "watch-remove", "octo"])
    assert result.exit_code == 1


def test_activity_fetch_failure_exits(config_file):
    with patch("activity_lens.cli.fetch_events", new=AsyncMock(return_value=FetchResult(error="User 'nobody' not found"))):
        result = runner.invoke(app, ["activity", "nobody"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_watch_marks_partially_fetched_account(config_file):
    config_file.write_text(json.dumps({"watchlist": ["octo"]}))
    partial = AccountData(
        username="octo",
        events=FetchResult(items=list(EVENTS)),
        repos=FetchResult(error="GitHub API rate limit exceeded"),
    )
    with patch("activity_lens.cli.fetch_accounts", new=AsyncMock(return_value=[partial])):
        result = runner.invoke(app, ["watch"])
    assert result.exit_code == 0, result.output
    assert "partial" in result.output


def test_watch_complete_account_not_marked_partial(config_file):
    config_file.write_text(json.dumps({"watchlist": ["octo"]}))
    with patch("activity_lens.cli.fetch_accounts", new=AsyncMock(return_value=[_account("octo")])):
        result = runner.invoke(app, ["watch"])
    assert result.exit_code == 0, result.output
    assert "partial" not in result.output
